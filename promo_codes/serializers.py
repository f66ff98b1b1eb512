from rest_framework import serializers

from common.pagination import PaginationQuerySerializer


class CreatePromoCodeSerializer(serializers.Serializer):
    code = serializers.RegexField(r"^[A-Za-z0-9]+$", min_length=3, max_length=50)
    discountPercent = serializers.IntegerField(min_value=1, max_value=100)
    totalLimit = serializers.IntegerField(min_value=1)
    perUserLimit = serializers.IntegerField(min_value=1)
    startsAt = serializers.DateTimeField(required=False, allow_null=True)
    endsAt = serializers.DateTimeField(required=False, allow_null=True)

    def validate_code(self, value):
        return value.upper()

    def validate(self, data):
        starts_at = data.get("startsAt")
        ends_at = data.get("endsAt")
        if starts_at and ends_at and starts_at >= ends_at:
            raise serializers.ValidationError({"endsAt": "End date must be after start date."})
        return data


class UpdatePromoCodeSerializer(serializers.Serializer):
    discountPercent = serializers.IntegerField(min_value=1, max_value=100, required=False)
    isActive = serializers.BooleanField(required=False)


class PromoCodeQuerySerializer(PaginationQuerySerializer):
    search = serializers.CharField(required=False)
    isActive = serializers.BooleanField(required=False, allow_null=True, default=None)


class ApplyPromoCodeSerializer(serializers.Serializer):
    orderId = serializers.IntegerField(min_value=1)
    promoCode = serializers.CharField(max_length=50)


class PromoCodeResponseSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    code = serializers.CharField()
    discountPercent = serializers.IntegerField(source="discount_percent")
    totalLimit = serializers.IntegerField(source="total_limit")
    perUserLimit = serializers.IntegerField(source="per_user_limit")
    usedCount = serializers.IntegerField(source="used_count")
    isActive = serializers.BooleanField(source="is_active")
    startsAt = serializers.DateTimeField(source="starts_at", allow_null=True)
    endsAt = serializers.DateTimeField(source="ends_at", allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")


class ApplyPromoCodeResponseSerializer(serializers.Serializer):
    discountAmount = serializers.DecimalField(max_digits=12, decimal_places=2, source="discount_amount")
    finalAmount = serializers.DecimalField(max_digits=12, decimal_places=2, source="final_amount")
    promoCode = serializers.CharField(source="promo_code")
