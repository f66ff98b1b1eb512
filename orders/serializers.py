from rest_framework import serializers

from common.pagination import PaginationQuerySerializer


class CreateOrderSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)


class UpdateOrderSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)


class OrderQuerySerializer(PaginationQuerySerializer):
    userId = serializers.IntegerField(required=False, min_value=1)
    dateFrom = serializers.DateTimeField(required=False)
    dateTo = serializers.DateTimeField(required=False)

    def validate(self, data):
        if data.get("dateFrom") and data.get("dateTo") and data["dateFrom"] > data["dateTo"]:
            raise serializers.ValidationError({"dateTo": "dateTo must not be before dateFrom."})
        return data


class OrderResponseSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    userId = serializers.IntegerField(source="user_id")
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    promoCodeId = serializers.IntegerField(source="promo_code_id", allow_null=True)
    discountAmount = serializers.DecimalField(
        max_digits=12, decimal_places=2, source="discount_amount", allow_null=True
    )
    finalAmount = serializers.DecimalField(max_digits=12, decimal_places=2, source="final_amount")
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")
