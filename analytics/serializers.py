from rest_framework import serializers

from common.pagination import PaginationQuerySerializer

from .services import DATE_PRESETS, LAST_30_DAYS


class DateRangeQuerySerializer(serializers.Serializer):
    dateFrom = serializers.DateField(required=False)
    dateTo = serializers.DateField(required=False)

    def validate(self, data):
        if data.get("dateFrom") and data.get("dateTo") and data["dateFrom"] > data["dateTo"]:
            raise serializers.ValidationError({"dateTo": "dateTo must not be before dateFrom."})
        return data


class AnalyticsQuerySerializer(DateRangeQuerySerializer, PaginationQuerySerializer):
    datePreset = serializers.ChoiceField(choices=DATE_PRESETS, default=LAST_30_DAYS)


class PromoCodeAnalyticsQuerySerializer(AnalyticsQuerySerializer):
    sortBy = serializers.CharField(default="usage_count")


class UserAnalyticsQuerySerializer(AnalyticsQuerySerializer):
    sortBy = serializers.CharField(default="total_amount")


class PromoCodeUsageHistoryQuerySerializer(AnalyticsQuerySerializer):
    promoCodeId = serializers.IntegerField(required=False, min_value=1)
    sortBy = serializers.CharField(default="created_at")
