from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.permissions import IsAdmin

from .serializers import (
    DateRangeQuerySerializer,
    PromoCodeAnalyticsQuerySerializer,
    PromoCodeUsageHistoryQuerySerializer,
    UserAnalyticsQuerySerializer,
)
from .services import AnalyticsService


def validated_query(serializer_class, request):
    serializer = serializer_class(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def promoCodesAnalytics(request):
    params = validated_query(PromoCodeAnalyticsQuerySerializer, request)
    result = AnalyticsService().get_promo_codes_list(
        date_preset=params["datePreset"],
        date_from=params.get("dateFrom"),
        date_to=params.get("dateTo"),
        page=params["page"],
        limit=params["limit"],
        sort_by=params["sortBy"],
        sort_order=params["sortOrder"],
    )
    return Response(result, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def promoCodeStats(request, id):
    params = validated_query(DateRangeQuerySerializer, request)
    stats = AnalyticsService().get_promo_code_stats(
        id,
        date_from=params.get("dateFrom"),
        date_to=params.get("dateTo"),
    )
    return Response(stats, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def usersAnalytics(request):
    params = validated_query(UserAnalyticsQuerySerializer, request)
    result = AnalyticsService().get_users_list(
        date_preset=params["datePreset"],
        date_from=params.get("dateFrom"),
        date_to=params.get("dateTo"),
        page=params["page"],
        limit=params["limit"],
        sort_by=params["sortBy"],
        sort_order=params["sortOrder"],
    )
    return Response(result, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def promoCodeUsageHistory(request):
    params = validated_query(PromoCodeUsageHistoryQuerySerializer, request)
    result = AnalyticsService().get_promo_code_usage_history(
        promo_code_id=params.get("promoCodeId"),
        date_preset=params["datePreset"],
        date_from=params.get("dateFrom"),
        date_to=params.get("dateTo"),
        page=params["page"],
        limit=params["limit"],
        sort_by=params["sortBy"],
        sort_order=params["sortOrder"],
    )
    return Response(result, status=status.HTTP_200_OK)
