from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.permissions import IsAdmin
from common.exceptions import NotFoundError
from events.bus import get_event_bus
from orders.repository import OrderRepository

from .repository import PromoCodeRepository, PromoCodeUsageRepository
from .serializers import (
    ApplyPromoCodeResponseSerializer,
    ApplyPromoCodeSerializer,
    CreatePromoCodeSerializer,
    PromoCodeQuerySerializer,
    PromoCodeResponseSerializer,
    UpdatePromoCodeSerializer,
)
from .services import ApplyPromoCodeUseCase, PromoCodeService


# Create a promo code or list them (admin only)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def promoCodes(request):
    service = PromoCodeService()

    if request.method == 'POST':
        serializer = CreatePromoCodeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        promo_code = service.create(
            code=data["code"],
            discount_percent=data["discountPercent"],
            total_limit=data["totalLimit"],
            per_user_limit=data["perUserLimit"],
            starts_at=data.get("startsAt"),
            ends_at=data.get("endsAt"),
        )
        return Response(PromoCodeResponseSerializer(promo_code).data, status=status.HTTP_201_CREATED)

    query = PromoCodeQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    params = query.validated_data
    result = service.find_all(
        search=params.get("search"),
        is_active=params.get("isActive"),
        page=params["page"],
        limit=params["limit"],
        sort_by=params["sortBy"],
        sort_order=params["sortOrder"],
    )
    result["items"] = PromoCodeResponseSerializer(result["items"], many=True).data
    return Response(result, status=status.HTTP_200_OK)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdmin])
def promoCodeDetail(request, id):
    service = PromoCodeService()

    if request.method == 'PATCH':
        serializer = UpdatePromoCodeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        promo_code = service.update(
            id,
            discount_percent=data.get("discountPercent"),
            is_active=data.get("isActive"),
        )
        return Response(PromoCodeResponseSerializer(promo_code).data, status=status.HTTP_200_OK)

    if request.method == 'DELETE':
        service.delete(id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    return Response(PromoCodeResponseSerializer(service.find_by_id(id)).data, status=status.HTTP_200_OK)


# Apply a promo code to one of the caller's orders
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def applyPromoCode(request):
    serializer = ApplyPromoCodeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    orders = OrderRepository()
    order = orders.find_by_id(data["orderId"])
    if order is None or order.user_id != request.user.pk:
        raise NotFoundError(f"Order with ID {data['orderId']} not found")

    use_case = ApplyPromoCodeUseCase(
        promo_codes=PromoCodeRepository(),
        usages=PromoCodeUsageRepository(),
        orders=orders,
        event_bus=get_event_bus(),
    )
    result = use_case.execute(
        order_id=order.id,
        code=data["promoCode"],
        user_id=request.user.pk,
        order_amount=order.amount,
    )
    return Response(ApplyPromoCodeResponseSerializer(result).data, status=status.HTTP_200_OK)
