from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.permissions import is_admin
from common.exceptions import NotFoundError
from events.bus import get_event_bus

from .serializers import (
    CreateOrderSerializer,
    OrderQuerySerializer,
    OrderResponseSerializer,
    UpdateOrderSerializer,
)
from .services import CreateOrderUseCase, OrderService


def get_visible_order(service, request, order_id):
    order = service.find_by_id(order_id)
    if order.user_id != request.user.pk and not is_admin(request.user):
        raise NotFoundError(f"Order with ID {order_id} not found")
    return order


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def orders(request):
    service = OrderService()

    if request.method == 'POST':
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = CreateOrderUseCase(service, get_event_bus()).execute(
            amount=serializer.validated_data["amount"],
            user_id=request.user.pk,
        )
        return Response(OrderResponseSerializer(order).data, status=status.HTTP_201_CREATED)

    query = OrderQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    params = query.validated_data

    # regular users only ever see their own orders
    user_id = params.get("userId") if is_admin(request.user) else request.user.pk
    result = service.find_all(
        user_id=user_id,
        date_from=params.get("dateFrom"),
        date_to=params.get("dateTo"),
        page=params["page"],
        limit=params["limit"],
        sort_by=params["sortBy"],
        sort_order=params["sortOrder"],
    )
    result["items"] = OrderResponseSerializer(result["items"], many=True).data
    return Response(result, status=status.HTTP_200_OK)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def orderDetail(request, orderID):
    service = OrderService()

    if request.method == 'GET':
        order = get_visible_order(service, request, orderID)
        return Response(OrderResponseSerializer(order).data, status=status.HTTP_200_OK)

    if not is_admin(request.user):
        raise PermissionDenied("Only admins can modify orders.")

    if request.method == 'DELETE':
        service.delete(orderID)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = UpdateOrderSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    order = service.update(orderID, amount=serializer.validated_data.get("amount"))
    return Response(OrderResponseSerializer(order).data, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def myOrders(request):
    orders = OrderService().find_by_user_id(request.user.pk)
    return Response(OrderResponseSerializer(orders, many=True).data, status=status.HTTP_200_OK)
