import logging

from common.exceptions import InvalidRequestError, NotFoundError
from common.pagination import create_paginated_result

from .entities import Order
from .events import OrderCreatedEvent
from .repository import OrderRepository

logger = logging.getLogger(__name__)


class OrderService:
    def __init__(self, order_repository=None):
        self.order_repository = order_repository or OrderRepository()

    def create(self, amount, user_id):
        order = self.order_repository.create(Order(user_id=user_id, amount=amount))
        logger.info("Order %s created for user %s", order.id, user_id)
        return order

    def find_all(self, user_id=None, date_from=None, date_to=None, page=1, limit=10,
                 sort_by="createdAt", sort_order="desc"):
        filters = {}
        if user_id is not None:
            filters["user_id"] = user_id
        if date_from is not None:
            filters["created_at__gte"] = date_from
        if date_to is not None:
            filters["created_at__lte"] = date_to

        items, total = self.order_repository.paginate(
            page=page, limit=limit, sort_by=sort_by, sort_order=sort_order, **filters
        )
        return create_paginated_result(items, total, page, limit)

    def find_by_id(self, order_id):
        order = self.order_repository.find_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Order with ID {order_id} not found")
        return order

    def find_by_user_id(self, user_id):
        return self.order_repository.find_by_user_id(user_id)

    def update(self, order_id, amount=None):
        fields = {}
        if amount is not None:
            current = self.find_by_id(order_id)
            if current.discount_amount and amount < current.discount_amount:
                raise InvalidRequestError("Order amount cannot be lower than its discount")
            fields["amount"] = amount

        order = self.order_repository.update(order_id, **fields)
        if order is None:
            raise NotFoundError(f"Order with ID {order_id} not found")
        return order

    def delete(self, order_id):
        if not self.order_repository.delete(order_id):
            raise NotFoundError(f"Order with ID {order_id} not found")


class CreateOrderUseCase:
    """
    Persist an order, then publish OrderCreatedEvent.

    A publish failure is raised to the caller even though the order is
    already stored, so callers must treat the order as possibly created.
    """

    def __init__(self, order_service, event_bus):
        self.order_service = order_service
        self.event_bus = event_bus

    def execute(self, amount, user_id):
        order = self.order_service.create(amount, user_id)

        self.event_bus.publish(
            OrderCreatedEvent(
                order_id=order.id,
                user_id=order.user_id,
                amount=order.amount,
                promo_code_id=order.promo_code_id,
                discount_amount=order.discount_amount,
            )
        )
        return order
