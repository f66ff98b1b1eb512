from decimal import Decimal

from analytics.consumers import AnalyticsConsumer

from .events import OrderCreatedEvent


class OrderAnalyticsConsumer(AnalyticsConsumer):
    name = "orders_analytics"

    def handle(self, event):
        if not isinstance(event, OrderCreatedEvent):
            raise TypeError(f"{self.name} cannot handle {type(event).__name__}")

        row = {
            "event_date": event.created_at.date(),
            "created_at": event.created_at,
            "order_id": str(event.order_id),
            "user_id": str(event.user_id),
            "amount": event.amount,
            "promo_code_id": str(event.promo_code_id) if event.promo_code_id is not None else None,
            "discount_amount": event.discount_amount or Decimal("0"),
        }
        self.insert("orders_analytics", row, f"order {event.order_id} for user {event.user_id}")
