import logging

from orders.events import OrderCreatedEvent
from promo_codes.events import PromoCodeAppliedEvent

logger = logging.getLogger(__name__)


class AnalyticsConsumer:
    """
    Turns bus events into analytics rows. ``name`` is the routing key jobs
    carry; any failure is logged and re-raised so the bus retries the job.
    """

    name = None

    def __init__(self, sink):
        self.sink = sink

    def handle(self, event):
        raise NotImplementedError

    def insert(self, table, row, description):
        try:
            self.sink.insert(table, row)
        except Exception:
            logger.exception("Failed to record %s", description)
            raise
        logger.info("Recorded %s", description)


class UserAnalyticsConsumer(AnalyticsConsumer):
    """Per-user daily counters in users_analytics (summed by the table engine)."""

    name = "users_analytics"

    def handle(self, event):
        if isinstance(event, OrderCreatedEvent):
            row = {
                "event_date": event.created_at.date(),
                "user_id": str(event.user_id),
                "orders_count": 1,
                "total_amount": event.amount,
                "promo_codes_used": 0,
            }
            self.insert("users_analytics", row, f"user order {event.user_id} (order {event.order_id})")
        elif isinstance(event, PromoCodeAppliedEvent):
            row = {
                "event_date": event.created_at.date(),
                "user_id": str(event.user_id),
                "orders_count": 0,
                "total_amount": 0,
                "promo_codes_used": 1,
            }
            self.insert("users_analytics", row, f"user promo code usage {event.user_id} ({event.promo_code})")
        else:
            raise TypeError(f"{self.name} cannot handle {type(event).__name__}")
