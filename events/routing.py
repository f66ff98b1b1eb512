from analytics.consumers import UserAnalyticsConsumer
from orders.consumers import OrderAnalyticsConsumer
from orders.events import OrderCreatedEvent
from promo_codes.consumers import PromoCodeAnalyticsConsumer
from promo_codes.events import PromoCodeAppliedEvent

from .base import EventType

# event type -> consumer names; one job is enqueued per consumer
SUBSCRIPTIONS = {
    EventType.ORDER_CREATED: (
        OrderAnalyticsConsumer.name,
        UserAnalyticsConsumer.name,
    ),
    EventType.PROMO_CODE_APPLIED: (
        PromoCodeAnalyticsConsumer.name,
        UserAnalyticsConsumer.name,
    ),
}


def decode_event(envelope):
    event_type = EventType(envelope["type"])
    payload = envelope["payload"]

    if event_type is EventType.ORDER_CREATED:
        return OrderCreatedEvent.from_payload(payload)
    if event_type is EventType.PROMO_CODE_APPLIED:
        return PromoCodeAppliedEvent.from_payload(payload)
    raise ValueError(f"Unsupported event type: {event_type.value}")


def build_consumers(sink):
    consumers = [
        OrderAnalyticsConsumer(sink),
        PromoCodeAnalyticsConsumer(sink),
        UserAnalyticsConsumer(sink),
    ]
    return {consumer.name: consumer for consumer in consumers}
