from django.utils import timezone

from events.base import (
    DomainEvent,
    EventType,
    decode_datetime,
    decode_decimal,
    encode_datetime,
    encode_decimal,
)


class OrderCreatedEvent(DomainEvent):
    event_type = EventType.ORDER_CREATED

    def __init__(self, order_id, user_id, amount, promo_code_id=None, discount_amount=None, created_at=None):
        self.order_id = order_id
        self.user_id = user_id
        self.amount = amount
        self.promo_code_id = promo_code_id
        self.discount_amount = discount_amount
        self.created_at = created_at or timezone.now()

    def to_payload(self):
        return {
            "orderId": self.order_id,
            "userId": self.user_id,
            "amount": encode_decimal(self.amount),
            "promoCodeId": self.promo_code_id,
            "discountAmount": encode_decimal(self.discount_amount),
            "createdAt": encode_datetime(self.created_at),
        }

    @classmethod
    def from_payload(cls, payload):
        return cls(
            order_id=payload["orderId"],
            user_id=payload["userId"],
            amount=decode_decimal(payload["amount"]),
            promo_code_id=payload.get("promoCodeId"),
            discount_amount=decode_decimal(payload.get("discountAmount")),
            created_at=decode_datetime(payload["createdAt"]),
        )
