from django.utils import timezone

from events.base import (
    DomainEvent,
    EventType,
    decode_datetime,
    decode_decimal,
    encode_datetime,
    encode_decimal,
)


class PromoCodeAppliedEvent(DomainEvent):
    event_type = EventType.PROMO_CODE_APPLIED

    def __init__(self, promo_code_id, promo_code, user_id, order_id, order_amount, discount_amount,
                 created_at=None):
        self.promo_code_id = promo_code_id
        self.promo_code = promo_code
        self.user_id = user_id
        self.order_id = order_id
        self.order_amount = order_amount
        self.discount_amount = discount_amount
        self.created_at = created_at or timezone.now()

    def to_payload(self):
        return {
            "promoCodeId": self.promo_code_id,
            "promoCode": self.promo_code,
            "userId": self.user_id,
            "orderId": self.order_id,
            "orderAmount": encode_decimal(self.order_amount),
            "discountAmount": encode_decimal(self.discount_amount),
            "createdAt": encode_datetime(self.created_at),
        }

    @classmethod
    def from_payload(cls, payload):
        return cls(
            promo_code_id=payload["promoCodeId"],
            promo_code=payload["promoCode"],
            user_id=payload["userId"],
            order_id=payload["orderId"],
            order_amount=decode_decimal(payload["orderAmount"]),
            discount_amount=decode_decimal(payload["discountAmount"]),
            created_at=decode_datetime(payload["createdAt"]),
        )
