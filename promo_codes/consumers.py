from analytics.consumers import AnalyticsConsumer

from .events import PromoCodeAppliedEvent


class PromoCodeAnalyticsConsumer(AnalyticsConsumer):
    name = "promo_code_usages_analytics"

    def handle(self, event):
        if not isinstance(event, PromoCodeAppliedEvent):
            raise TypeError(f"{self.name} cannot handle {type(event).__name__}")

        row = {
            "event_date": event.created_at.date(),
            "created_at": event.created_at,
            "promo_code": event.promo_code,
            "promo_code_id": str(event.promo_code_id),
            "user_id": str(event.user_id),
            "order_id": str(event.order_id),
            "order_amount": event.order_amount,
            "discount_amount": event.discount_amount,
        }
        self.insert(
            "promo_code_usages_analytics",
            row,
            f"promo code usage {event.promo_code} for user {event.user_id}",
        )
