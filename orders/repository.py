from common.repository import BaseRepository

from .entities import Order
from .models import Order as OrderModel


class OrderRepository(BaseRepository):
    model = OrderModel
    protected_message = "Order has a promo code applied and cannot be deleted"
    sort_fields = {
        **BaseRepository.sort_fields,
        "amount": "amount",
        "discountAmount": "discount_amount",
    }

    def to_entity(self, instance):
        return Order(
            id=instance.pk,
            user_id=instance.user_id,
            amount=instance.amount,
            promo_code_id=instance.promo_code_id,
            discount_amount=instance.discount_amount,
            created_at=instance.created_at,
            updated_at=instance.updated_at,
        )

    def to_fields(self, entity):
        return {
            "user_id": entity.user_id,
            "amount": entity.amount,
            "promo_code_id": entity.promo_code_id,
            "discount_amount": entity.discount_amount,
        }

    def find_by_user_id(self, user_id):
        return [self.to_entity(instance) for instance in self.get_queryset().filter(user_id=user_id).order_by("-created_at")]

    def attach_discount(self, order_id, promo_code_id, discount_amount):
        return self.update(order_id, promo_code_id=promo_code_id, discount_amount=discount_amount)
