from django.db.models import F
from django.utils import timezone

from common.repository import BaseRepository

from .entities import PromoCode, PromoCodeUsage
from .models import PromoCode as PromoCodeModel
from .models import PromoCodeUsage as PromoCodeUsageModel


class PromoCodeRepository(BaseRepository):
    model = PromoCodeModel
    conflict_message = "Promo code already exists"
    sort_fields = {
        **BaseRepository.sort_fields,
        "code": "code",
        "discountPercent": "discount_percent",
        "usedCount": "used_count",
        "totalLimit": "total_limit",
        "endsAt": "ends_at",
    }

    def to_entity(self, instance):
        return PromoCode(
            id=instance.pk,
            code=instance.code,
            discount_percent=instance.discount_percent,
            total_limit=instance.total_limit,
            per_user_limit=instance.per_user_limit,
            used_count=instance.used_count,
            is_active=instance.is_active,
            starts_at=instance.starts_at,
            ends_at=instance.ends_at,
            created_at=instance.created_at,
            updated_at=instance.updated_at,
        )

    def to_fields(self, entity):
        return {
            "code": entity.code,
            "discount_percent": entity.discount_percent,
            "total_limit": entity.total_limit,
            "per_user_limit": entity.per_user_limit,
            "used_count": entity.used_count,
            "is_active": entity.is_active,
            "starts_at": entity.starts_at,
            "ends_at": entity.ends_at,
        }

    def find_by_code(self, code, for_update=False):
        queryset = self.get_queryset()
        if for_update:
            queryset = queryset.select_for_update()
        instance = queryset.filter(code=code.strip().upper()).first()
        return self.to_entity(instance) if instance else None

    def exists_by_code(self, code):
        return self.exists(code=code.strip().upper())

    def increment_usage_if_within_limit(self, promo_code_id):
        """
        Compare-and-increment in a single UPDATE; the limit guard is evaluated
        by the database, so two racing callers can never both pass it.
        Returns False when the code is missing or already at its limit.
        """
        updated = self.get_queryset().filter(
            pk=promo_code_id,
            used_count__lt=F("total_limit"),
        ).update(used_count=F("used_count") + 1, updated_at=timezone.now())
        return updated == 1


class PromoCodeUsageRepository(BaseRepository):
    model = PromoCodeUsageModel
    conflict_message = "A promo code has already been applied to this order"

    def to_entity(self, instance):
        return PromoCodeUsage(
            id=instance.pk,
            promo_code_id=instance.promo_code_id,
            user_id=instance.user_id,
            order_id=instance.order_id,
            discount_amount=instance.discount_amount,
            created_at=instance.created_at,
            updated_at=instance.updated_at,
        )

    def to_fields(self, entity):
        return {
            "promo_code_id": entity.promo_code_id,
            "user_id": entity.user_id,
            "order_id": entity.order_id,
            "discount_amount": entity.discount_amount,
        }

    def count_for_user(self, promo_code_id, user_id):
        return self.count(promo_code_id=promo_code_id, user_id=user_id)

    def exists_for_order(self, order_id):
        return self.exists(order_id=order_id)
