import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction
from django.db.models import Q

from common.exceptions import ConflictError, NotFoundError, TotalLimitExceededError
from common.money import round_cents, to_decimal
from common.pagination import create_paginated_result

from .entities import PromoCode, PromoCodeUsage
from .events import PromoCodeAppliedEvent
from .repository import PromoCodeRepository, PromoCodeUsageRepository

logger = logging.getLogger(__name__)


class PromoCodeService:
    def __init__(self, promo_code_repository=None):
        self.promo_code_repository = promo_code_repository or PromoCodeRepository()

    def create(self, code, discount_percent, total_limit, per_user_limit, starts_at=None, ends_at=None):
        if self.promo_code_repository.exists_by_code(code):
            raise ConflictError("Promo code already exists")

        promo_code = self.promo_code_repository.create(
            PromoCode(
                code=code,
                discount_percent=discount_percent,
                total_limit=total_limit,
                per_user_limit=per_user_limit,
                starts_at=starts_at,
                ends_at=ends_at,
            )
        )
        logger.info("Promo code %s created (%s%%)", promo_code.code, promo_code.discount_percent)
        return promo_code

    def find_all(self, search=None, is_active=None, page=1, limit=10, sort_by="createdAt", sort_order="desc"):
        filters = []
        if search:
            filters.append(Q(code__icontains=search))
        if is_active is not None:
            filters.append(Q(is_active=is_active))

        items, total = self.promo_code_repository.paginate(
            *filters, page=page, limit=limit, sort_by=sort_by, sort_order=sort_order
        )
        return create_paginated_result(items, total, page, limit)

    def find_by_id(self, promo_code_id):
        promo_code = self.promo_code_repository.find_by_id(promo_code_id)
        if promo_code is None:
            raise NotFoundError(f"Promo code with ID {promo_code_id} not found")
        return promo_code

    def find_by_code(self, code):
        promo_code = self.promo_code_repository.find_by_code(code)
        if promo_code is None:
            raise NotFoundError(f"Promo code {code} not found")
        return promo_code

    def update(self, promo_code_id, discount_percent=None, is_active=None):
        promo_code = self.find_by_id(promo_code_id)
        if discount_percent is not None:
            promo_code.discount_percent = discount_percent
        if is_active is True:
            promo_code.activate()
        elif is_active is False:
            promo_code.deactivate()

        updated = self.promo_code_repository.update(
            promo_code_id,
            discount_percent=promo_code.discount_percent,
            is_active=promo_code.is_active,
        )
        if updated is None:
            raise NotFoundError(f"Promo code with ID {promo_code_id} not found")
        logger.info("Promo code %s updated", updated.code)
        return updated

    def delete(self, promo_code_id):
        if not self.promo_code_repository.delete(promo_code_id):
            raise NotFoundError(f"Promo code with ID {promo_code_id} not found")
        logger.info("Promo code %s deleted", promo_code_id)


@dataclass(frozen=True)
class ApplyPromoCodeResult:
    discount_amount: Decimal
    final_amount: Decimal
    promo_code: str

    def to_dict(self):
        return {
            "discountAmount": self.discount_amount,
            "finalAmount": self.final_amount,
            "promoCode": self.promo_code,
        }


class ApplyPromoCodeUseCase:
    """
    Apply a promo code to an existing order.

    Validation, the usage-counter increment, the usage record and the order
    update commit together or not at all. The promo code row stays locked
    until commit, so concurrent applications of one code run one after the
    other. PromoCodeAppliedEvent is published only after the commit.
    """

    def __init__(self, promo_codes, usages, orders, event_bus):
        self.promo_codes = promo_codes
        self.usages = usages
        self.orders = orders
        self.event_bus = event_bus

    def execute(self, order_id, code, user_id, order_amount):
        order_amount = to_decimal(order_amount)

        with transaction.atomic():
            promo_code = self.promo_codes.find_by_code(code, for_update=True)
            if promo_code is None:
                raise NotFoundError(f"Promo code {code} not found")

            user_usage_count = self.usages.count_for_user(promo_code.id, user_id)
            promo_code.validate_usage(user_id, user_usage_count)

            discount_amount = round_cents(promo_code.calculate_discount(order_amount))
            final_amount = order_amount - discount_amount

            if not self.promo_codes.increment_usage_if_within_limit(promo_code.id):
                raise TotalLimitExceededError()
            promo_code.increment_usage()

            self.usages.create(
                PromoCodeUsage(
                    promo_code_id=promo_code.id,
                    user_id=user_id,
                    order_id=order_id,
                    discount_amount=discount_amount,
                )
            )
            if self.orders.attach_discount(order_id, promo_code.id, discount_amount) is None:
                raise NotFoundError(f"Order with ID {order_id} not found")

        logger.info(
            "Promo code %s applied to order %s by user %s: discount %s",
            promo_code.code, order_id, user_id, discount_amount,
        )

        self.event_bus.publish(
            PromoCodeAppliedEvent(
                promo_code_id=promo_code.id,
                promo_code=promo_code.code,
                user_id=user_id,
                order_id=order_id,
                order_amount=order_amount,
                discount_amount=discount_amount,
            )
        )

        return ApplyPromoCodeResult(
            discount_amount=discount_amount,
            final_amount=final_amount,
            promo_code=promo_code.code,
        )
