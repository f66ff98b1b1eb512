from decimal import Decimal

from django.utils import timezone

from common.exceptions import (
    ExpiredError,
    InactiveCodeError,
    NotYetStartedError,
    PerUserLimitExceededError,
    TotalLimitExceededError,
)
from common.money import to_decimal


class PromoCode:
    """
    A named percentage discount with a global usage cap, a per-user cap and
    an optional validity window.
    """

    def __init__(self, code, discount_percent, total_limit, per_user_limit, id=None, used_count=0,
                 is_active=True, starts_at=None, ends_at=None, created_at=None, updated_at=None):
        if not code:
            raise ValueError("Promo code is required")
        if not 1 <= discount_percent <= 100:
            raise ValueError("discount_percent must be between 1 and 100")
        if total_limit < 1 or per_user_limit < 1:
            raise ValueError("Usage limits must be at least 1")
        if not 0 <= used_count <= total_limit:
            raise ValueError("used_count must be between 0 and total_limit")
        if starts_at and ends_at and starts_at >= ends_at:
            raise ValueError("starts_at must be before ends_at")

        self.id = id
        self.code = code.strip().upper()
        self.discount_percent = discount_percent
        self.total_limit = total_limit
        self.per_user_limit = per_user_limit
        self.used_count = used_count
        self.is_active = is_active
        self.starts_at = starts_at
        self.ends_at = ends_at
        self.created_at = created_at
        self.updated_at = updated_at

    def validate_usage(self, user_id, user_usage_count, now=None):
        """
        Raise the first failing eligibility check for ``user_id``.

        Order: active, total limit, per-user limit, start date, end date.
        Nothing is mutated when every check passes.
        """
        if not self.is_active:
            raise InactiveCodeError()

        if self.used_count >= self.total_limit:
            raise TotalLimitExceededError()

        if user_usage_count >= self.per_user_limit:
            raise PerUserLimitExceededError()

        now = now or timezone.now()
        if self.starts_at and now < self.starts_at:
            raise NotYetStartedError()

        if self.ends_at and now > self.ends_at:
            raise ExpiredError()

    def calculate_discount(self, amount):
        # exact, unrounded; callers round to cents
        return to_decimal(amount) * Decimal(self.discount_percent) / Decimal(100)

    def increment_usage(self):
        self.used_count += 1

    def activate(self):
        self.is_active = True

    def deactivate(self):
        self.is_active = False

    def __repr__(self):
        return f"PromoCode(id={self.id!r}, code={self.code!r})"


class PromoCodeUsage:
    def __init__(self, promo_code_id, user_id, order_id, discount_amount, id=None,
                 created_at=None, updated_at=None):
        if promo_code_id is None or user_id is None or order_id is None:
            raise ValueError("promo_code_id, user_id and order_id are required")
        if discount_amount < 0:
            raise ValueError("discount_amount cannot be negative")

        self.id = id
        self.promo_code_id = promo_code_id
        self.user_id = user_id
        self.order_id = order_id
        self.discount_amount = discount_amount
        self.created_at = created_at
        self.updated_at = updated_at
