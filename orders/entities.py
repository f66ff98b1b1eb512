from decimal import Decimal

from common.money import to_decimal


class Order:
    def __init__(self, user_id, amount, id=None, promo_code_id=None, discount_amount=None,
                 created_at=None, updated_at=None):
        if user_id is None:
            raise ValueError("Order user_id is required")
        amount = to_decimal(amount)
        if amount < 0:
            raise ValueError("Order amount cannot be negative")

        self.id = id
        self.user_id = user_id
        self.amount = amount
        self.promo_code_id = None
        self.discount_amount = None
        if promo_code_id is not None or discount_amount is not None:
            self.apply_promo_code(promo_code_id, discount_amount)
        self.created_at = created_at
        self.updated_at = updated_at

    def apply_promo_code(self, promo_code_id, discount_amount):
        discount_amount = to_decimal(discount_amount or 0)
        if discount_amount < 0:
            raise ValueError("discount_amount cannot be negative")
        if discount_amount > self.amount:
            raise ValueError("discount_amount cannot exceed the order amount")
        self.promo_code_id = promo_code_id
        self.discount_amount = discount_amount

    @property
    def final_amount(self):
        return self.amount - (self.discount_amount or Decimal("0"))

    def __repr__(self):
        return f"Order(id={self.id!r}, user_id={self.user_id!r}, amount={self.amount})"
