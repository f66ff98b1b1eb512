from decimal import Decimal

import pytest

from common.money import round_cents
from common.pagination import create_paginated_result, get_skip
from orders.entities import Order
from users.entities import User


class TestPagination:

    def test_total_pages_rounds_up(self):
        result = create_paginated_result(list(range(10)), total=95, page=2, limit=10)
        assert result["totalPages"] == 10
        assert result["page"] == 2
        assert result["limit"] == 10
        assert len(result["items"]) == 10

    def test_empty_result(self):
        assert create_paginated_result([], total=0, page=1, limit=10)["totalPages"] == 0

    def test_skip(self):
        assert get_skip(2, 10) == 10
        assert get_skip(1, 25) == 0

    def test_zero_limit_is_rejected(self):
        with pytest.raises(ValueError):
            create_paginated_result([], total=5, page=1, limit=0)
        with pytest.raises(ValueError):
            get_skip(1, 0)

    def test_zero_page_is_rejected(self):
        with pytest.raises(ValueError):
            get_skip(0, 10)


@pytest.mark.parametrize(
    "amount, expected",
    [
        (Decimal("1.5075"), Decimal("1.51")),
        (Decimal("1.505"), Decimal("1.51")),
        (Decimal("1.504"), Decimal("1.50")),
        (Decimal("20"), Decimal("20.00")),
    ],
)
def test_round_cents_half_up(amount, expected):
    assert round_cents(amount) == expected


class TestOrderEntity:

    def test_final_amount_without_discount(self):
        assert Order(user_id=1, amount="50.00").final_amount == Decimal("50.00")

    def test_final_amount_is_derived(self):
        order = Order(user_id=1, amount=Decimal("100.00"))
        order.apply_promo_code(3, Decimal("20.00"))
        assert order.promo_code_id == 3
        assert order.final_amount == Decimal("80.00")

    def test_rejects_negative_amount(self):
        with pytest.raises(ValueError):
            Order(user_id=1, amount=Decimal("-1"))

    def test_rejects_discount_above_amount(self):
        with pytest.raises(ValueError):
            Order(user_id=1, amount=Decimal("10"), promo_code_id=1, discount_amount=Decimal("11"))


def test_user_email_is_lower_cased():
    user = User(email="Jane@Example.COM", password_hash="x", name="Jane")
    assert user.email == "jane@example.com"
    assert not user.is_admin
