import threading
from decimal import Decimal

import pytest
from django.db import connection

from common.exceptions import (
    ConflictError,
    InactiveCodeError,
    NotFoundError,
    PerUserLimitExceededError,
    TotalLimitExceededError,
    TransientInfrastructureError,
)
from orders.models import Order
from orders.repository import OrderRepository
from promo_codes.events import PromoCodeAppliedEvent
from promo_codes.models import PromoCode, PromoCodeUsage
from promo_codes.repository import PromoCodeRepository, PromoCodeUsageRepository
from promo_codes.services import ApplyPromoCodeUseCase

pytestmark = pytest.mark.django_db


def build_use_case(bus, promo_codes=None):
    return ApplyPromoCodeUseCase(
        promo_codes=promo_codes or PromoCodeRepository(),
        usages=PromoCodeUsageRepository(),
        orders=OrderRepository(),
        event_bus=bus,
    )


def test_applies_discount_and_records_usage(bus, user, order, promo_code):
    result = build_use_case(bus).execute(order.id, "summer2024", user.id, order.amount)

    assert result.discount_amount == Decimal("20.00")
    assert result.final_amount == Decimal("80.00")
    assert result.promo_code == "SUMMER2024"

    promo_code.refresh_from_db()
    order.refresh_from_db()
    assert promo_code.used_count == 1
    assert order.promo_code_id == promo_code.id
    assert order.discount_amount == Decimal("20.00")
    assert order.final_amount == Decimal("80.00")

    usage = PromoCodeUsage.objects.get(order=order)
    assert usage.user_id == user.id
    assert usage.discount_amount == Decimal("20.00")


def test_publishes_event_after_commit(bus, user, order, promo_code):
    build_use_case(bus).execute(order.id, "SUMMER2024", user.id, order.amount)

    assert len(bus.events) == 1
    event = bus.events[0]
    assert isinstance(event, PromoCodeAppliedEvent)
    assert event.promo_code_id == promo_code.id
    assert event.promo_code == "SUMMER2024"
    assert event.user_id == user.id
    assert event.order_id == order.id
    assert event.order_amount == Decimal("100.00")
    assert event.discount_amount == Decimal("20.00")


def test_discount_is_rounded_to_cents(bus, user):
    PromoCode.objects.create(code="ODD15", discount_percent=15, total_limit=10, per_user_limit=1)
    order = Order.objects.create(user=user, amount=Decimal("10.05"))

    result = build_use_case(bus).execute(order.id, "ODD15", user.id, order.amount)

    assert result.discount_amount == Decimal("1.51")
    assert result.final_amount == Decimal("8.54")


def test_second_use_by_same_user_hits_per_user_limit(bus, user, order, promo_code):
    use_case = build_use_case(bus)
    use_case.execute(order.id, "SUMMER2024", user.id, order.amount)
    second_order = Order.objects.create(user=user, amount=Decimal("50.00"))

    with pytest.raises(PerUserLimitExceededError):
        use_case.execute(second_order.id, "SUMMER2024", user.id, second_order.amount)

    promo_code.refresh_from_db()
    second_order.refresh_from_db()
    assert promo_code.used_count == 1
    assert second_order.discount_amount is None
    assert len(bus.events) == 1


def test_other_users_are_not_limited_by_per_user_limit(bus, user, other_user, order, promo_code):
    use_case = build_use_case(bus)
    use_case.execute(order.id, "SUMMER2024", user.id, order.amount)
    other_order = Order.objects.create(user=other_user, amount=Decimal("10.00"))

    result = use_case.execute(other_order.id, "SUMMER2024", other_user.id, other_order.amount)

    assert result.discount_amount == Decimal("2.00")
    promo_code.refresh_from_db()
    assert promo_code.used_count == 2


def test_unknown_code(bus, user, order):
    with pytest.raises(NotFoundError):
        build_use_case(bus).execute(order.id, "NOPE", user.id, order.amount)
    assert bus.events == []


def test_inactive_code_leaves_no_trace(bus, user, order, promo_code):
    promo_code.is_active = False
    promo_code.save()

    with pytest.raises(InactiveCodeError):
        build_use_case(bus).execute(order.id, "SUMMER2024", user.id, order.amount)

    assert not PromoCodeUsage.objects.exists()
    assert bus.events == []


def test_same_order_cannot_take_two_codes(bus, user, order):
    PromoCode.objects.create(code="MULTI", discount_percent=10, total_limit=10, per_user_limit=5)
    use_case = build_use_case(bus)
    use_case.execute(order.id, "MULTI", user.id, order.amount)

    with pytest.raises(ConflictError):
        use_case.execute(order.id, "MULTI", user.id, order.amount)

    # the second attempt's increment was rolled back with it
    assert PromoCode.objects.get(code="MULTI").used_count == 1
    assert PromoCodeUsage.objects.count() == 1


class StalePromoCodeRepository(PromoCodeRepository):
    """Hands out a snapshot taken before another caller used the last slot."""

    def find_by_code(self, code, for_update=False):
        promo_code = super().find_by_code(code, for_update=for_update)
        promo_code.used_count = 0
        return promo_code


def test_storage_guard_rejects_increment_past_total_limit(bus, user, order):
    PromoCode.objects.create(code="LAST", discount_percent=10, total_limit=1, per_user_limit=1, used_count=1)

    with pytest.raises(TotalLimitExceededError):
        build_use_case(bus, promo_codes=StalePromoCodeRepository()).execute(
            order.id, "LAST", user.id, order.amount
        )

    order.refresh_from_db()
    assert PromoCode.objects.get(code="LAST").used_count == 1
    assert order.discount_amount is None
    assert not PromoCodeUsage.objects.exists()
    assert bus.events == []


def test_publish_failure_is_surfaced_after_commit(bus, user, order, promo_code):
    bus.error = TransientInfrastructureError("queue down")

    with pytest.raises(TransientInfrastructureError):
        build_use_case(bus).execute(order.id, "SUMMER2024", user.id, order.amount)

    promo_code.refresh_from_db()
    assert promo_code.used_count == 1
    assert PromoCodeUsage.objects.filter(order=order).exists()


@pytest.mark.django_db(transaction=True)
def test_concurrent_applies_by_one_user_are_serialized(bus, user, promo_code):
    orders = [Order.objects.create(user=user, amount=Decimal("100.00")) for _ in range(2)]
    barrier = threading.Barrier(len(orders))
    outcomes = []

    def apply(order):
        try:
            barrier.wait()
            build_use_case(bus).execute(order.id, "SUMMER2024", user.id, order.amount)
            outcomes.append("ok")
        except (PerUserLimitExceededError, ConflictError) as e:
            outcomes.append(type(e).__name__)
        except Exception as e:
            outcomes.append(repr(e))
        finally:
            connection.close()

    threads = [threading.Thread(target=apply, args=(order,)) for order in orders]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(outcomes) == 2
    assert outcomes.count("ok") == 1
    assert set(outcomes) - {"ok"} <= {"PerUserLimitExceededError", "ConflictError"}
    promo_code.refresh_from_db()
    assert promo_code.used_count == 1
    assert PromoCodeUsage.objects.count() == 1
    assert len(bus.events) == 1
