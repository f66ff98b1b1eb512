from decimal import Decimal

import pytest

from orders.models import Order
from promo_codes.models import PromoCode

pytestmark = pytest.mark.django_db


class TestAuth:

    def test_register_returns_tokens(self, api_client):
        response = api_client.post(
            "/api/register/",
            {"email": "New@Example.com", "password": "password123", "name": "Newcomer"},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["access"]
        assert response.data["user"]["email"] == "new@example.com"

    def test_register_validation_error_shape(self, api_client):
        response = api_client.post("/api/register/", {"email": "bad", "password": "x"}, format="json")

        assert response.status_code == 400
        assert response.data["message"] == "Validation failed"
        assert "email" in response.data["errors"]

    def test_login_and_me(self, api_client, user):
        response = api_client.post(
            "/api/login/", {"email": "jane@example.com", "password": "password123"}, format="json"
        )
        assert response.status_code == 200

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        me = api_client.get("/api/me/")
        assert me.status_code == 200
        assert me.data["email"] == "jane@example.com"
        assert me.data["role"] == "user"

    def test_login_with_wrong_password(self, api_client, user):
        response = api_client.post(
            "/api/login/", {"email": "jane@example.com", "password": "wrong-password"}, format="json"
        )
        assert response.status_code == 401

    def test_inactive_user_cannot_login(self, api_client, user):
        user.is_active = False
        user.save()
        response = api_client.post(
            "/api/login/", {"email": "jane@example.com", "password": "password123"}, format="json"
        )
        assert response.status_code == 401

    def test_anonymous_requests_are_rejected(self, api_client):
        assert api_client.get("/orders/").status_code == 401


class TestPromoCodes:

    def test_admin_creates_and_lists(self, admin_client):
        response = admin_client.post(
            "/promo-codes/",
            {"code": "winter25", "discountPercent": 25, "totalLimit": 10, "perUserLimit": 2},
            format="json",
        )
        assert response.status_code == 201
        assert response.data["code"] == "WINTER25"
        assert response.data["usedCount"] == 0

        listing = admin_client.get("/promo-codes/", {"search": "win"})
        assert listing.status_code == 200
        assert listing.data["total"] == 1
        assert listing.data["items"][0]["code"] == "WINTER25"

    def test_duplicate_code_is_a_conflict(self, admin_client, promo_code):
        response = admin_client.post(
            "/promo-codes/",
            {"code": "summer2024", "discountPercent": 10, "totalLimit": 1, "perUserLimit": 1},
            format="json",
        )
        assert response.status_code == 409
        assert response.data["code"] == "conflict"

    def test_invalid_payload(self, admin_client):
        response = admin_client.post(
            "/promo-codes/",
            {"code": "BAD CODE!", "discountPercent": 150, "totalLimit": 0, "perUserLimit": 1},
            format="json",
        )
        assert response.status_code == 400
        assert {"code", "discountPercent", "totalLimit"} <= set(response.data["errors"])

    def test_window_must_be_ordered(self, admin_client):
        response = admin_client.post(
            "/promo-codes/",
            {
                "code": "LATE",
                "discountPercent": 10,
                "totalLimit": 1,
                "perUserLimit": 1,
                "startsAt": "2024-06-02T00:00:00Z",
                "endsAt": "2024-06-01T00:00:00Z",
            },
            format="json",
        )
        assert response.status_code == 400

    def test_regular_users_cannot_manage_codes(self, user_client):
        assert user_client.get("/promo-codes/").status_code == 403

    def test_admin_deactivates_and_deletes(self, admin_client, promo_code):
        response = admin_client.patch(f"/promo-codes/{promo_code.id}/", {"isActive": False}, format="json")
        assert response.status_code == 200
        assert response.data["isActive"] is False

        assert admin_client.delete(f"/promo-codes/{promo_code.id}/").status_code == 204
        assert admin_client.get(f"/promo-codes/{promo_code.id}/").status_code == 404


class TestOrdersAndApply:

    def test_create_order_publishes_event(self, user_client, user, patched_bus):
        response = user_client.post("/orders/", {"amount": "100.00"}, format="json")

        assert response.status_code == 201
        assert response.data["amount"] == "100.00"
        assert response.data["finalAmount"] == "100.00"
        assert response.data["userId"] == user.id
        assert len(patched_bus.events) == 1

    def test_users_only_see_their_own_orders(self, user_client, user, other_user):
        Order.objects.create(user=user, amount=Decimal("10.00"))
        Order.objects.create(user=other_user, amount=Decimal("20.00"))

        response = user_client.get("/orders/", {"userId": other_user.id})

        assert response.status_code == 200
        assert response.data["total"] == 1
        assert response.data["items"][0]["userId"] == user.id

    def test_other_users_order_is_not_found(self, user_client, other_user):
        order = Order.objects.create(user=other_user, amount=Decimal("20.00"))
        assert user_client.get(f"/orders/{order.id}/").status_code == 404

    def test_apply_promo_code(self, user_client, order, promo_code, patched_bus):
        response = user_client.post(
            "/promo-codes/apply/", {"orderId": order.id, "promoCode": "summer2024"}, format="json"
        )

        assert response.status_code == 200
        assert response.data == {"discountAmount": "20.00", "finalAmount": "80.00", "promoCode": "SUMMER2024"}
        assert len(patched_bus.events) == 1

        again = user_client.post(
            "/promo-codes/apply/",
            {"orderId": Order.objects.create(user=order.user, amount=Decimal("5.00")).id, "promoCode": "SUMMER2024"},
            format="json",
        )
        assert again.status_code == 400
        assert again.data["code"] == "promo_code_user_limit"

    def test_cannot_apply_to_someone_elses_order(self, user_client, other_user, promo_code, patched_bus):
        order = Order.objects.create(user=other_user, amount=Decimal("100.00"))

        response = user_client.post(
            "/promo-codes/apply/", {"orderId": order.id, "promoCode": "SUMMER2024"}, format="json"
        )

        assert response.status_code == 404
        assert PromoCode.objects.get(pk=promo_code.pk).used_count == 0
        assert patched_bus.events == []

    def test_admin_updates_order_amount(self, admin_client, order):
        response = admin_client.patch(f"/orders/{order.id}/", {"amount": "120.00"}, format="json")
        assert response.status_code == 200
        assert response.data["amount"] == "120.00"

    def test_regular_user_cannot_delete_orders(self, user_client, order):
        assert user_client.delete(f"/orders/{order.id}/").status_code == 403

    def test_order_with_applied_code_is_not_deleted(self, user_client, admin_client, order, promo_code, patched_bus):
        user_client.post("/promo-codes/apply/", {"orderId": order.id, "promoCode": "SUMMER2024"}, format="json")

        response = admin_client.delete(f"/orders/{order.id}/")

        assert response.status_code == 409
        assert response.data["code"] == "conflict"
        assert Order.objects.filter(pk=order.id).exists()
        assert PromoCode.objects.get(pk=promo_code.pk).used_count == 1


class TestUserManagement:

    def test_admin_lists_users(self, admin_client, user):
        response = admin_client.get("/users/", {"search": "jane"})
        assert response.status_code == 200
        assert response.data["items"][0]["email"] == "jane@example.com"

    def test_admin_deactivates_user(self, admin_client, user):
        response = admin_client.patch(f"/users/{user.id}/", {"isActive": False}, format="json")
        assert response.status_code == 200
        assert response.data["isActive"] is False


class TestApiSchema:

    def test_schema_is_public_and_lists_endpoints(self, api_client):
        response = api_client.get("/schema/", {"format": "json"})

        assert response.status_code == 200
        paths = response.data["paths"]
        assert "/promo-codes/apply/" in paths
        assert "/orders/" in paths

    def test_swagger_ui_is_served(self, api_client):
        assert api_client.get("/docs/").status_code == 200
