import pytest
from django.contrib.auth.hashers import check_password

from common.exceptions import ConflictError, NotFoundError
from users.services import UsersService

pytestmark = pytest.mark.django_db


def test_create_hashes_password_and_lower_cases_email():
    user = UsersService().create(email="Alice@Example.com", password="password123", name="Alice")

    assert user.id is not None
    assert user.email == "alice@example.com"
    assert user.role == "user"
    assert check_password("password123", user.password_hash)


def test_duplicate_email_is_a_conflict(user):
    with pytest.raises(ConflictError):
        UsersService().create(email="JANE@example.com", password="password123", name="Jane Again")


def test_find_all_searches_and_filters(user, other_user):
    service = UsersService()
    service.update(other_user.id, is_active=False)

    assert service.find_all(search="jane")["total"] == 1
    active = service.find_all(is_active=True)
    assert [u.email for u in active["items"]] == ["jane@example.com"]

    page = service.find_all(page=1, limit=1, sort_by="email", sort_order="asc")
    assert page["totalPages"] == 2
    assert page["items"][0].email == "jane@example.com"


def test_update_and_delete(user):
    service = UsersService()
    updated = service.update(user.id, name="Jane Doe", phone="+15550100")
    assert updated.name == "Jane Doe"
    assert updated.phone == "+15550100"

    service.delete(user.id)
    with pytest.raises(NotFoundError):
        service.find_by_id(user.id)


def test_find_by_email_for_auth_is_case_insensitive(user):
    assert UsersService().find_by_email_for_auth("JANE@EXAMPLE.COM").id == user.id
