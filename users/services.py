import logging

from django.contrib.auth.hashers import make_password
from django.db.models import Q

from common.exceptions import ConflictError, NotFoundError
from common.pagination import create_paginated_result

from .entities import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class UsersService:
    def __init__(self, user_repository=None):
        self.user_repository = user_repository or UserRepository()

    def create(self, email, password, name, phone=None):
        if self.user_repository.exists_by_email(email):
            raise ConflictError("User with this email already exists")

        user = User(
            email=email,
            password_hash=make_password(password),
            name=name,
            phone=phone,
            is_active=True,
        )
        user = self.user_repository.create(user)
        logger.info("User created: %s", user.id)
        return user

    def find_all(self, search=None, is_active=None, page=1, limit=10, sort_by="createdAt", sort_order="desc"):
        filters = []
        if search:
            filters.append(Q(email__icontains=search) | Q(name__icontains=search))
        if is_active is not None:
            filters.append(Q(is_active=is_active))

        items, total = self.user_repository.paginate(
            *filters, page=page, limit=limit, sort_by=sort_by, sort_order=sort_order
        )
        return create_paginated_result(items, total, page, limit)

    def find_by_id(self, user_id):
        user = self.user_repository.find_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User with ID {user_id} not found")
        return user

    def update(self, user_id, name=None, phone=None, is_active=None):
        fields = {}
        if name is not None:
            fields["name"] = name
        if phone is not None:
            fields["phone"] = phone
        if is_active is not None:
            fields["is_active"] = is_active

        user = self.user_repository.update(user_id, **fields)
        if user is None:
            raise NotFoundError(f"User with ID {user_id} not found")
        return user

    def delete(self, user_id):
        if not self.user_repository.delete(user_id):
            raise NotFoundError(f"User with ID {user_id} not found")

    def find_by_email_for_auth(self, email):
        return self.user_repository.find_by_email(email)
