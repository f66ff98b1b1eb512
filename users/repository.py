from api.models import CustomUser
from common.repository import BaseRepository

from .entities import User


class UserRepository(BaseRepository):
    model = CustomUser
    conflict_message = "User with this email already exists"
    sort_fields = {
        **BaseRepository.sort_fields,
        "email": "email",
        "name": "name",
    }

    def to_entity(self, instance):
        return User(
            id=instance.pk,
            email=instance.email,
            password_hash=instance.password,
            name=instance.name,
            phone=instance.phone,
            is_active=instance.is_active,
            role=instance.role,
            created_at=instance.created_at,
            updated_at=instance.updated_at,
        )

    def to_fields(self, entity):
        return {
            "email": entity.email,
            "password": entity.password_hash,
            "name": entity.name,
            "phone": entity.phone,
            "is_active": entity.is_active,
            "role": entity.role,
        }

    def find_by_email(self, email):
        return self.find_one(email=email.strip().lower())

    def exists_by_email(self, email):
        return self.exists(email=email.strip().lower())
