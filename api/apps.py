from django.apps import AppConfig
from django.db.models.signals import post_migrate
import logging
import os

logger = logging.getLogger(__name__)


def create_admin(sender, **kwargs):
    from django.contrib.auth import get_user_model
    User = get_user_model()

    email = os.getenv("DJANGO_ADMIN_EMAIL", "admin@example.com")
    name = os.getenv("DJANGO_ADMIN_NAME", "Admin")
    password = os.getenv("DJANGO_ADMIN_PASSWORD", "admin")

    if not User.objects.filter(email=email.lower()).exists():
        User.objects.create_superuser(
            email=email,
            password=password,
            name=name,
            role="admin",
        )
        logger.info("Default admin created: %s", email)


class ApiConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "api"

    def ready(self):
        if os.getenv("CREATE_ADMIN") == "True":
            post_migrate.connect(create_admin, sender=self)
