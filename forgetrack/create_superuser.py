import logging
import os

from django.contrib.auth import get_user_model

logger = logging.getLogger(__name__)


def create_superuser():
    if os.getenv("CREATE_SUPERUSER") != "True":
        return

    User = get_user_model()
    username = os.getenv("DJANGO_SUPERUSER_USERNAME", "admin")
    email = os.getenv("DJANGO_SUPERUSER_EMAIL", "admin@example.com")
    password = os.getenv("DJANGO_SUPERUSER_PASSWORD")

    if not password:
        logger.warning("CREATE_SUPERUSER is set but DJANGO_SUPERUSER_PASSWORD is empty; skipping")
        return

    if not User.objects.filter(username=username).exists():
        User.objects.create_superuser(
            username=username,
            email=email,
            password=password,
        )
        logger.info("Created superuser %s", username)
