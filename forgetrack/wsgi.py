import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "forgetrack.settings")

application = get_wsgi_application()

from .create_superuser import create_superuser

create_superuser()
