"""
ASGI config for the kwikmedical project.

The dispatch API is plain request/response (clients poll), so only the
HTTP protocol is served here.
"""
import os

from django.core.asgi import get_asgi_application  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "kwikmedical.settings")

application = get_asgi_application()
