"""
ASGI config for the patient tracker.

HTTP only; request handling stays synchronous inside Django.
"""
import os

from django.core.asgi import get_asgi_application  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "tracker.settings")

application = get_asgi_application()
