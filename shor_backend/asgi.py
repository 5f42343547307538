"""
ASGI entry point for the event registration & ticketing backend.

The default settings module is the development configuration; set
DJANGO_SETTINGS_MODULE to `shor_backend.settings.prod` when deploying.
"""

import os

from django.conf import settings
from django.core.asgi import get_asgi_application
from django.contrib.staticfiles.handlers import ASGIStaticFilesHandler

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "shor_backend.settings.dev")

application = get_asgi_application()

# Serve /static/ when using uvicorn in DEBUG mode
if settings.DEBUG:
    application = ASGIStaticFilesHandler(application)
