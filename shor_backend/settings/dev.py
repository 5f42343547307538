"""
Development settings for the event registration & ticketing backend.

Extends the base settings by enabling debugging, allowing all hosts and
printing outgoing email to the console.  Do not use these settings in
production.
"""
from .base import *  # noqa

# Development toggles
DEBUG = True
ALLOWED_HOSTS = ["*", "127.0.0.1", "localhost"]
CSRF_TRUSTED_ORIGINS = ["http://127.0.0.1:8000", "http://localhost:8000"]
EMAIL_BACKEND = os.getenv("EMAIL_BACKEND", "django.core.mail.backends.console.EmailBackend")  # noqa: F405

LOGGING["loggers"]["django.db.backends"] = {  # noqa: F405
    "handlers": ["console"],
    "level": os.getenv("DJANGO_DB_LOG_LEVEL", "INFO"),  # noqa: F405
    "propagate": False,
}
