"""System checks for the payments app.

Without the key secret no payment callback can be verified, so the
process refuses to start (``manage.py check`` / ``runserver`` fail).
"""
from django.conf import settings
from django.core.checks import Error, Tags, Warning, register


@register(Tags.security)
def check_razorpay_credentials(app_configs, **kwargs):
    errors = []
    if not getattr(settings, "RAZORPAY_KEY_SECRET", ""):
        errors.append(
            Error(
                "RAZORPAY_KEY_SECRET is not set.",
                hint="Set RAZORPAY_KEY_SECRET in the environment or .env file.",
                id="payments.E001",
            )
        )
    if not getattr(settings, "RAZORPAY_KEY_ID", ""):
        errors.append(
            Warning(
                "RAZORPAY_KEY_ID is not set; orders cannot be created.",
                id="payments.W001",
            )
        )
    return errors
