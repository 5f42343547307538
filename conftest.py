"""
Common test fixtures.

Provides a user and a JWT-authenticated Django test client, an event
with two ticket tiers, a factory for registered participants and a
helper that signs Razorpay callbacks with the test key secret.
"""
from datetime import timedelta
from decimal import Decimal

import pytest
from django.conf import settings
from django.contrib.auth.models import User
from django.core.cache import cache
from django.utils import timezone

from events.models import Event, TicketTier
from participants.models import Participant
from payments.signature import sign_payment


@pytest.fixture(autouse=True)
def clear_cache():
    """Throttle counters live in the cache; start every test clean."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(username="u1", password="pass12345", email="u1@example.com")


@pytest.fixture
def other_user(db):
    return User.objects.create_user(username="u2", password="pass12345", email="u2@example.com")


@pytest.fixture
def auth_client(client, db, user):
    """Authenticate the Django test client using JWT tokens."""
    resp = client.post(
        "/api/token/",
        {"username": "u1", "password": "pass12345"},
        content_type="application/json",
    )
    assert resp.status_code == 200
    token = resp.json()["access"]
    client.defaults["HTTP_AUTHORIZATION"] = f"Bearer {token}"
    return client


@pytest.fixture
def event(db, user):
    """An upcoming event with a GENERAL (500) and a transferable VIP (1000) tier."""
    start = timezone.now() + timedelta(days=7)
    evt = Event.objects.create(
        title="Demo Day",
        description="Startup demo day",
        start_time=start,
        end_time=start + timedelta(hours=6),
        location="Bengaluru",
        organizer_name="Shor Events",
        created_by=user,
    )
    TicketTier.objects.create(event=evt, name="General", price=Decimal("500.00"))
    TicketTier.objects.create(event=evt, name="vip", price=Decimal("1000.00"), is_transferable=True)
    return evt


@pytest.fixture
def make_participant(db, event):
    """Create a verified participant directly, bypassing the payment flow."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {
            "name": f"Participant {counter['n']}",
            "email": f"p{counter['n']}@example.com",
            "event": event,
            "event_title": event.title,
            "ticket_name": "GENERAL",
            "ticket_price": Decimal("500.00"),
            "quantity": 1,
            "amount": Decimal("500.00"),
            "payment_id": f"pay_{counter['n']}",
            "order_id": f"order_{counter['n']}",
            "payment_verified": True,
            "paid_at": timezone.now(),
        }
        data.update(overrides)
        return Participant.objects.create(**data)

    return _make


@pytest.fixture
def sign():
    """Sign an (order_id, payment_id) pair with the configured key secret."""

    def _sign(order_id, payment_id):
        return sign_payment(order_id, payment_id, settings.RAZORPAY_KEY_SECRET)

    return _sign
