"""
Tests for the (email, event) duplicate guard.
"""
import pytest

from common.errors import DuplicateRegistration
from participants.models import Participant
from participants.services import commit_registration, normalize_email, participant_exists
from payments.client import RazorpayClient
from payments.models import PaymentIncident
from payments.services import PaymentAssertion, complete_paid_registration


def _form(event, email="asha@example.com"):
    return {"name": "Asha", "email": email, "eventId": event.id, "ticketName": "GENERAL", "quantity": 1}


def test_normalize_email():
    assert normalize_email("  Asha@Example.COM ") == "asha@example.com"
    assert normalize_email(None) == ""


@pytest.mark.django_db
def test_exists_after_commit(event):
    assert participant_exists("asha@example.com", event.id) is False
    commit_registration(_form(event), {"payment_id": "pay_1", "order_id": "order_1", "signature": "sig"})
    assert participant_exists("asha@example.com", event.id) is True
    assert participant_exists("ASHA@example.com ", event.id) is True
    assert participant_exists("asha@example.com", event.id + 1) is False


@pytest.mark.django_db
def test_missing_inputs_are_not_duplicates(event):
    assert participant_exists("", event.id) is False
    assert participant_exists("asha@example.com", None) is False


@pytest.mark.django_db
def test_non_numeric_event_id_is_not_a_duplicate(make_participant):
    make_participant(email="asha@example.com")
    assert participant_exists("asha@example.com", "abc") is False
    assert participant_exists("asha@example.com", {"id": 1}) is False


@pytest.mark.django_db
def test_lost_race_is_reported_as_duplicate(event, sign, monkeypatch):
    """Both callbacks pass the pre-check; the unique constraint stops the second."""
    commit_registration(_form(event), {"payment_id": "pay_1", "order_id": "order_1", "signature": "sig"})
    monkeypatch.setattr(
        "payments.services.participant_exists", lambda email, event_id: False
    )

    client = RazorpayClient.from_settings()
    assertion = PaymentAssertion(order_id="order_2", payment_id="pay_2", signature=sign("order_2", "pay_2"))
    with pytest.raises(DuplicateRegistration) as excinfo:
        complete_paid_registration(client, assertion, _form(event, "ASHA@example.com"), event.id)

    assert excinfo.value.payment_id == "pay_2"
    assert Participant.objects.filter(event=event).count() == 1
    incident = PaymentIncident.objects.get()
    assert incident.payment_id == "pay_2"
    assert incident.reason == PaymentIncident.REASON_DUPLICATE


@pytest.mark.django_db
def test_check_duplicate_endpoint(client, event, make_participant):
    make_participant(email="asha@example.com")

    resp = client.post(
        "/api/participants/check-duplicate/",
        {"email": "Asha@Example.com", "eventId": event.id},
        content_type="application/json",
    )
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "exists": True}

    resp = client.post(
        "/api/participants/check-duplicate/",
        {"email": "new@example.com", "eventId": event.id},
        content_type="application/json",
    )
    assert resp.json()["exists"] is False


@pytest.mark.django_db
def test_check_duplicate_requires_valid_email(client, event):
    resp = client.post(
        "/api/participants/check-duplicate/",
        {"email": "not-an-email", "eventId": event.id},
        content_type="application/json",
    )
    assert resp.status_code == 400
