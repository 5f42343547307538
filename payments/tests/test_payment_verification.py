"""
API tests for the checkout flow: order creation and callback verification.

Covers the happy path (participant and valid ticket created), replayed
callbacks, bad signatures, failures after a verified payment, and the
provider-facing order/status endpoints.
"""
from decimal import Decimal

import pytest

from participants.models import Participant
from payments import services as payment_services
from payments.client import RazorpayClient
from payments.models import PaymentIncident
from tickets.models import Ticket

VERIFY_URL = "/api/payments/verify-payment/"


def _callback(event, sign, *, order_id="order_A1", payment_id="pay_A1", email="asha@example.com", **participant):
    data = {
        "name": "Asha",
        "email": email,
        "phone": "9999999999",
        "ticketName": "general",
        "quantity": 1,
        "eventId": event.id,
    }
    data.update(participant)
    return {
        "razorpay_order_id": order_id,
        "razorpay_payment_id": payment_id,
        "razorpay_signature": sign(order_id, payment_id),
        "participantData": data,
        "eventId": event.id,
        "amount": "500",
    }


@pytest.mark.django_db
def test_verified_payment_registers_participant_and_issues_ticket(client, event, sign):
    resp = client.post(VERIFY_URL, _callback(event, sign), content_type="application/json")

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["payment"] == {"paymentId": "pay_A1", "orderId": "order_A1", "verified": True}
    assert body["participant"]["email"] == "asha@example.com"
    assert body["participant"]["amount"] == "500.00"
    assert "payment_signature" not in body["participant"]
    assert body["ticket"]["status"] == "valid"
    assert body["ticketPending"] is False

    participant = Participant.objects.get(email="asha@example.com", event=event)
    assert participant.payment_verified is True
    assert participant.payment_id == "pay_A1"
    assert participant.paid_at is not None
    ticket = Ticket.objects.get(participant=participant)
    assert ticket.status == Ticket.STATUS_VALID
    assert body["ticket"]["ticket_number"] == ticket.ticket_number
    event.refresh_from_db()
    assert event.participant_count == 1


@pytest.mark.django_db
def test_replayed_callback_is_rejected_as_duplicate(client, event, sign):
    payload = _callback(event, sign)
    first = client.post(VERIFY_URL, payload, content_type="application/json")
    assert first.status_code == 200

    second = client.post(VERIFY_URL, payload, content_type="application/json")
    assert second.status_code == 400
    body = second.json()
    assert body["success"] is False
    assert body["code"] == "DUPLICATE_REGISTRATION"
    assert body["message"] == "You are already registered for this event"
    assert body["paymentId"] == "pay_A1"

    assert Participant.objects.filter(event=event).count() == 1
    assert Ticket.objects.filter(event=event).count() == 1
    incident = PaymentIncident.objects.get()
    assert incident.reason == PaymentIncident.REASON_DUPLICATE
    assert incident.payment_id == "pay_A1"


@pytest.mark.django_db
def test_same_email_different_case_is_a_duplicate(client, event, sign):
    client.post(VERIFY_URL, _callback(event, sign), content_type="application/json")
    resp = client.post(
        VERIFY_URL,
        _callback(event, sign, order_id="order_B", payment_id="pay_B", email=" ASHA@Example.com "),
        content_type="application/json",
    )
    assert resp.status_code == 400
    assert resp.json()["paymentId"] == "pay_B"


@pytest.mark.django_db
def test_bad_signature_is_rejected_without_leaking_it(client, event, sign):
    payload = _callback(event, sign)
    expected = payload["razorpay_signature"]
    payload["razorpay_signature"] = "0" * 64

    resp = client.post(VERIFY_URL, payload, content_type="application/json")

    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == "SIGNATURE_MISMATCH"
    assert body["message"] == "Payment verification failed - invalid signature"
    assert expected not in resp.content.decode()
    assert not Participant.objects.exists()
    assert not PaymentIncident.objects.exists()


@pytest.mark.django_db
def test_missing_callback_fields_are_a_validation_error(client, event):
    resp = client.post(VERIFY_URL, {"participantData": {}}, content_type="application/json")
    assert resp.status_code == 400
    assert "razorpay_signature" in resp.json()


@pytest.mark.django_db
def test_registration_failure_after_payment_asks_to_contact_support(client, event, sign):
    payload = _callback(event, sign, ticketName="PLATINUM")

    resp = client.post(VERIFY_URL, payload, content_type="application/json")

    assert resp.status_code == 500
    body = resp.json()
    assert body["code"] == "REGISTRATION_INCOMPLETE"
    assert "contact support" in body["message"]
    assert body["paymentId"] == "pay_A1"
    assert not Participant.objects.exists()
    incident = PaymentIncident.objects.get()
    assert incident.reason == PaymentIncident.REASON_REGISTRATION_FAILED
    assert incident.detail == "Invalid ticket"


@pytest.mark.django_db
def test_non_numeric_event_id_after_payment_is_recorded(client, event, sign):
    payload = _callback(event, sign, eventId="abc")
    del payload["eventId"]

    resp = client.post(VERIFY_URL, payload, content_type="application/json")

    assert resp.status_code == 500
    assert resp["Content-Type"] == "application/json"
    body = resp.json()
    assert body["code"] == "REGISTRATION_INCOMPLETE"
    assert body["paymentId"] == "pay_A1"
    incident = PaymentIncident.objects.get()
    assert incident.reason == PaymentIncident.REASON_REGISTRATION_FAILED
    assert incident.detail == "Invalid event id"
    assert incident.event_id is None
    assert not Participant.objects.exists()


@pytest.mark.django_db
def test_malformed_participant_fields_after_payment_are_recorded(client, event, sign):
    payload = _callback(event, sign, quantity={"n": 2}, name=["Asha"])

    resp = client.post(VERIFY_URL, payload, content_type="application/json")

    assert resp.status_code == 500
    assert resp.json()["paymentId"] == "pay_A1"
    incident = PaymentIncident.objects.get()
    assert incident.reason == PaymentIncident.REASON_REGISTRATION_FAILED
    assert incident.event_id == event.id


@pytest.mark.django_db
def test_unexpected_error_after_payment_is_recorded(client, event, sign, monkeypatch):
    def broken_commit(participant_data, payment_details):
        raise RuntimeError("database went away")

    monkeypatch.setattr(payment_services, "commit_registration", broken_commit)

    resp = client.post(VERIFY_URL, _callback(event, sign), content_type="application/json")

    assert resp.status_code == 500
    body = resp.json()
    assert body["code"] == "REGISTRATION_INCOMPLETE"
    assert "contact support" in body["message"]
    assert body["paymentId"] == "pay_A1"
    assert "database went away" not in resp.content.decode()
    incident = PaymentIncident.objects.get()
    assert incident.reason == PaymentIncident.REASON_REGISTRATION_FAILED
    assert incident.detail == "RuntimeError: database went away"
    assert incident.email == "asha@example.com"


@pytest.mark.django_db
def test_callbacks_verify_without_a_key_id(client, event, sign, settings):
    settings.RAZORPAY_KEY_ID = ""

    resp = client.post(VERIFY_URL, _callback(event, sign), content_type="application/json")

    assert resp.status_code == 200
    assert Participant.objects.filter(event=event).count() == 1
    resp = client.get("/api/payments/key/")
    assert resp.status_code == 500
    assert resp.json()["code"] == "CONFIGURATION_ERROR"


@pytest.mark.django_db
def test_reconciliation_runs_after_commit(client, event, sign, monkeypatch, django_capture_on_commit_callbacks):
    fetched = []

    def fake_fetch(self, payment_id):
        fetched.append(payment_id)
        return {"id": payment_id, "status": "captured", "amount": 50000, "currency": "INR"}

    monkeypatch.setattr(RazorpayClient, "fetch_payment", fake_fetch)
    with django_capture_on_commit_callbacks(execute=True):
        resp = client.post(VERIFY_URL, _callback(event, sign), content_type="application/json")

    assert resp.status_code == 200
    assert fetched == ["pay_A1"]
    assert not PaymentIncident.objects.exists()


@pytest.mark.django_db
def test_reconciliation_records_amount_mismatch(client, event, sign, monkeypatch, django_capture_on_commit_callbacks):
    monkeypatch.setattr(
        RazorpayClient,
        "fetch_payment",
        lambda self, payment_id: {"id": payment_id, "status": "captured", "amount": 100, "currency": "INR"},
    )
    with django_capture_on_commit_callbacks(execute=True):
        client.post(VERIFY_URL, _callback(event, sign), content_type="application/json")

    incident = PaymentIncident.objects.get()
    assert incident.reason == PaymentIncident.REASON_AMOUNT_MISMATCH


@pytest.mark.django_db
def test_reconciliation_records_uncaptured_payment(client, event, sign, monkeypatch, django_capture_on_commit_callbacks):
    monkeypatch.setattr(
        RazorpayClient,
        "fetch_payment",
        lambda self, payment_id: {"id": payment_id, "status": "failed", "amount": 50000, "currency": "INR"},
    )
    with django_capture_on_commit_callbacks(execute=True):
        resp = client.post(VERIFY_URL, _callback(event, sign), content_type="application/json")

    assert resp.status_code == 200
    assert PaymentIncident.objects.get().reason == PaymentIncident.REASON_NOT_CAPTURED


@pytest.mark.django_db
def test_create_order(client, event, monkeypatch):
    captured = {}

    def fake_create(self, amount, currency="INR", receipt=None, notes=None):
        captured.update(amount=amount, currency=currency, receipt=receipt, notes=notes)
        return {"id": "order_X", "amount": 50000, "currency": currency}

    monkeypatch.setattr(RazorpayClient, "create_order", fake_create)
    resp = client.post(
        "/api/payments/create-order/",
        {
            "amount": 500,
            "eventId": event.id,
            "participantData": {"name": "Asha", "email": "asha@example.com", "ticketName": "GENERAL", "quantity": 1},
        },
        content_type="application/json",
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body == {"success": True, "order": {"id": "order_X", "amount": 50000, "currency": "INR"},
                    "key": "rzp_test_1234567890"}
    assert captured["amount"] == Decimal("500")
    assert captured["receipt"].startswith("evt_")
    assert captured["notes"]["participantEmail"] == "asha@example.com"


@pytest.mark.django_db
def test_create_order_requires_event_and_participant(client):
    resp = client.post("/api/payments/create-order/", {"amount": 500}, content_type="application/json")
    assert resp.status_code == 400


@pytest.mark.django_db
def test_payment_status_requires_authentication(client):
    resp = client.get("/api/payments/status/pay_1/")
    assert resp.status_code == 401


@pytest.mark.django_db
def test_payment_status(auth_client, monkeypatch):
    monkeypatch.setattr(
        RazorpayClient,
        "fetch_payment",
        lambda self, payment_id: {"id": payment_id, "status": "captured", "amount": 50000, "currency": "INR",
                                  "method": "upi", "created_at": 1700000000},
    )
    resp = auth_client.get("/api/payments/status/pay_1/")
    assert resp.status_code == 200
    assert resp.json()["payment"]["status"] == "captured"
    assert resp.json()["payment"]["method"] == "upi"


@pytest.mark.django_db
def test_public_key_endpoint(client):
    resp = client.get("/api/payments/key/")
    assert resp.status_code == 200
    assert resp.json()["key"] == "rzp_test_1234567890"
