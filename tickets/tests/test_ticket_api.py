"""
API tests for the tickets endpoints.
"""
import pytest
from django.test import Client
from django.urls import resolve
from rest_framework_simplejwt.tokens import RefreshToken

from tickets import services as ticket_services
from tickets.models import Ticket

VALIDATE_URL = "/api/tickets/validate/"


def _client_for(user):
    token = RefreshToken.for_user(user).access_token
    return Client(HTTP_AUTHORIZATION=f"Bearer {token}")


@pytest.fixture
def ticket(make_participant):
    return ticket_services.issue_ticket(make_participant(name="Asha"))


@pytest.mark.django_db
def test_validate_requires_authentication(client, ticket):
    resp = client.post(VALIDATE_URL, {"ticket": ticket.ticket_number}, content_type="application/json")
    assert resp.status_code == 401


@pytest.mark.django_db
def test_validate_checks_ticket_in(auth_client, ticket, user):
    resp = auth_client.post(
        VALIDATE_URL,
        {"ticket": ticket.qr_code, "latitude": 12.97, "longitude": 77.59},
        content_type="application/json",
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["duplicate"] is False
    assert body["ticket"]["status"] == "used"
    assert body["ticket"]["participant_name"] == "Asha"
    assert body["ticket"]["check_in_by"] == user.id


@pytest.mark.django_db
def test_repeat_validate_by_same_user(auth_client, ticket):
    auth_client.post(VALIDATE_URL, {"ticket": ticket.ticket_number}, content_type="application/json")
    resp = auth_client.post(VALIDATE_URL, {"ticket": ticket.ticket_number}, content_type="application/json")

    assert resp.status_code == 200
    assert resp.json()["duplicate"] is True
    assert resp.json()["message"] == "Ticket already checked in"


@pytest.mark.django_db
def test_validate_by_another_user_conflicts(auth_client, ticket, other_user):
    auth_client.post(VALIDATE_URL, {"ticket": ticket.ticket_number}, content_type="application/json")

    resp = _client_for(other_user).post(
        VALIDATE_URL, {"ticket": ticket.ticket_number}, content_type="application/json"
    )

    assert resp.status_code == 409
    body = resp.json()
    assert body["success"] is False
    assert body["code"] == "TICKET_STATE"
    assert body["reason"] == "already used"
    assert body["checkInTime"]


@pytest.mark.django_db
def test_validate_unknown_ticket(auth_client, event):
    resp = auth_client.post(VALIDATE_URL, {"ticket": "TKT-209901-ZZZZZZ"}, content_type="application/json")
    assert resp.status_code == 404
    assert resp.json()["reason"] == "not found"


@pytest.mark.django_db
def test_validate_rejects_bad_coordinates(auth_client, ticket):
    resp = auth_client.post(
        VALIDATE_URL, {"ticket": ticket.ticket_number, "latitude": 120}, content_type="application/json"
    )
    assert resp.status_code == 400


@pytest.mark.django_db
def test_list_and_filter(auth_client, ticket, make_participant):
    ticket_services.issue_ticket(make_participant())
    resp = auth_client.get(f"/api/tickets/?event={ticket.event_id}")
    assert resp.status_code == 200
    assert resp.json()["count"] == 2

    resp = auth_client.get(f"/api/tickets/?participant={ticket.participant_id}")
    assert [t["ticket_number"] for t in resp.json()["results"]] == [ticket.ticket_number]


@pytest.mark.django_db
@pytest.mark.parametrize("query", ["event=abc", "participant=1.5"])
def test_list_rejects_non_numeric_filters(auth_client, ticket, query):
    resp = auth_client.get(f"/api/tickets/?{query}")
    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"


def test_validate_route_carries_its_throttle_scope():
    view = resolve(VALIDATE_URL).func
    assert view.initkwargs["throttle_scope"] == "ticket_validation"
    assert view.cls.throttle_scope is None


@pytest.mark.django_db
def test_lookup_by_number(auth_client, ticket):
    resp = auth_client.get(f"/api/tickets/number/{ticket.ticket_number.lower()}/")
    assert resp.status_code == 200
    assert resp.json()["id"] == ticket.id

    resp = auth_client.get("/api/tickets/number/TKT-209901-ZZZZZZ/")
    assert resp.status_code == 404


@pytest.mark.django_db
def test_cancel(auth_client, ticket):
    resp = auth_client.post(f"/api/tickets/{ticket.id}/cancel/", content_type="application/json")
    assert resp.status_code == 200
    assert resp.json()["ticket"]["status"] == "cancelled"

    resp = auth_client.post(VALIDATE_URL, {"ticket": ticket.ticket_number}, content_type="application/json")
    assert resp.status_code == 409
    assert resp.json()["reason"] == "cancelled"


@pytest.mark.django_db
def test_transfer(auth_client, make_participant):
    ticket = ticket_services.issue_ticket(make_participant(ticket_name="VIP"))
    recipient = make_participant(name="Ravi")

    resp = auth_client.post(
        f"/api/tickets/{ticket.id}/transfer/", {"participantId": recipient.id}, content_type="application/json"
    )

    assert resp.status_code == 200
    body = resp.json()["ticket"]
    assert body["participant_name"] == "Ravi"
    assert len(body["transfer_history"]) == 1
    assert Ticket.objects.get(pk=ticket.pk).participant_id == recipient.id


@pytest.mark.django_db
def test_transfer_to_unknown_participant(auth_client, ticket):
    resp = auth_client.post(
        f"/api/tickets/{ticket.id}/transfer/", {"participantId": 9999}, content_type="application/json"
    )
    assert resp.status_code == 404


@pytest.mark.django_db
def test_pdf_download(auth_client, ticket):
    resp = auth_client.get(f"/api/tickets/{ticket.id}/pdf/")
    assert resp.status_code == 200
    assert resp["Content-Type"] == "application/pdf"
    assert resp.content.startswith(b"%PDF")
