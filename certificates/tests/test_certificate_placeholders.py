from datetime import datetime, timezone as dt_timezone

import pytest

from certificates.placeholders import fill_boxes, resolve_fields, substitute


def test_substitute_known_tokens():
    fields = {"participant_name": "Asha", "event_name": "Demo Day"}
    assert substitute("Dear {{ participant_name }}, for {{event_name}}", fields) == "Dear Asha, for Demo Day"


def test_unknown_tokens_are_left_as_written():
    assert substitute("Hi {{ nickname }} / {{participant_name}}", {"participant_name": "Asha"}) == (
        "Hi {{ nickname }} / Asha"
    )


def test_repeated_tokens_and_empty_text():
    assert substitute("{{ a }}{{ a }}", {"a": "x"}) == "xx"
    assert substitute(None, {"a": "x"}) == ""


def test_fill_boxes_does_not_mutate_layout():
    layout = {
        "backgroundImage": "bg.png",
        "placeholders": [
            {"name": "participant_name", "x": 10, "y": 20, "fontSize": 32},
            {"name": "custom", "text": "Held at {{ event_location }}"},
            {"name": "nickname"},
        ],
    }
    filled = fill_boxes(layout, {"participant_name": "Asha", "event_location": "Bengaluru"})

    assert [box["text"] for box in filled["placeholders"]] == ["Asha", "Held at Bengaluru", "nickname"]
    assert filled["placeholders"][0]["fontSize"] == 32
    assert "text" not in layout["placeholders"][0]


def test_fill_boxes_accepts_a_bare_list():
    assert fill_boxes([{"name": "event_name"}], {"event_name": "Demo Day"}) == [
        {"name": "event_name", "text": "Demo Day"}
    ]


@pytest.mark.django_db
def test_resolve_fields(make_participant, event):
    participant = make_participant(name="Asha", email="asha@example.com")
    fields = resolve_fields(
        participant, event, "CERT-1-ABCD", datetime(2025, 1, 15, 10, 0, tzinfo=dt_timezone.utc)
    )

    assert fields["participant_name"] == "Asha"
    assert fields["participant_email"] == "asha@example.com"
    assert fields["event_name"] == "Demo Day"
    assert fields["event_location"] == "Bengaluru"
    assert fields["organizer_name"] == "Shor Events"
    assert fields["certificate_number"] == fields["certificate_id"] == "CERT-1-ABCD"
    assert fields["ticket_name"] == "GENERAL"
    assert fields["completion_date"]
    assert fields["event_date"]


@pytest.mark.django_db
def test_organizer_falls_back_to_event_creator(make_participant, event, user):
    event.organizer_name = ""
    event.save()
    fields = resolve_fields(make_participant(), event, "CERT-1-ABCD")
    assert fields["organizer_name"] == "u1"
