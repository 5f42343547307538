import smtplib
from unittest import mock

import pytest

from common.errors import DownstreamDeliveryError
from common.mail import Attachment, send_transactional_email


def test_sends_with_attachments(mailoutbox):
    send_transactional_email(
        to="asha@example.com",
        subject="Hello",
        content="Body",
        attachments=[Attachment("ticket.pdf", b"%PDF-1.4", "application/pdf")],
    )

    assert len(mailoutbox) == 1
    message = mailoutbox[0]
    assert message.from_email == "tickets@example.com"
    assert message.to == ["asha@example.com"]
    assert message.attachments == [("ticket.pdf", b"%PDF-1.4", "application/pdf")]


def test_missing_recipient():
    with pytest.raises(DownstreamDeliveryError):
        send_transactional_email(to="", subject="Hello", content="Body")


@pytest.mark.parametrize("error", [smtplib.SMTPServerDisconnected("gone"), ConnectionRefusedError()])
def test_transport_failures_become_delivery_errors(error):
    with mock.patch("django.core.mail.EmailMessage.send", side_effect=error):
        with pytest.raises(DownstreamDeliveryError):
            send_transactional_email(to="asha@example.com", subject="Hello", content="Body")
