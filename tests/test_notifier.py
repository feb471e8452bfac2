"""Notifier tests.

These tests verify:
- the confirmation email text
- SesNotifier request shape against a mocked boto3 client
- SES failures surface as CollaboratorError
"""

from __future__ import annotations

from unittest.mock import Mock, patch

import pytest
from botocore.exceptions import ClientError, NoRegionError

from storefront import CollaboratorError, ConfigurationError, MemoryNotifier, SesNotifier
from storefront.notifier import SentEmail, confirmation_email


class TestConfirmationEmail:
    """Tests for the confirmation email text."""

    def test_subject_and_body(self):
        subject, body = confirmation_email("o1")

        assert subject == "Order Confirmation"
        assert body == (
            "Thank you for your purchase! Your order with ID o1 "
            "has been received and is being processed."
        )


class TestMemoryNotifier:
    """Tests for MemoryNotifier."""

    def test_records_sent_email(self):
        notifier = MemoryNotifier()

        notifier.send("a@x.com", "Hi", "Body")

        assert notifier.sent == [SentEmail(recipient="a@x.com", subject="Hi", body="Body")]


class TestSesNotifier:
    """Tests for SesNotifier against a mocked client."""

    def test_send_email_request(self):
        """Test the SES request carries source, recipient, subject and text body."""
        client = Mock()
        notifier = SesNotifier("no-reply@example.com", client=client)

        notifier.send("a@x.com", "Order Confirmation", "Thanks")

        client.send_email.assert_called_once_with(
            Source="no-reply@example.com",
            Destination={"ToAddresses": ["a@x.com"]},
            Message={
                "Subject": {"Data": "Order Confirmation"},
                "Body": {"Text": {"Data": "Thanks"}},
            },
        )

    def test_client_error_is_collaborator_error(self):
        """Test a rejected send keeps the SES error as the cause."""
        client = Mock()
        client.send_email.side_effect = ClientError(
            {"Error": {"Code": "MessageRejected", "Message": "Email address is not verified."}},
            "SendEmail",
        )
        notifier = SesNotifier("no-reply@example.com", client=client)

        with pytest.raises(CollaboratorError, match="SES send_email failed") as exc_info:
            notifier.send("a@x.com", "s", "b")
        assert exc_info.value.metadata == {"recipient": "a@x.com"}
        assert isinstance(exc_info.value.cause, ClientError)

    def test_creates_client_when_none_given(self):
        """Test a boto3 SES client is created for the region."""
        with patch("storefront.notifier.boto3.client") as make_client:
            notifier = SesNotifier("no-reply@example.com", region_name="eu-west-1")

        make_client.assert_called_once_with("ses", region_name="eu-west-1")
        assert notifier.sender == "no-reply@example.com"

    def test_client_creation_failure_is_configuration_error(self):
        """Test a client boto3 cannot create is reported as configuration."""
        with patch("storefront.notifier.boto3.client", side_effect=NoRegionError()):
            with pytest.raises(ConfigurationError, match="Cannot create SES client") as exc_info:
                SesNotifier("no-reply@example.com")

        assert exc_info.value.metadata["cause_type"] == "NoRegionError"
