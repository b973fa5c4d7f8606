"""Resend delivery service tests."""

from unittest.mock import MagicMock

import pytest
import requests

from wedding_outreach.services.delivery_service import (
    MAX_BATCH_SIZE,
    DeliveryServiceError,
    OutgoingEmail,
    ResendDeliveryService,
)


def make_response(ids):
    response = MagicMock()
    response.json.return_value = {"data": [{"id": i} for i in ids]}
    response.raise_for_status.return_value = None
    return response


def make_messages(count):
    return [
        OutgoingEmail(to=f"vendor{i}@example.com", subject="Inquiry", body="Hello", tags={"vendor_id": str(i)})
        for i in range(count)
    ]


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def service(session):
    return ResendDeliveryService(
        "re_test_key",
        "Wedding Planner <hello@example.com>",
        base_url="https://api.resend.test/",
        session=session,
    )


class TestResendDeliveryService:
    """Tests for ResendDeliveryService.send_batch()."""

    def test_sends_batch(self, service, session):
        session.post.return_value = make_response(["id-0", "id-1"])

        result = service.send_batch(make_messages(2))

        assert result.message_ids == ["id-0", "id-1"]
        assert result.sent == 2
        assert result.errors == []

        args, kwargs = session.post.call_args
        assert args[0] == "https://api.resend.test/emails/batch"
        assert kwargs["headers"] == {"Authorization": "Bearer re_test_key"}
        payload = kwargs["json"]
        assert payload[0]["from"] == "Wedding Planner <hello@example.com>"
        assert payload[0]["to"] == ["vendor0@example.com"]
        assert payload[0]["text"] == "Hello"
        assert payload[0]["tags"] == [{"name": "vendor_id", "value": "0"}]

    def test_chunks_large_batches(self, service, session):
        session.post.side_effect = [
            make_response([f"a{i}" for i in range(MAX_BATCH_SIZE)]),
            make_response(["b0", "b1"]),
        ]

        result = service.send_batch(make_messages(MAX_BATCH_SIZE + 2))

        assert session.post.call_count == 2
        assert len(session.post.call_args_list[0].kwargs["json"]) == MAX_BATCH_SIZE
        assert result.sent == MAX_BATCH_SIZE + 2

    def test_failed_chunk_recorded(self, service, session):
        session.post.side_effect = [
            requests.ConnectionError("down"),
            make_response(["b0"]),
        ]

        result = service.send_batch(make_messages(MAX_BATCH_SIZE + 1))

        assert result.message_ids[:MAX_BATCH_SIZE] == [None] * MAX_BATCH_SIZE
        assert result.message_ids[-1] == "b0"
        assert result.sent == 1
        assert len(result.errors) == 1

    def test_short_response_padded(self, service, session):
        session.post.return_value = make_response(["only-one"])

        result = service.send_batch(make_messages(3))

        assert result.message_ids == ["only-one", None, None]

    def test_http_error_recorded(self, service, session):
        response = make_response([])
        response.raise_for_status.side_effect = requests.HTTPError("422 Client Error")
        session.post.return_value = response

        result = service.send_batch(make_messages(1))

        assert result.sent == 0
        assert result.errors == ["422 Client Error"]

    def test_not_configured(self, session):
        service = ResendDeliveryService("", "hello@example.com", session=session)

        assert not service.is_configured()
        with pytest.raises(DeliveryServiceError, match="RESEND_API_KEY"):
            service.send_batch(make_messages(1))
        session.post.assert_not_called()

    def test_missing_sender(self, session):
        service = ResendDeliveryService("re_key", "", session=session)

        assert service.configuration_error() == "EMAIL_FROM not configured"
