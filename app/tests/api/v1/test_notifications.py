"""API tests for notification endpoints."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from infrastructure.notifications import (
    ChannelLookupError,
    ChannelType,
    DeliveryLogReadError,
    NotificationService,
)
from infrastructure.notifications.senders.base import ChannelSender
from infrastructure.operations import OperationResult
from infrastructure.services import get_notification_service


def _sender(channel_type, succeed=True):
    sender = MagicMock(spec=ChannelSender)
    sender.channel_type = channel_type
    if succeed:
        sender.send.return_value = OperationResult.success(data={"external_id": "msg-1"})
    else:
        sender.send.return_value = OperationResult.transient_error(
            "vendor unavailable", error_code="HTTP_503"
        )
    sender.health_check.return_value = OperationResult.success()
    return sender


@pytest.fixture
def senders():
    return {
        ChannelType.EMAIL: _sender(ChannelType.EMAIL),
        ChannelType.SMS: _sender(ChannelType.SMS),
        ChannelType.WHATSAPP: _sender(ChannelType.WHATSAPP),
    }


@pytest.fixture
def service(settings, senders):
    return NotificationService(settings, senders=senders)


@pytest.fixture
def api(app, service):
    app.dependency_overrides[get_notification_service] = lambda: service
    return TestClient(app)


def _payload(**overrides):
    payload = {
        "user_id": "user-1",
        "subject": "Insurance verification",
        "message": "Your insurance expires in 7 days.",
        "notification_type": "insurance_reminder",
    }
    payload.update(overrides)
    return payload


def _add_verified(api, channel_type, value, user_id="user-1"):
    response = api.post(
        f"/api/v1/notifications/users/{user_id}/channels",
        json={"channel_type": channel_type, "channel_value": value},
    )
    assert response.status_code == 201
    channel_id = response.json()["channel_id"]
    api.post(f"/api/v1/notifications/users/{user_id}/channels/{channel_id}/verify")
    return channel_id


@pytest.mark.unit
class TestSendEndpoint:
    def test_delivered(self, api):
        _add_verified(api, "sms", "+15551234567")

        response = api.post("/api/v1/notifications/send", json=_payload())

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["delivered_via"] == "sms"
        assert body["delivery_log"][0]["external_id"] == "msg-1"
        assert body["record_key"].startswith("notification_delivery:record:")

    def test_no_channels_is_422(self, api):
        response = api.post("/api/v1/notifications/send", json=_payload())

        assert response.status_code == 422
        body = response.json()
        assert body["failure_reason"] == "no_channels_configured"
        assert body["delivery_log"] == []

    def test_exhausted_is_502(self, api, senders):
        senders[ChannelType.EMAIL].send.return_value = OperationResult.transient_error(
            "down", error_code="HTTP_500"
        )
        _add_verified(api, "email", "a@example.com")

        response = api.post("/api/v1/notifications/send", json=_payload())

        assert response.status_code == 502
        assert response.json()["failure_reason"] == "all_channels_exhausted"

    def test_failover_reported(self, api, senders):
        senders[ChannelType.SMS].send.return_value = OperationResult.transient_error(
            "down", error_code="HTTP_503"
        )
        _add_verified(api, "sms", "+15551234567")
        _add_verified(api, "email", "a@example.com")

        response = api.post("/api/v1/notifications/send", json=_payload())

        body = response.json()
        assert response.status_code == 200
        assert [a["channel"] for a in body["delivery_log"]] == ["sms", "email"]
        assert body["delivered_via"] == "email"

    def test_blank_message_rejected(self, api):
        response = api.post("/api/v1/notifications/send", json=_payload(message="  "))

        assert response.status_code == 422

    def test_lookup_failure_is_503(self, app):
        service = MagicMock()
        service.send.side_effect = ChannelLookupError("table unavailable")
        app.dependency_overrides[get_notification_service] = lambda: service

        response = TestClient(app).post("/api/v1/notifications/send", json=_payload())

        assert response.status_code == 503

    def test_idempotent_replay(self, api, senders):
        _add_verified(api, "email", "a@example.com")
        payload = _payload(idempotency_key="reminder-1")

        first = api.post("/api/v1/notifications/send", json=payload)
        second = api.post("/api/v1/notifications/send", json=payload)

        assert first.json()["replayed"] is False
        assert second.json()["replayed"] is True
        assert senders[ChannelType.EMAIL].send.call_count == 1


@pytest.mark.unit
class TestChannelEndpoints:
    def test_add_and_list(self, api):
        response = api.post(
            "/api/v1/notifications/users/user-1/channels",
            json={"channel_type": "email", "channel_value": "A@Example.com"},
        )

        assert response.status_code == 201
        created = response.json()
        assert created["channel_value"] == "a@example.com"
        assert created["is_primary"] is True
        assert created["is_verified"] is False

        listed = api.get("/api/v1/notifications/users/user-1/channels").json()
        assert [c["channel_id"] for c in listed] == [created["channel_id"]]

    def test_invalid_phone_number(self, api):
        response = api.post(
            "/api/v1/notifications/users/user-1/channels",
            json={"channel_type": "sms", "channel_value": "555-1234"},
        )

        assert response.status_code == 422

    def test_set_primary_and_deactivate(self, api):
        email_id = _add_verified(api, "email", "a@example.com")
        sms_id = _add_verified(api, "sms", "+15551234567")

        primary = api.post(f"/api/v1/notifications/users/user-1/channels/{sms_id}/primary")
        deactivated = api.post(
            f"/api/v1/notifications/users/user-1/channels/{email_id}/deactivate"
        )

        assert primary.status_code == 200
        assert primary.json()["is_primary"] is True
        assert deactivated.json()["is_verified"] is False

    def test_unverified_channel_cannot_be_primary(self, api):
        _add_verified(api, "email", "a@example.com")
        response = api.post(
            "/api/v1/notifications/users/user-1/channels",
            json={"channel_type": "sms", "channel_value": "+15551234567"},
        )
        sms_id = response.json()["channel_id"]

        primary = api.post(f"/api/v1/notifications/users/user-1/channels/{sms_id}/primary")

        assert primary.status_code == 422

    def test_unknown_channel_is_404(self, api):
        response = api.post("/api/v1/notifications/users/user-1/channels/missing/verify")

        assert response.status_code == 404


@pytest.mark.unit
class TestDeliveriesAndHealth:
    def test_deliveries_newest_first(self, api):
        _add_verified(api, "email", "a@example.com")
        api.post("/api/v1/notifications/send", json=_payload(notification_type="first"))
        api.post("/api/v1/notifications/send", json=_payload(notification_type="second"))

        response = api.get("/api/v1/notifications/users/user-1/deliveries")

        assert response.status_code == 200
        records = response.json()
        assert [r["notification_type"] for r in records] == ["second", "first"]
        assert records[0]["delivery_status"] == "delivered"
        assert records[0]["record_key"]

    def test_deliveries_limit(self, api):
        api.post("/api/v1/notifications/send", json=_payload())
        api.post("/api/v1/notifications/send", json=_payload())

        response = api.get("/api/v1/notifications/users/user-1/deliveries?limit=1")

        assert len(response.json()) == 1

    def test_get_single_delivery(self, api):
        _add_verified(api, "email", "a@example.com")
        record_key = api.post("/api/v1/notifications/send", json=_payload()).json()["record_key"]

        response = api.get(f"/api/v1/notifications/users/user-1/deliveries/{record_key}")

        assert response.status_code == 200
        assert response.json()["record_key"] == record_key
        assert response.json()["delivery_status"] == "delivered"

    def test_delivery_of_another_user_is_404(self, api):
        _add_verified(api, "email", "a@example.com")
        record_key = api.post("/api/v1/notifications/send", json=_payload()).json()["record_key"]

        response = api.get(f"/api/v1/notifications/users/user-2/deliveries/{record_key}")

        assert response.status_code == 404

    def test_unknown_delivery_is_404(self, api):
        response = api.get("/api/v1/notifications/users/user-1/deliveries/missing")

        assert response.status_code == 404

    def test_delivery_log_outage_is_503(self, app):
        service = MagicMock()
        service.list_deliveries.side_effect = DeliveryLogReadError("table unavailable")
        service.get_delivery.side_effect = DeliveryLogReadError("table unavailable")
        app.dependency_overrides[get_notification_service] = lambda: service
        client = TestClient(app)

        listed = client.get("/api/v1/notifications/users/user-1/deliveries")
        single = client.get("/api/v1/notifications/users/user-1/deliveries/key")

        assert listed.status_code == 503
        assert single.status_code == 503

    def test_health_ok(self, api):
        response = api.get("/api/v1/notifications/health")

        assert response.status_code == 200
        assert response.json()["senders"] == {"email": True, "sms": True, "whatsapp": True}

    def test_health_degraded(self, api, senders):
        senders[ChannelType.SMS].health_check.return_value = OperationResult.permanent_error(
            "no creds"
        )

        response = api.get("/api/v1/notifications/health")

        assert response.status_code == 503
        assert response.json()["healthy"] is False
