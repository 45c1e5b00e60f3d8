"""Tests for the status-change notification task (no network calls)."""
from unittest.mock import MagicMock, patch
import httpx
from app.tasks import notifications
from app.tasks.notifications import enqueue_status_notification, notify_status_change


def test_skips_when_no_webhook_configured():
    with patch.object(notifications.settings, "notification_webhook_url", None):
        assert notify_status_change.run("id-1", "WO-1", "TRIAGE", "QUOTATION") is False


def test_posts_payload_to_webhook():
    with patch.object(notifications.settings, "notification_webhook_url", "https://hooks.example.test/wo"), \
         patch("app.core.notifications.httpx.Client") as client_cls:
        http = client_cls.return_value.__enter__.return_value
        http.post.return_value = MagicMock(status_code=200)

        assert notify_status_change.run("id-1", "WO-1", "TRIAGE", "QUOTATION") is True

        url = http.post.call_args.args[0]
        payload = http.post.call_args.kwargs["json"]
        assert url == "https://hooks.example.test/wo"
        assert payload["previous_status"] == "TRIAGE"
        assert payload["status"] == "QUOTATION"
        assert payload["subject"] == "Work Order Status Update - WO-1"


def test_delivery_failure_is_logged_not_raised():
    with patch.object(notifications.settings, "notification_webhook_url", "https://hooks.example.test/wo"), \
         patch("app.core.notifications.httpx.Client") as client_cls:
        http = client_cls.return_value.__enter__.return_value
        http.post.side_effect = httpx.ConnectError("refused")

        assert notify_status_change.run("id-1", "WO-1", "QA", "CLOSURE") is False


def test_enqueue_passes_string_statuses():
    work_order = MagicMock(id="id-1", wo_id="WO-1", status="QUOTATION")
    with patch.object(notify_status_change, "delay") as delay:
        enqueue_status_notification(work_order, "TRIAGE")
    delay.assert_called_once_with("id-1", "WO-1", "TRIAGE", "QUOTATION")
