from __future__ import annotations
import httpx
from dataclasses import dataclass
from app.core.config import settings

@dataclass
class NotificationClient:
    webhook_url: str
    timeout: float = settings.notification_timeout

    def send_status_update(self, wo_id: str, old_status: str, new_status: str, work_order_id: str) -> dict:
        payload = {
            "event": "work_order.status_updated",
            "work_order_id": work_order_id,
            "wo_id": wo_id,
            "previous_status": old_status,
            "status": new_status,
            "subject": f"Work Order Status Update - {wo_id}",
        }
        with httpx.Client(timeout=self.timeout) as client:
            r = client.post(self.webhook_url, json=payload)
            r.raise_for_status()
            return payload
