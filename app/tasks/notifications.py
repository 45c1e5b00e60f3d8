from __future__ import annotations
import logging
import httpx
from app.tasks.celery_app import celery_app
from app.core.config import settings
from app.core.notifications import NotificationClient

log = logging.getLogger(__name__)

@celery_app.task(name="notify_status_change")
def notify_status_change(work_order_id: str, wo_id: str, old_status: str, new_status: str) -> bool:
    if not settings.notification_webhook_url:
        log.info("No notification webhook configured, skipping", extra={"work_order_id": work_order_id, "stage": new_status})
        return False

    client = NotificationClient(webhook_url=settings.notification_webhook_url)
    try:
        client.send_status_update(wo_id=wo_id, old_status=old_status, new_status=new_status, work_order_id=work_order_id)
    except httpx.HTTPError as e:
        # Delivery failures never roll back the status change
        log.error("Failed to send status update notification: %s", e, extra={"work_order_id": work_order_id, "stage": new_status})
        return False

    log.info("Status update notification sent", extra={"work_order_id": work_order_id, "stage": new_status})
    return True


def enqueue_status_notification(work_order, previous_status) -> None:
    try:
        notify_status_change.delay(work_order.id, work_order.wo_id, str(previous_status), str(work_order.status))
    except Exception as e:
        log.warning("Could not enqueue status notification: %s", e,
                    extra={"work_order_id": work_order.id, "stage": str(work_order.status)})
