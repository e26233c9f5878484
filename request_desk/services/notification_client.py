# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""HTTP client to dispatch assignment notifications."""
import httpx

from request_desk.core.config import settings
from request_desk.core.logging import get_logger

logger = get_logger(__name__)


class NotificationClient:
    def notify_assigned(self, request_id: str, assignee_id: str, title: str, priority: str):
        if not settings.NOTIFICATION_SERVICE_URL:
            return
        try:
            with httpx.Client(timeout=settings.NOTIFICATION_TIMEOUT) as client:
                client.post(
                    f"{settings.NOTIFICATION_SERVICE_URL}/api/v1/notify",
                    json={
                        "request_id": request_id,
                        "channel": "push",
                        "recipient": assignee_id,
                        "message": f"[{priority}] {title}",
                    },
                )
        except Exception as exc:
            logger.warning("Notification service unreachable: %s", exc)
