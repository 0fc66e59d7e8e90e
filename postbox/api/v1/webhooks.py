"""Payment provider webhook routes"""

from fastapi import APIRouter, Depends, Response, status
import logging

from postbox.api.deps import get_user_service, require_webhook_key
from postbox.schemas.webhook import WebhookEvent
from postbox.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()

UPGRADE_EVENT = "user.upgraded"


@router.post(
    "/payments",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_webhook_key)]
)
def payment_event(
    event: WebhookEvent,
    users: UserService = Depends(get_user_service)
):
    """
    Upgrade a user when the provider reports a completed payment

    Other event types are acknowledged and ignored.
    """
    if event.event != UPGRADE_EVENT:
        logger.info(f"Ignoring webhook event: {event.event}")
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    users.upgrade_user(event.data.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
