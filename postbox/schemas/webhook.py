"""Payment provider webhook schemas"""

from pydantic import BaseModel


class WebhookData(BaseModel):
    user_id: int


class WebhookEvent(BaseModel):
    """Inbound event; only ``user.upgraded`` is acted on"""
    event: str
    data: WebhookData
