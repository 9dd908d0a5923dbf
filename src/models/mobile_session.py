"""Mobile session model - one inbound SMS/WhatsApp intake."""

from typing import Literal, Optional
from pydantic import BaseModel, Field


class MobileSession(BaseModel):
    phone_number: str = Field(..., description="Sender, e.g. '+15551234567' or 'whatsapp:+15551234567'")
    property_id: Optional[str] = None
    channel: Literal["sms", "whatsapp"] = "sms"
    state: Literal["done", "waiting", "error"]
    created_at: Optional[str] = None
