"""Inbound webhook deduplication using the intake_events table."""

import hashlib
import json
from src.services.record_store import RecordStore
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

INTAKE_EVENTS_TABLE = "intake_events"


def generate_event_id(form: dict) -> str:
    """Twilio's MessageSid when present, otherwise a hash of the sorted form fields."""
    message_sid = (form or {}).get("MessageSid")
    if message_sid:
        return str(message_sid)
    body_str = json.dumps(form or {}, sort_keys=True)
    return f"sms_{hashlib.sha1(body_str.encode()).hexdigest()}"


def is_duplicate_event(store: RecordStore, form: dict) -> bool:
    """
    Check whether this delivery was already processed, marking it as seen when new.

    Store failures are logged and the delivery is treated as new.
    """
    event_id = generate_event_id(form)
    try:
        if store.get(INTAKE_EVENTS_TABLE, "event_id", event_id):
            logger.info("Duplicate inbound message detected", event_id=event_id)
            return True
    except Exception as e:
        logger.error("Error checking duplicate event", event_id=event_id, error=str(e))
        return False

    try:
        store.insert(INTAKE_EVENTS_TABLE, {"event_id": event_id})
    except Exception as e:
        logger.warning("Failed to insert intake event (non-fatal)", event_id=event_id, error=str(e))
    return False
