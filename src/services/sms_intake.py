"""SMS / WhatsApp intake: extract a listing URL from a Twilio message and reply with TwiML."""

import re
from typing import Optional
from urllib.parse import parse_qs
from xml.sax.saxutils import escape
from src.models.mobile_session import MobileSession
from src.models.payloads import IngestOutcome
from src.models.source import is_supported_listing_url
from src.services.intake_router import IntakeRouter
from src.services.record_store import RecordStore
from src.services.sms_dedup import is_duplicate_event
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

URL_PATTERN = re.compile(r"https?://\S+")

NO_URL_REPLY = (
    "Send me a Zillow, Redfin, or Realtor.com listing URL and I'll analyze it for you.\n\n"
    "Example: just paste the link from your browser."
)
UNSUPPORTED_URL_REPLY = "That doesn't look like a listing URL. Please send a link from Zillow, Redfin, or Realtor.com."
READY_REPLY = (
    "✅ Rumoo analysis ready!\n\n{redirect_url}\n\n"
    "Open this link to see the full certificate with light, noise, and experience assessment."
)
CONFIRM_REPLY = (
    "🏠 Got your listing. I need a bit more info to complete the analysis.\n\n"
    "Fill in the details here (takes 30 seconds):\n{confirmation_url}\n\n"
    "Your certificate will generate automatically after."
)
FAILED_REPLY = (
    "Something went wrong analyzing that listing. Try again in a moment, "
    "or visit rumoo-app.vercel.app to analyze it there."
)
UNAVAILABLE_REPLY = "Having trouble right now. Visit rumoo-app.vercel.app to analyze your listing."


def parse_twilio_form(raw_body: str) -> dict:
    """Decode a form-encoded Twilio webhook body into single-valued fields."""
    parsed = parse_qs(raw_body or "", keep_blank_values=True)
    return {key: values[0] for key, values in parsed.items()}


def detect_channel(sender: str) -> str:
    return "whatsapp" if (sender or "").startswith("whatsapp:") else "sms"


def extract_url(text: str) -> Optional[str]:
    match = URL_PATTERN.search(text or "")
    return match.group(0).strip() if match else None


def twiml_message(message: Optional[str]) -> str:
    """TwiML document with one <Message>, or an empty <Response/> for None."""
    if message is None:
        return '<?xml version="1.0" encoding="UTF-8"?>\n<Response/>'
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f"<Response>\n  <Message>{escape(message)}</Message>\n</Response>"
    )


def session_state(outcome: Optional[IngestOutcome]) -> str:
    if outcome is None:
        return "error"
    if outcome.certificate_id:
        return "done"
    if outcome.needs_confirmation:
        return "waiting"
    return "error"


class SmsIntakeService:
    """Turns one inbound message into an intake, a mobile session and a reply."""

    def __init__(self, store: RecordStore, router: IntakeRouter):
        self.store = store
        self.router = router

    def _record_session(self, sender: str, channel: str, outcome: Optional[IngestOutcome]) -> None:
        session = MobileSession(
            phone_number=sender,
            property_id=outcome.property_id if outcome else None,
            channel=channel,
            state=session_state(outcome),
        )
        try:
            self.store.insert("mobile_sessions", session.model_dump(exclude_none=True))
        except Exception as e:
            logger.warning("Failed to record mobile session", error=str(e))

    async def handle(self, form: dict) -> str:
        """Return the TwiML reply for a parsed Twilio form."""
        sender = form.get("From", "")
        text = form.get("Body", "")
        channel = detect_channel(sender)

        if is_duplicate_event(self.store, form):
            return twiml_message(None)

        logger.info("Inbound message received", phone_number=sender, channel=channel)

        url = extract_url(text)
        if not url:
            return twiml_message(NO_URL_REPLY)
        if not is_supported_listing_url(url):
            return twiml_message(UNSUPPORTED_URL_REPLY)

        outcome = None
        try:
            outcome = await self.router.ingest({"url": url})
        except Exception as e:
            logger.error("Mobile intake failed", exc_info=True, channel=channel, error=str(e))

        self._record_session(sender, channel, outcome)

        if outcome is not None and outcome.certificate_id and outcome.redirect_url:
            return twiml_message(READY_REPLY.format(redirect_url=outcome.redirect_url))
        if outcome is not None and outcome.needs_confirmation and outcome.confirmation_url:
            return twiml_message(CONFIRM_REPLY.format(confirmation_url=outcome.confirmation_url))
        return twiml_message(FAILED_REPLY)
