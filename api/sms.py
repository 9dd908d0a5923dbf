"""Twilio SMS / WhatsApp webhook. Always answers with TwiML."""

from src.services.dependencies import build_services
from src.services.sms_intake import UNAVAILABLE_REPLY, parse_twilio_form, twiml_message
from src.utils.logging import correlation_context, get_structured_logger
from src.utils.logging_config import LoggingConfig
from src.utils.responses import get_raw_body, run_sync, twiml_response

logger = get_structured_logger(__name__)


def handler(request, services=None):
    """POST /api/sms (form-encoded From, Body, MessageSid)"""
    LoggingConfig.setup_logging()
    with correlation_context():
        try:
            form = request.get("form") or parse_twilio_form(get_raw_body(request))
            services = services or build_services()
            return twiml_response(run_sync(services.sms.handle(form)))
        except Exception as e:
            logger.error("SMS webhook error", exc_info=True, error=str(e))
            return twiml_response(twiml_message(UNAVAILABLE_REPLY))
