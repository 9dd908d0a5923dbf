"""Confirmation endpoint: GET shows the pending listing, POST completes it."""

from src.services.dependencies import build_services
from src.utils.errors import RumooError
from src.utils.logging import correlation_context, get_structured_logger
from src.utils.logging_config import LoggingConfig
from src.utils.responses import error_response, get_method, get_query_param, json_response, parse_json_body, run_sync

logger = get_structured_logger(__name__)


def handler(request, services=None):
    """GET|POST /api/confirm?token=<token>"""
    LoggingConfig.setup_logging()
    with correlation_context():
        try:
            token = get_query_param(request, "token", "")
            services = services or build_services()

            if get_method(request) == "POST":
                fields = parse_json_body(request) or {}
                result = run_sync(services.confirmation.confirm(token, fields))
                return json_response(200, result)

            return json_response(200, services.confirmation.get_pending(token))
        except Exception as e:
            if not isinstance(e, RumooError) or e.status_code >= 500:
                logger.error("/api/confirm error", exc_info=True, error=str(e))
            return error_response(e)
