"""Listing ingest endpoint: full capture from the browser or a bare listing URL."""

from src.services.dependencies import build_services
from src.utils.errors import RumooError
from src.utils.logging import correlation_context, get_structured_logger
from src.utils.logging_config import LoggingConfig
from src.utils.responses import error_response, json_response, parse_json_body, run_sync

logger = get_structured_logger(__name__)


def handler(request, services=None):
    """
    POST /api/ingest

    Body `{"listing": {...}}` or `{"url": "..."}`. Returns 201 with the
    certificate link, or 202 with a confirmation link when the listing could
    not be read.
    """
    LoggingConfig.setup_logging()
    with correlation_context():
        try:
            body = parse_json_body(request)
            services = services or build_services()
            outcome = run_sync(services.router.ingest(body))
            return json_response(outcome.status_code, outcome.to_body())
        except Exception as e:
            if not isinstance(e, RumooError) or e.status_code >= 500:
                logger.error("/api/ingest error", exc_info=True, error=str(e))
            return error_response(e)
