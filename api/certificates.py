"""Certificate lookup endpoint."""

from src.services.dependencies import build_services
from src.utils.errors import RumooError
from src.utils.logging import correlation_context, get_structured_logger
from src.utils.logging_config import LoggingConfig
from src.utils.responses import error_response, get_query_param, json_response

logger = get_structured_logger(__name__)


def handler(request, services=None):
    """GET /api/certificates?id=<certificate_id>"""
    LoggingConfig.setup_logging()
    with correlation_context():
        try:
            certificate_id = get_query_param(request, "id", "")
            services = services or build_services()
            return json_response(200, services.space_certificates.get_certificate(certificate_id))
        except Exception as e:
            if not isinstance(e, RumooError) or e.status_code >= 500:
                logger.error("/api/certificates error", exc_info=True, error=str(e))
            return error_response(e)
