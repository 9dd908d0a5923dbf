"""Space certificate generation endpoint (synchronous)."""

from src.services.dependencies import build_services
from src.utils.errors import RumooError
from src.utils.logging import correlation_context, get_structured_logger
from src.utils.logging_config import LoggingConfig
from src.utils.responses import error_response, get_query_param, json_response, parse_json_body

logger = get_structured_logger(__name__)


def _is_forced(request: dict) -> bool:
    body = parse_json_body(request)
    if isinstance(body, dict) and body.get("force") is True:
        return True
    return str(get_query_param(request, "force", "false")).lower() in ("1", "true", "yes")


def handler(request, services=None):
    """
    POST /api/spaces/generate_certificate?id=<space_id>&tier=normal|pro

    Optional `force` (query or JSON body) regenerates when a certificate
    for the same tier already exists.
    """
    LoggingConfig.setup_logging()
    with correlation_context():
        try:
            space_id = get_query_param(request, "id", "")
            tier = get_query_param(request, "tier", "normal")
            services = services or build_services()
            result = services.space_certificates.generate(space_id, tier, force=_is_forced(request))
            return json_response(201, result)
        except Exception as e:
            if not isinstance(e, RumooError) or e.status_code >= 500:
                logger.error("/api/spaces/generate_certificate error", exc_info=True, error=str(e))
                return _generation_failed(e)
            return error_response(e)


def _generation_failed(error: Exception) -> dict:
    if isinstance(error, RumooError):
        return json_response(500, {"error": "Generation failed", "details": error.message})
    return json_response(500, {"error": "Generation failed", "details": str(error)})
