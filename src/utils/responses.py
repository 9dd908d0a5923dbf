"""Serverless request/response helpers shared by the api/ handlers."""

import asyncio
import json
from typing import Any, Optional
from src.utils.errors import PipelineError, RumooError

JSON_HEADERS = {"Content-Type": "application/json"}
TWIML_HEADERS = {"Content-Type": "text/xml"}


def json_response(status_code: int, body: Any) -> dict:
    return {
        "statusCode": status_code,
        "headers": dict(JSON_HEADERS),
        "body": json.dumps(body, default=str),
    }


def twiml_response(xml: str) -> dict:
    return {
        "statusCode": 200,
        "headers": dict(TWIML_HEADERS),
        "body": xml,
    }


def error_response(error: Exception) -> dict:
    """Map an exception onto the JSON error shape used by every endpoint."""
    if isinstance(error, PipelineError):
        return json_response(500, {"error": "Pipeline error", "details": error.message})
    if isinstance(error, RumooError) and error.status_code < 500:
        body = {"error": error.message}
        body.update(error.details)
        return json_response(error.status_code, body)
    return json_response(500, {"error": "Internal server error", "details": str(error)})


def get_query_param(request: dict, name: str, default: Optional[str] = None) -> Optional[str]:
    query_params = request.get("query", {}) or {}
    value = query_params.get(name, default)
    if isinstance(value, list):
        value = value[0] if value else default
    return value


def get_method(request: dict) -> str:
    return (request.get("method") or "GET").upper()


def parse_json_body(request: dict) -> Any:
    """Request body as JSON; dict bodies pass through, empty or invalid bodies give None."""
    body = request.get("body")
    if body is None or isinstance(body, (dict, list)):
        return body
    if isinstance(body, bytes):
        body = body.decode("utf-8")
    if not body.strip():
        return None
    try:
        return json.loads(body)
    except json.JSONDecodeError:
        return None


def get_raw_body(request: dict) -> str:
    body = request.get("body") or ""
    return body.decode("utf-8") if isinstance(body, bytes) else str(body)


def run_sync(coro):
    """Run a coroutine to completion from a synchronous handler."""
    return asyncio.run(coro)
