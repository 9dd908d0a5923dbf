"""Test helper functions."""

import json
from typing import Any, Dict, Optional
from urllib.parse import urlencode


def create_request(
    method: str = "POST",
    path: str = "/api/ingest",
    body: Any = None,
    query: Optional[Dict[str, str]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Create a serverless request object for testing."""
    if headers is None:
        headers = {"content-type": "application/json"}

    return {
        "method": method,
        "path": path,
        "headers": headers,
        "body": json.dumps(body) if body is not None else "",
        "query": query or {},
    }


def create_twilio_request(form: Dict[str, str]) -> Dict[str, Any]:
    """Create a form-encoded Twilio webhook request."""
    return {
        "method": "POST",
        "path": "/api/sms",
        "headers": {"content-type": "application/x-www-form-urlencoded"},
        "body": urlencode(form),
        "query": {},
    }


def response_json(response: Dict[str, Any]) -> Any:
    return json.loads(response["body"])
