"""
Request and response plumbing for API Gateway REST proxy events.

Incoming events are read through the Powertools ``APIGatewayProxyEvent`` data
class; responses are plain proxy response dictionaries (``statusCode``,
``headers``, ``body``).
"""

import json
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from aws_lambda_powertools.utilities.data_classes import APIGatewayProxyEvent

from service.handlers.utils.errors import BaseServiceError, InputError, format_error_response, get_http_status_code

# Read-only for the lifetime of the process
CORS_HEADERS: Mapping[str, str] = MappingProxyType({
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
})

JSON_CONTENT_TYPE = "application/json"
CSV_CONTENT_TYPE = "text/csv; charset=utf-8"


def get_http_method(event: Dict[str, Any]) -> str:
    """Return the upper-cased HTTP verb of a proxy event, or an empty string."""
    proxy_event = APIGatewayProxyEvent(event)
    if not proxy_event.get("httpMethod"):
        return ""
    return proxy_event.http_method.upper()


def parse_json_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Decode the request body of a proxy event into a dictionary.

    Args:
        event: API Gateway proxy event

    Returns:
        Parsed JSON object; an absent body yields an empty dictionary

    Raises:
        InputError: If the body is not valid JSON or not a JSON object
    """
    proxy_event = APIGatewayProxyEvent(event)
    if not proxy_event.body:
        return {}

    try:
        # Base64 and JSON decoding failures are both ValueError subclasses
        body = proxy_event.json_body
    except ValueError as e:
        raise InputError(message="Invalid JSON in request body", details=str(e))

    if not isinstance(body, dict):
        raise InputError(message="Invalid JSON in request body", details="Request body must be a JSON object")

    return body


def create_api_response(
    status_code: int,
    body: str,
    content_type: str = JSON_CONTENT_TYPE,
    headers: Optional[Dict[str, str]] = None,
    request_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Create an API Gateway proxy response carrying the CORS headers."""

    response_headers = {**CORS_HEADERS, "Content-Type": content_type}

    if request_id:
        response_headers["X-Request-ID"] = request_id

    if headers:
        response_headers.update(headers)

    return {
        "statusCode": status_code,
        "headers": response_headers,
        "body": body,
    }


def json_response(status_code: int, payload: Dict[str, Any], request_id: Optional[str] = None) -> Dict[str, Any]:
    return create_api_response(
        status_code=status_code,
        body=json.dumps(payload, ensure_ascii=False),
        request_id=request_id,
    )


def error_response(error: BaseServiceError, request_id: Optional[str] = None) -> Dict[str, Any]:
    """Convert a service error into its JSON error response."""
    return json_response(
        status_code=get_http_status_code(error),
        payload=format_error_response(error),
        request_id=request_id,
    )


def preflight_response(request_id: Optional[str] = None) -> Dict[str, Any]:
    """Answer a CORS preflight with an empty body."""
    headers = dict(CORS_HEADERS)
    if request_id:
        headers["X-Request-ID"] = request_id
    return {
        "statusCode": 200,
        "headers": headers,
        "body": "",
    }
