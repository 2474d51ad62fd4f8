"""
Shared response helpers for the function endpoints.

Function endpoints are called cross-origin from the dashboard and
answer with plain JSON envelopes instead of the REST error format.
"""

from typing import Any, Optional
from fastapi import Response
from fastapi.responses import JSONResponse

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def json_response(content: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(content=content, status_code=status_code, headers=CORS_HEADERS)


def preflight_response() -> Response:
    """Empty 200 answer to a CORS preflight."""
    return Response(status_code=200, headers=CORS_HEADERS)


def method_not_allowed(extra: Optional[dict] = None) -> JSONResponse:
    content = {"error": "method not allowed"}
    if extra:
        content.update(extra)
    return json_response(content, status_code=405)


FUNCTION_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
