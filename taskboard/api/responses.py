"""Error payloads shared by the API routers."""

from fastapi import Request
from fastapi.responses import JSONResponse


def error_response(
    request: Request,
    status_code: int,
    error: str,
    exc: Exception | None = None,
) -> JSONResponse:
    """
    Build an ``{"error": ...}`` response.

    The exception detail is added as ``message`` outside production.
    """
    content = {"error": error}
    if exc is not None and not request.app.state.settings.is_production:
        content["message"] = str(exc)
    return JSONResponse(status_code=status_code, content=content)
