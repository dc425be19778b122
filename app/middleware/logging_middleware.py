import time
import json
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import structlog
from uuid import uuid4

logger = structlog.get_logger()

REDACTED_FIELDS = {"password"}


def _body_log_fields(body: bytes, content_type: str) -> dict:
    """Flatten a request body into log fields, hiding credentials."""
    if "application/json" not in content_type:
        return {"body_size": len(body)}

    try:
        body_data = json.loads(body.decode())
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {"body_size": len(body)}

    if not isinstance(body_data, dict):
        return {"body": str(body_data)[:200]}

    fields = {}
    for key, value in body_data.items():
        if key in REDACTED_FIELDS:
            fields[f"body_{key}"] = "***"
        elif isinstance(value, (str, int, float, bool)) or value is None:
            fields[f"body_{key}"] = value
        else:
            fields[f"body_{key}"] = str(value)[:100]  # Truncate long values
    return fields


class LoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid4())
        start_time = time.time()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        log_data = {
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else None,
        }

        if request.method in ["POST", "PUT", "PATCH"]:
            body = await request.body()
            if body:
                log_data.update(_body_log_fields(body, request.headers.get("content-type", "")))

        logger.info("API Request Started", **log_data)

        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "API Request Failed",
                path=request.url.path,
                method=request.method,
                error=str(e),
                process_time=round(time.time() - start_time, 4)
            )
            raise

        response_log_data = {
            "path": request.url.path,
            "method": request.method,
            "status_code": response.status_code,
            "process_time": round(time.time() - start_time, 4),
        }

        if response.status_code >= 400:
            logger.warning("API Request Completed with Error", **response_log_data)
        else:
            logger.info("API Request Completed Successfully", **response_log_data)

        response.headers["X-Request-ID"] = request_id
        return response
