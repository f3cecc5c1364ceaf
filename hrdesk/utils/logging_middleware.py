import logging
import time
from uuid import uuid4

from fastapi import Request

logger = logging.getLogger("hrdesk.requests")

QUIET_PATHS = {"/health", "/"}


async def log_requests(request: Request, call_next):
    """Log each request with its status and timing, tagging it with a request id."""
    start_time = time.time()
    request_id = request.headers.get("X-Request-ID") or uuid4().hex[:12]
    path = request.url.path
    quiet = path in QUIET_PATHS

    if not quiet:
        logger.info("[%s] %s %s started", request_id, request.method, path)

    try:
        response = await call_next(request)
    except Exception as exc:
        process_time = time.time() - start_time
        logger.error(
            "[%s] %s %s failed after %.3fs: %s",
            request_id, request.method, path, process_time, exc,
        )
        raise

    process_time = time.time() - start_time
    if not quiet:
        logger.info(
            "[%s] %s %s -> %s in %.3fs",
            request_id, request.method, path, response.status_code, process_time,
        )

    response.headers["X-Process-Time"] = f"{process_time:.4f}"
    response.headers["X-Request-ID"] = request_id
    return response
