import time
import uuid
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("taskmaster.access")


def _store_status(request: Request) -> dict:
    store = getattr(request.app.state, "task_store", None)
    if store is None:
        return {}
    return {
        "tasks_total": store.get_stats().total,
        "task_filter": store.current_filter.value,
        "unsaved_changes": store.has_unsaved_changes,
    }


class AccessLogMiddleware(BaseHTTPMiddleware):
    """
    One start/end pair per request, tagged with a request id.
    The end line also carries the store's size, filter and unsaved flag, and
    responses get `X-Unsaved-Changes: true` while storage is behind memory.
    """
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        start = time.perf_counter()
        request.state.request_id = request_id

        base = {
            "category": "http",
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
        }
        logger.info("request.start", extra={**base, "event": "request.start"})

        try:
            response: Response = await call_next(request)
        except Exception:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            logger.exception("request.error", extra={**base, "event": "request.error", "duration_ms": duration_ms})
            raise

        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        status = _store_status(request)
        response.headers["X-Request-ID"] = request_id
        if status.get("unsaved_changes"):
            response.headers["X-Unsaved-Changes"] = "true"

        logger.info(
            "request.end",
            extra={
                **base,
                **status,
                "event": "request.end",
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response
