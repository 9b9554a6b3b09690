"""HTTP middleware: correlation ids and access logging."""
import logging
import time
import uuid

from fastapi import FastAPI, Request

from heyspender.core.context import get_cid, set_cid

logger = logging.getLogger("heyspender.api")


def install_middleware(app: FastAPI) -> None:
    # Registered innermost first; the correlation id must be set before the access log runs.
    @app.middleware("http")
    async def access_log(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s -> %d (%.2f ms) cid=%s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            get_cid(),
        )
        return response

    @app.middleware("http")
    async def add_correlation_id(request: Request, call_next):
        cid = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        set_cid(cid)
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = cid
        return response


__all__ = ["install_middleware"]
