import time
from fastapi import Request
from utils.logger import get_logger

logger = get_logger("http")


async def request_tracker_middleware(request: Request, call_next):
    """Log every request with its status and duration"""
    start_time = time.time()

    try:
        response = await call_next(request)
    except Exception:
        response_time_ms = (time.time() - start_time) * 1000
        logger.error(f"{request.method} {request.url.path} failed after {response_time_ms:.2f}ms")
        raise

    response_time_ms = (time.time() - start_time) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({response_time_ms:.2f}ms)")

    # Add response time header for debugging
    response.headers["X-Response-Time"] = f"{response_time_ms:.2f}ms"
    return response
