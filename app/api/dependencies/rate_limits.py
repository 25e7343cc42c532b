"""slowapi rate limiting shared by all routers.

Send requests are keyed on the calling service's address. Behind the load
balancer that address is the first ``X-Forwarded-For`` hop.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

FORWARDED_HEADER = "X-Forwarded-For"


def client_key_func(request: Request) -> str:
    forwarded = request.headers.get(FORWARDED_HEADER)
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(key_func=client_key_func)


async def rate_limit_handler(_request: Request, exc: Exception):
    """429 with the exceeded limit in the body."""
    detail = exc.detail if isinstance(exc, RateLimitExceeded) else str(exc)
    return JSONResponse(
        status_code=429,
        content={"message": "Rate limit exceeded", "limit": detail},
    )


def setup_rate_limiter(app: FastAPI) -> None:
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)


def get_limiter() -> Limiter:
    return limiter
