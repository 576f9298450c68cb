"""
Rate limiting middleware for API protection.

Uses slowapi to limit requests per IP address, preventing:
- Reaction and comment spam
- Repeated triggering of expensive admin recalculation jobs
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from .config import config

RETRY_AFTER_SECONDS = 60


def get_rate_limit() -> str:
    """Per-IP limit string for slowapi."""
    return f"{max(config.RATE_LIMIT_PER_MINUTE, 1)}/minute"


# RATE_LIMIT_PER_MINUTE=0 disables the limiter entirely
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[get_rate_limit()],
    storage_uri="memory://",  # In-memory storage (resets on restart)
    enabled=config.RATE_LIMIT_PER_MINUTE > 0,
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 with a retry hint in the usual {"detail": ...} shape."""
    return JSONResponse(
        status_code=429,
        content={
            "detail": f"Rate limit exceeded: {exc.detail}",
            "retry_after": RETRY_AFTER_SECONDS,
        },
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
    )


def reset_rate_limits():
    """Forget all recorded hits."""
    limiter.reset()


def setup_rate_limiting(app: FastAPI):
    """Attach the limiter, its middleware and the 429 handler to app."""
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
