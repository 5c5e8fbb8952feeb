"""Shared-password gate and per-client rate limiting."""
import os
import time
from typing import Optional
from collections import defaultdict

from fastapi import Header, HTTPException, Request

# --- Config ---
# Empty means the app is open (single-user local install).
APP_PASSWORD = os.environ.get("LINGOTALES_PASSWORD", "")

# --- Rate Limiting ---
RATE_LIMIT_REQUESTS = 30
RATE_LIMIT_WINDOW = 60
_rate_buckets: dict = defaultdict(list)
_rate_check_counter = 0


def rate_limit_check(key: str) -> bool:
    now = time.time()
    cutoff = now - RATE_LIMIT_WINDOW
    _rate_buckets[key] = [t for t in _rate_buckets[key] if t > cutoff]
    if len(_rate_buckets[key]) >= RATE_LIMIT_REQUESTS:
        return False
    _rate_buckets[key].append(now)
    return True


def rate_limit_cleanup():
    global _rate_check_counter
    _rate_check_counter += 1
    if _rate_check_counter % 100 == 0:
        now = time.time()
        cutoff = now - RATE_LIMIT_WINDOW
        stale = [key for key, ts in _rate_buckets.items() if not ts or ts[-1] < cutoff]
        for key in stale:
            del _rate_buckets[key]


def rate_limit_reset():
    _rate_buckets.clear()


def get_rate_limit_key(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


async def enforce_rate_limit(request: Request):
    """FastAPI dependency guarding the endpoints that spend AI credits."""
    rate_limit_cleanup()
    if not rate_limit_check(get_rate_limit_key(request)):
        raise HTTPException(429, "Too many requests. Please wait a minute.")


async def require_password(x_app_password: Optional[str] = Header(default=None)):
    """FastAPI dependency that validates the X-App-Password header when a password is set."""
    if APP_PASSWORD and x_app_password != APP_PASSWORD:
        raise HTTPException(401, "Unauthorized")
