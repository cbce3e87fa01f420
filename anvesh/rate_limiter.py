"""
Per-client token bucket rate limiter.

Each client starts with `number_of_requests` tokens and gets one token back
every `time_limit` seconds, up to the bucket size.
"""

import logging
import math
import threading
import time
from typing import Callable, Dict, Tuple

from fastapi import HTTPException, Request

logger = logging.getLogger(__name__)


def client_ip(request: Request) -> str:
    # Behind a reverse proxy, prefer the first X-Forwarded-For hop.
    xff = (request.headers.get("x-forwarded-for") or "").strip()
    if xff:
        return xff.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


class RateLimiter:
    """Token bucket per client key"""

    def __init__(self,
                 number_of_requests: int,
                 time_limit: float,
                 clock: Callable[[], float] = time.monotonic,
                 sweep_interval: int = 1000):
        if number_of_requests <= 0 or time_limit <= 0:
            raise ValueError("Rate limiter values must be positive")
        self.capacity = number_of_requests
        self.refill_interval = time_limit
        self._clock = clock
        self._buckets: Dict[str, Tuple[float, float]] = {}
        self._lock = threading.Lock()
        self._sweep_interval = max(1, sweep_interval)
        self._acquired = 0

    @property
    def tracked_clients(self) -> int:
        return len(self._buckets)

    def _refilled(self, tokens: float, updated: float, now: float) -> float:
        return min(self.capacity, tokens + (now - updated) / self.refill_interval)

    def _sweep(self, now: float) -> None:
        # A full bucket holds no state worth keeping; a new one starts full.
        full = [
            key for key, (tokens, updated) in self._buckets.items()
            if self._refilled(tokens, updated, now) >= self.capacity
        ]
        for key in full:
            del self._buckets[key]
        if full:
            logger.debug(f"Rate limiter dropped {len(full)} idle clients")

    def acquire(self, key: str) -> float:
        """
        Take one token for `key`.

        Every `sweep_interval` calls, clients whose bucket has refilled
        to capacity are forgotten.

        Returns:
            0 if the request is allowed, otherwise seconds until a token is available
        """
        now = self._clock()
        with self._lock:
            self._acquired += 1
            if self._acquired % self._sweep_interval == 0:
                self._sweep(now)

            tokens, updated = self._buckets.get(key, (float(self.capacity), now))
            tokens = self._refilled(tokens, updated, now)

            if tokens >= 1:
                self._buckets[key] = (tokens - 1, now)
                return 0.0

            self._buckets[key] = (tokens, now)
            return (1 - tokens) * self.refill_interval

    def reset(self):
        with self._lock:
            self._buckets.clear()

    def __call__(self, request: Request) -> None:
        """FastAPI dependency: raise 429 when the client is over its quota"""
        ip = client_ip(request)
        wait = self.acquire(ip)
        if wait > 0:
            logger.warning(f"Rate limit exceeded for {ip}")
            raise HTTPException(
                status_code=429,
                detail="Too many requests. Please retry later.",
                headers={"Retry-After": str(math.ceil(wait))}
            )
