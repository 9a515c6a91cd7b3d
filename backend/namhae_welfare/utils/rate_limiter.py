"""
Namhae Welfare — Rate Limiter Middleware
Per-IP request cap over a sliding one-minute window.
Uses in-memory store (single process, no Redis).
"""

import time
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from namhae_welfare.utils.logger import logger


class RateLimiter(BaseHTTPMiddleware):
    """
    Simple in-memory rate limiter.
    Default: 60 requests per minute per IP. A limit of 0 disables it.
    Clients idle for a full window are dropped from the store.
    """

    def __init__(self, app, requests_per_minute: int = 60):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.window = 60  # seconds
        self._store: dict[str, list[float]] = {}
        self._last_sweep = 0.0

    def _recent(self, client_ip: str, now: float) -> list[float]:
        return [t for t in self._store.get(client_ip, ()) if now - t < self.window]

    def _sweep(self, now: float) -> None:
        """Forget every client with no request inside the current window."""
        for client_ip in list(self._store):
            recent = self._recent(client_ip, now)
            if recent:
                self._store[client_ip] = recent
            else:
                del self._store[client_ip]
        self._last_sweep = now

    async def dispatch(self, request: Request, call_next):
        if self.requests_per_minute <= 0:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.time()

        if now - self._last_sweep >= self.window:
            self._sweep(now)

        recent = self._recent(client_ip, now)
        if len(recent) >= self.requests_per_minute:
            self._store[client_ip] = recent
            logger.warning(f"Rate limit hit for {client_ip} on {request.url.path}")
            return JSONResponse(
                status_code=429,
                content={"error": "요청이 너무 많습니다. 잠시 후 다시 시도해주세요."},
            )

        recent.append(now)
        self._store[client_ip] = recent

        return await call_next(request)
