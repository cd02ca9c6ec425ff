import logging
from collections import defaultdict
from collections import deque
from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Iterable
from threading import RLock
from time import monotonic

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response


logger = logging.getLogger(__name__)

PROXY_PATH = "/api/github"


class ProxyRateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding-window limit per client address on paths that spend GitHub quota."""

    def __init__(
        self,
        app,
        requests_per_window: int = 30,
        window_seconds: int = 60,
        limited_paths: Iterable[str] = (PROXY_PATH,),
    ) -> None:
        super().__init__(app)
        self.max_requests = max(1, requests_per_window)
        self.window_seconds = max(1, window_seconds)
        self.limited_paths = frozenset(limited_paths)
        self._windows: dict[str, deque[float]] = defaultdict(deque)
        self._lock = RLock()

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.method != "GET" or request.url.path not in self.limited_paths:
            return await call_next(request)

        client_key = self._client_key(request)
        retry_after = self._admit(client_key, monotonic())
        if retry_after is not None:
            logger.info("Rate limited %s on %s", client_key, request.url.path)
            return JSONResponse(
                status_code=429,
                content={"message": "Too Many Requests"},
                headers={"Retry-After": str(retry_after), "cache-control": "no-store"},
            )

        return await call_next(request)

    def _admit(self, client_key: str, now: float) -> int | None:
        """Record a request, or return seconds to wait when the window is full."""

        with self._lock:
            window = self._windows[client_key]
            cutoff = now - self.window_seconds
            while window and window[0] <= cutoff:
                window.popleft()

            if len(window) >= self.max_requests:
                return max(1, int(self.window_seconds - (now - window[0])))

            window.append(now)
            return None

    @staticmethod
    def _client_key(request: Request) -> str:
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip() or "unknown"

        if request.client and request.client.host:
            return request.client.host

        return "unknown"
