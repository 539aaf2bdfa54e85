"""
API Middleware

- Request logging with caller identity
- Rate limiting per client address
- Security headers
"""

import asyncio
import time
from typing import Callable, Dict, List

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all requests with timing information and bind request context"""
    
    def __init__(self, app, caller_header: str = "X-Caller-Id", anonymous: str = "2vxsx-fae"):
        super().__init__(app)
        self.caller_header = caller_header
        self.anonymous = anonymous
    
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        
        request_id = request.headers.get("X-Request-ID", str(time.time_ns()))
        caller = request.headers.get(self.caller_header) or self.anonymous
        
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id, caller=caller)
        
        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
            client=request.client.host if request.client else None,
        )
        
        response = await call_next(request)
        
        duration_ms = (time.perf_counter() - start_time) * 1000
        
        logger.info(
            "Request completed",
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )
        
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        response.headers["X-Request-ID"] = request_id
        
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding-window rate limiter, keyed by client address.
    
    Buckets with no request left inside the window are dropped, at the latest
    one window after their last request.
    """
    
    def __init__(
        self,
        app,
        max_requests: int = 100,
        window_seconds: int = 60,
    ):
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._requests: Dict[str, List[float]] = {}
        self._last_sweep = 0.0
        self._lock = asyncio.Lock()
    
    def _sweep(self, now: float) -> None:
        """Prune every bucket to the window, dropping the empty ones."""
        for client_id in list(self._requests):
            recent = [t for t in self._requests[client_id] if now - t < self.window_seconds]
            if recent:
                self._requests[client_id] = recent
            else:
                del self._requests[client_id]
        self._last_sweep = now
    
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        client_id = request.client.host if request.client else "unknown"
        current_time = time.time()
        
        async with self._lock:
            if current_time - self._last_sweep >= self.window_seconds:
                self._sweep(current_time)
            
            recent = [
                t for t in self._requests.get(client_id, [])
                if current_time - t < self.window_seconds
            ]
            
            if len(recent) >= self.max_requests:
                self._requests[client_id] = recent
                logger.warning(
                    "Rate limit exceeded",
                    client=client_id,
                    requests=len(recent),
                )
                return Response(
                    content='{"detail": "Rate limit exceeded"}',
                    status_code=429,
                    media_type="application/json",
                    headers={
                        "Retry-After": str(self.window_seconds),
                        "X-RateLimit-Limit": str(self.max_requests),
                        "X-RateLimit-Remaining": "0",
                    },
                )
            
            recent.append(current_time)
            self._requests[client_id] = recent
            remaining = self.max_requests - len(recent)
        
        response = await call_next(request)
        
        response.headers["X-RateLimit-Limit"] = str(self.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses"""
    
    # Swagger UI loads its assets from a CDN
    DOCS_PATHS = ("/docs", "/redoc", "/openapi.json")
    
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if not request.url.path.startswith(self.DOCS_PATHS):
            response.headers["Content-Security-Policy"] = "default-src 'self'"
        
        return response
