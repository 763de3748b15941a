"""FastAPI middleware for request tracing and metrics"""

import uuid
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from loan_gateway.config import settings
from loan_gateway.infrastructure.observability.metrics import request_duration_histogram


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """Attach the caller's correlation ID (or a fresh one) to each request"""

    async def dispatch(self, request: Request, call_next):
        header = settings.correlation_header
        correlation_id = request.headers.get(header) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        response = await call_next(request)
        response.headers[header] = correlation_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record HTTP request metrics"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        duration = time.time() - start_time
        request_duration_histogram.labels(
            method=request.method,
            endpoint=request.url.path,
            status=response.status_code,
        ).observe(duration)

        return response
