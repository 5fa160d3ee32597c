"""
Request logging middleware for the license service.
Logs method, path and the real client IP behind Cloudflare / proxies.
"""

import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


def client_ip(request: Request) -> str:
    """CF-Connecting-IP (Cloudflare tunnel), then x-forwarded-for, then the socket peer."""
    ip = request.headers.get("cf-connecting-ip", "").strip()
    if not ip:
        ip = request.headers.get("x-forwarded-for", "").split(",")[0].strip()
    if not ip:
        ip = request.client.host if request.client else ""
    return ip or "unknown"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        logger.info(f"{request.method} {request.url.path} | IP: {client_ip(request)}")
        return await call_next(request)
