from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware


class HSTSMiddleware(BaseHTTPMiddleware):
    """Adds Strict-Transport-Security to every response (enabled outside development)."""

    def __init__(self, app, max_age: int, include_subdomains: bool = True):
        super().__init__(app)
        value = f"max-age={max_age}"
        if include_subdomains:
            value += "; includeSubDomains"
        self.header_value = value

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("Strict-Transport-Security", self.header_value)
        return response
