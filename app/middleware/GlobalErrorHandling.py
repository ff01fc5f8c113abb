from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware


class GlobalErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turns anything a route lets escape into the standard error envelope."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:  # pylint: disable=broad-except
            print(f"[Error] {request.method} {request.url.path}: {e}")
            return JSONResponse(
                status_code=500,
                content={"data": None, "error": "Internal server error", "success": False},
            )
