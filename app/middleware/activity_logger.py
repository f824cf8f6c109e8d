# app/middleware/activity_logger.py
import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.db import AsyncSessionLocal
from app.utils.activity_helpers import log_user_activity

logger = logging.getLogger(__name__)

MODIFYING_METHODS = ("POST", "PUT", "PATCH", "DELETE")


class ActivityLoggerMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        # Call actual endpoint
        response = await call_next(request)

        # get_current_user fills these in while the endpoint runs
        user_id = getattr(request.state, "user_id", None)
        username = getattr(request.state, "username", None)

        if user_id and request.method in MODIFYING_METHODS and response.status_code < 400:
            message = f"Performed {request.method} on {request.url.path}"
            try:
                async with AsyncSessionLocal() as db:
                    await log_user_activity(db, user_id=user_id, username=username, message=message)
                    await db.commit()
            except Exception:
                logger.exception("Failed to log activity for %s %s", request.method, request.url.path)

        return response
