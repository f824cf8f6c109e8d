# app/utils/check_roles.py
from functools import wraps
from typing import Callable

from fastapi import HTTPException

from app.core.exceptions import PermissionDeniedError


def require_role(roles: list[str]):
    """Decorator to validate user role; expects user to be passed by route as ``_user``."""
    allowed = [r.lower() for r in roles]

    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, _user, **kwargs):
            if _user is None:
                raise HTTPException(status_code=401, detail="User not authenticated")
            if _user.role.lower() not in allowed:
                raise PermissionDeniedError()
            return await func(*args, _user=_user, **kwargs)
        return wrapper
    return decorator
