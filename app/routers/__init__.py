# app/routers/__init__.py

from . import auth, inventory, billing, booking
from .uploads_router import router as uploads_router
from .chat_router import router as chat_router

__all__ = [
    "auth",
    "inventory",
    "billing",
    "booking",
    "uploads_router",
    "chat_router",
]
