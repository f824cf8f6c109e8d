# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import LOG_LEVEL, get_settings
from app.core.db import init_models
from app.core.exceptions import register_exception_handlers
from app.middleware.activity_logger import ActivityLoggerMiddleware
from app.routers import auth, inventory, billing, booking, uploads_router, chat_router

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_models()
    logger.info("Barbershop API started")
    yield


app = FastAPI(
    title="Barbershop API",
    description="FastAPI backend for shop orders, payments, bookings and the walk-in queue",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ActivityLoggerMiddleware)

register_exception_handlers(app)


# Health check endpoint
@app.get("/", tags=["Health"])
async def health_check():
    return {"status": "ok", "message": "Backend is running"}


# Register routers
app.include_router(auth.router)
app.include_router(inventory.router)
app.include_router(billing.router)
app.include_router(booking.router)
app.include_router(uploads_router)
app.include_router(chat_router)
