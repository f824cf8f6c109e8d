from fastapi import APIRouter
from .services_router import router as services_router
from .barbers_router import router as barbers_router
from .appointments_router import router as appointments_router
from .queue_router import router as queue_router

router = APIRouter()

router.include_router(services_router)
router.include_router(barbers_router)
router.include_router(appointments_router)
router.include_router(queue_router)
