from fastapi import APIRouter

from .products import router as products_router
from .alerts import router as alerts_router

router = APIRouter()

router.include_router(products_router)
router.include_router(alerts_router)
