from fastapi import APIRouter
from .vouchers_router import router as vouchers_router
from .cart_router import router as cart_router
from .orders_router import router as orders_router
from .payments_router import router as payments_router
from .expenses_router import router as expenses_router
from .reports_router import router as reports_router

router = APIRouter()

router.include_router(vouchers_router)
router.include_router(cart_router)
router.include_router(orders_router)
router.include_router(payments_router)
router.include_router(expenses_router)
router.include_router(reports_router)
