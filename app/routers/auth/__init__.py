from fastapi import APIRouter
from .auth import router as auth_router
from .users import router as users_router
from .activity_router import router as activity_router

# sign-in, accounts and the admin audit trail
router = APIRouter()

for sub_router in (auth_router, users_router, activity_router):
    router.include_router(sub_router)
