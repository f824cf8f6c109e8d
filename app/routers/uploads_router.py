# app/routers/uploads_router.py
from fastapi import APIRouter, Depends, File, UploadFile

from app.core.config import Settings, get_settings
from app.core.http import get_http_transport
from app.schemas.upload_schemas import UploadResult
from app.services import upload_service
from app.utils.get_user import get_current_user
from app.utils.check_roles import require_role

router = APIRouter(prefix="/uploads", tags=["Uploads"])


@router.post("/images", response_model=UploadResult)
@require_role(["admin"])
async def upload_image_route(
    file: UploadFile = File(...),
    settings: Settings = Depends(get_settings),
    transport=Depends(get_http_transport),
    _user=Depends(get_current_user),
):
    """
    Product and barber pictures. Images only, 5MB at most.
    """
    return await upload_service.upload_file(file, settings, transport)
