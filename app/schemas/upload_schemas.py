# app/schemas/upload_schemas.py
from pydantic import BaseModel
from typing import Optional


class UploadResult(BaseModel):
    url: str
    public_id: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    format: Optional[str] = None
