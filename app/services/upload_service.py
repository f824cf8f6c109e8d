# app/services/upload_service.py
"""Image uploads to Cloudinary (unsigned preset)."""
import logging
from typing import Optional

import httpx
from fastapi import UploadFile

from app.core.config import Settings
from app.core.exceptions import UploadTimeoutError, UpstreamError, ValidationError
from app.schemas.upload_schemas import UploadResult

logger = logging.getLogger(__name__)


def validate_image(content_type: Optional[str], size: int, settings: Settings) -> None:
    if not content_type or not content_type.startswith("image/"):
        raise ValidationError("Only image files can be uploaded")
    if size == 0:
        raise ValidationError("The uploaded file is empty")
    if size > settings.max_upload_bytes:
        limit_mb = settings.max_upload_bytes // (1024 * 1024)
        raise ValidationError(f"Image must be {limit_mb}MB or smaller")


async def upload_image(
    content: bytes,
    filename: str,
    content_type: Optional[str],
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> UploadResult:
    validate_image(content_type, len(content), settings)

    if not settings.cloudinary_cloud_name or not settings.cloudinary_upload_preset:
        logger.error("Cloudinary is not configured")
        raise UpstreamError("Image upload is not configured")

    try:
        async with httpx.AsyncClient(transport=transport, timeout=settings.upload_timeout_seconds) as client:
            response = await client.post(
                settings.cloudinary_upload_url,
                data={"upload_preset": settings.cloudinary_upload_preset},
                files={"file": (filename or "upload", content, content_type)},
            )
    except httpx.TimeoutException:
        logger.warning("Upload of %s timed out after %ss", filename, settings.upload_timeout_seconds)
        raise UploadTimeoutError()
    except httpx.HTTPError as e:
        logger.error("Upload of %s failed: %s", filename, e)
        raise UpstreamError("Image upload failed")

    if response.is_error:
        detail = "Image upload failed"
        try:
            detail = response.json().get("error", {}).get("message") or detail
        except ValueError:
            pass
        logger.error("Cloudinary returned %s for %s: %s", response.status_code, filename, detail)
        raise UpstreamError(detail)

    body = response.json()
    if not body.get("secure_url"):
        raise UpstreamError("Image upload returned no URL")

    logger.info("Uploaded %s to %s", filename, body["secure_url"])
    return UploadResult(
        url=body["secure_url"],
        public_id=body.get("public_id"),
        width=body.get("width"),
        height=body.get("height"),
        format=body.get("format"),
    )


async def upload_file(
    file: UploadFile,
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> UploadResult:
    # one byte past the limit is enough to know it is too big
    content = await file.read(settings.max_upload_bytes + 1)
    return await upload_image(content, file.filename, file.content_type, settings, transport)
