import httpx
import pytest

from app.core.config import Settings, get_settings
from app.core.exceptions import ValidationError
from app.core.http import get_http_transport
from app.services.upload_service import validate_image
from main import app

JPEG = ("barber.jpg", b"\xff\xd8\xff fake jpeg", "image/jpeg")


def use_cloudinary(handler):
    app.dependency_overrides[get_http_transport] = lambda: httpx.MockTransport(handler)


async def upload(client, headers, file=JPEG):
    return await client.post("/uploads/images", files={"file": file}, headers=headers)


async def test_upload_returns_secure_url(client, admin_headers):
    seen = {}

    def cloudinary(request: httpx.Request):
        seen["url"] = str(request.url)
        seen["body"] = request.content
        return httpx.Response(200, json={
            "secure_url": "https://res.cloudinary.com/demo-cloud/image/upload/barber.jpg",
            "public_id": "barber",
            "width": 640,
            "height": 480,
            "format": "jpg",
        })

    use_cloudinary(cloudinary)

    resp = await upload(client, admin_headers)

    assert resp.status_code == 200, resp.text
    assert resp.json()["url"] == "https://res.cloudinary.com/demo-cloud/image/upload/barber.jpg"
    assert resp.json()["width"] == 640
    assert seen["url"] == "https://api.cloudinary.com/v1_1/demo-cloud/image/upload"
    assert b"demo-preset" in seen["body"]


async def test_only_images_are_accepted(client, admin_headers):
    resp = await upload(client, admin_headers, ("notes.pdf", b"%PDF-1.4", "application/pdf"))

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Only image files can be uploaded"


async def test_file_over_the_limit(client, admin_headers):
    settings = Settings()
    settings.max_upload_bytes = 8
    app.dependency_overrides[get_settings] = lambda: settings

    resp = await upload(client, admin_headers, ("big.png", b"\x89PNG" + b"0" * 32, "image/png"))

    assert resp.status_code == 400


def test_limit_message_names_the_size():
    with pytest.raises(ValidationError) as exc:
        validate_image("image/png", 5 * 1024 * 1024 + 1, Settings())

    assert exc.value.detail == "Image must be 5MB or smaller"


def test_exactly_at_the_limit_is_fine():
    validate_image("image/png", 5 * 1024 * 1024, Settings())


async def test_timeout_becomes_504(client, admin_headers):
    def cloudinary(request: httpx.Request):
        raise httpx.ReadTimeout("timed out", request=request)

    use_cloudinary(cloudinary)

    resp = await upload(client, admin_headers)

    assert resp.status_code == 504


async def test_cloudinary_error_message_is_passed_on(client, admin_headers):
    use_cloudinary(lambda request: httpx.Response(400, json={"error": {"message": "Upload preset not found"}}))

    resp = await upload(client, admin_headers)

    assert resp.status_code == 502
    assert resp.json()["detail"] == "Upload preset not found"


async def test_missing_cloudinary_config(client, admin_headers):
    settings = Settings()
    settings.cloudinary_cloud_name = ""
    app.dependency_overrides[get_settings] = lambda: settings

    resp = await upload(client, admin_headers)

    assert resp.status_code == 502


async def test_only_admin_uploads(client, customer_headers):
    resp = await upload(client, customer_headers)

    assert resp.status_code == 403
