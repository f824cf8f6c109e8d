# app/services/chat_service.py
"""Server-side proxy to the chat-completions API.

The API key never leaves the server; the browser only sends the
conversation.
"""
import logging
from typing import AsyncIterator, List, Optional

import httpx

from app.core.config import Settings
from app.core.exceptions import ConfigurationError, UpstreamError
from app.schemas.chat_schemas import ChatMessage

logger = logging.getLogger(__name__)

NO_RESPONSE = "No response"
CHAT_TIMEOUT_SECONDS = 60.0

SYSTEM_PROMPT = """Kamu adalah asisten AI Pangkas Sahala Sariwangi, Tasikmalaya.

INFORMASI BARBERSHOP:
- Alamat: Sariwangi, Kec. Sariwangi, Kab. Tasikmalaya 46465
- Jam Buka: 08.00-20.00 WIB (libur tidak menentu)
- Kontak: Akmal (Owner) 081312772527

DAFTAR HARGA LAYANAN:
1. Pangkas Rambut = Rp15.000
2. Kids Haircut = Rp10.000
3. Hair Wash = Rp10.000
4. Hair Styling = Rp20.000
5. Bleaching Rambut = Rp50.000
6. Cat Rambut = Rp50.000
7. Perming Rambut = Rp70.000

DAFTAR HARGA PRODUK:
1. Masker = Rp3.000
2. Hair Tonic = Rp10.000
3. Hair Color = Rp24.000
4. Hair Powder = Rp30.000
5. Pomade = Rp48.000
6. Hair Spray = Rp60.000
7. Serum Rambut = Rp60.000

ATURAN MENJAWAB:
1. Bahasa Indonesia, ramah, maksimal 3 paragraf
2. Jika ditanya harga, sebutkan semua harga dari daftar di atas dengan lengkap
3. Format harga: "Rp15.000" (pakai titik ribuan)
4. Untuk stok produk: arahkan ke Akmal (Owner)
5. Gunakan **bold** untuk nama layanan/produk"""


def with_system_prompt(messages: List[ChatMessage]) -> List[dict]:
    payload = [m.model_dump() for m in messages]
    if payload and payload[0]["role"] == "system":
        return payload
    return [{"role": "system", "content": SYSTEM_PROMPT}] + payload


def _request_body(messages: List[ChatMessage], settings: Settings, stream: bool = False) -> dict:
    body = {
        "model": settings.chat_model,
        "messages": with_system_prompt(messages),
        "temperature": 0.7,
        "top_p": 0.9,
    }
    if stream:
        body["stream"] = True
    return body


def _headers(settings: Settings) -> dict:
    if not settings.chat_api_key:
        raise ConfigurationError("API key not configured")
    return {
        "Authorization": f"Bearer {settings.chat_api_key}",
        "Content-Type": "application/json",
    }


async def chat(
    messages: List[ChatMessage],
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    headers = _headers(settings)
    try:
        async with httpx.AsyncClient(transport=transport, timeout=CHAT_TIMEOUT_SECONDS) as client:
            response = await client.post(
                settings.chat_api_url, headers=headers, json=_request_body(messages, settings)
            )
    except httpx.HTTPError as e:
        logger.error("Chat API request failed: %s", e)
        raise UpstreamError("Chat service is unavailable")

    if response.is_error:
        logger.error("Chat API error: %s", response.status_code)
        raise UpstreamError(f"Chat API error: {response.status_code}")

    choices = response.json().get("choices") or []
    if not choices:
        return NO_RESPONSE
    return (choices[0].get("message") or {}).get("content") or NO_RESPONSE


async def open_chat_stream(
    messages: List[ChatMessage],
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AsyncIterator[bytes]:
    """Start the upstream stream and return an iterator over its SSE bytes.

    The upstream status is checked before returning so an error can still be
    reported as a normal JSON response.
    """
    headers = _headers(settings)
    client = httpx.AsyncClient(transport=transport, timeout=CHAT_TIMEOUT_SECONDS)
    try:
        request = client.build_request(
            "POST", settings.chat_api_url, headers=headers,
            json=_request_body(messages, settings, stream=True),
        )
        response = await client.send(request, stream=True)
    except httpx.HTTPError as e:
        await client.aclose()
        logger.error("Chat stream request failed: %s", e)
        raise UpstreamError("Chat service is unavailable")

    if response.is_error:
        await response.aclose()
        await client.aclose()
        logger.error("Chat stream API error: %s", response.status_code)
        raise UpstreamError(f"Chat API error: {response.status_code}")

    async def relay() -> AsyncIterator[bytes]:
        try:
            async for chunk in response.aiter_bytes():
                yield chunk
        finally:
            await response.aclose()
            await client.aclose()

    return relay()
