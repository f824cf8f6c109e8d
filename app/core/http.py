# app/core/http.py
from typing import Optional

import httpx


def get_http_transport() -> Optional[httpx.AsyncBaseTransport]:
    """Transport used for outbound calls. ``None`` means the real network."""
    return None
