import os
from decimal import Decimal
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

# -----------------------
# Database Config
# -----------------------
DB_TYPE = os.getenv("DB_TYPE", "sqlite").lower()

if DB_TYPE == "postgres":
    DATABASE_URL = os.getenv("DATABASE_URL")
    if not DATABASE_URL:
        raise ValueError("DATABASE_URL is required for Postgres setup")
elif DB_TYPE == "sqlite":
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./barbershop.db")
else:
    raise ValueError(f"Unsupported DB_TYPE: {DB_TYPE}")

# -----------------------
# JWT Config
# -----------------------
JWT_SECRET = os.getenv("JWT_SECRET")
if not JWT_SECRET:
    raise ValueError("JWT_SECRET environment variable must be set")

JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
ADMIN_ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ADMIN_ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
REFRESH_TOKEN_EXPIRE_DAYS = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


class Settings:
    """Runtime settings shared by the request handlers.

    Built once per process by ``get_settings`` and handed to services through
    ``Depends(get_settings)`` so tests can swap values without touching the
    environment.
    """

    def __init__(self):
        # PPN 11%
        self.tax_rate = Decimal(os.getenv("TAX_RATE", "0.11"))

        # Chat proxy
        self.chat_api_key = os.getenv("CHAT_API_KEY") or os.getenv("BIGMODEL_API_KEY")
        self.chat_api_url = os.getenv(
            "CHAT_API_URL", "https://open.bigmodel.cn/api/paas/v4/chat/completions"
        )
        self.chat_model = os.getenv("CHAT_MODEL", "glm-4-flash")

        # Image uploads
        self.cloudinary_cloud_name = os.getenv("CLOUDINARY_CLOUD_NAME", "")
        self.cloudinary_upload_preset = os.getenv("CLOUDINARY_UPLOAD_PRESET", "")
        self.upload_timeout_seconds = float(os.getenv("UPLOAD_TIMEOUT_SECONDS", "30"))
        self.max_upload_bytes = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

        # Walk-in queue
        self.queue_minutes_per_customer = int(os.getenv("QUEUE_MINUTES_PER_CUSTOMER", "20"))

        self.cors_origins = [
            origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
        ]

    @property
    def cloudinary_upload_url(self) -> str:
        return f"https://api.cloudinary.com/v1_1/{self.cloudinary_cloud_name}/image/upload"


@lru_cache
def get_settings() -> Settings:
    return Settings()
