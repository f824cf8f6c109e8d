# app/utils/activity_helpers.py
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.activity_models import UserActivity

MAX_MESSAGE_LENGTH = 500


async def log_user_activity(
    db: AsyncSession,
    user_id: Optional[int] = None,
    username: Optional[str] = None,
    message: str = "",
) -> UserActivity:
    """
    Adds an audit row to the session. It is written by the caller's commit,
    together with the change it describes.
    """
    activity = UserActivity(
        user_id=user_id,
        username=username or "system",
        message=message.strip()[:MAX_MESSAGE_LENGTH],
    )
    db.add(activity)
    return activity
