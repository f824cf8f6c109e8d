from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc, asc, func
from app.models.activity_models import UserActivity
from typing import List, Optional, Tuple

ALLOWED_SORT_FIELDS = {"id", "user_id", "username", "created_at"}


async def get_user_activities(
    db: AsyncSession,
    user_id: Optional[int] = None,
    username: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    page_size: int = 20,
    sort_by: str = "created_at",
    order: str = "desc"
) -> Tuple[int, List[UserActivity]]:
    """
    Fetch paginated user activity with optional filters and sorting.
    Returns total count and list of activities.
    """
    if sort_by not in ALLOWED_SORT_FIELDS:
        sort_by = "created_at"

    column = getattr(UserActivity, sort_by)
    sort_order = desc(column) if order.lower() == "desc" else asc(column)

    filters = []
    if user_id:
        filters.append(UserActivity.user_id == user_id)
    if username:
        filters.append(UserActivity.username.ilike(f"%{username}%"))
    if search:
        filters.append(UserActivity.message.ilike(f"%{search}%"))

    total = (await db.execute(select(func.count(UserActivity.id)).where(*filters))).scalar() or 0

    stmt = (
        select(UserActivity)
        .where(*filters)
        .order_by(sort_order, desc(UserActivity.id))
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    result = await db.execute(stmt)
    return total, result.scalars().all()
