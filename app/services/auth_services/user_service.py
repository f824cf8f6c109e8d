# app/services/auth_services/user_service.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.security import hash_password
from app.models.user_models import User, USER_ROLES
from app.schemas.user_schemas import UserCreate, UserUpdate
from app.utils.activity_helpers import log_user_activity


def _validate_role(role: str) -> str:
    role = role.lower()
    if role not in USER_ROLES:
        raise ValidationError(f"Role must be one of {', '.join(USER_ROLES)}")
    return role


# ---------------------------
# CREATE USER
# ---------------------------
async def create_user(db: AsyncSession, user_data: UserCreate, current_user) -> User:
    """
    Create a staff or customer account and log the activity in a single transaction.
    """
    existing = await db.execute(select(User).where(User.username == user_data.username))
    if existing.scalars().first():
        raise ConflictError("Username already exists")

    new_user = User(
        username=user_data.username,
        full_name=user_data.full_name,
        email=user_data.email,
        phone=user_data.phone,
        password_hash=hash_password(user_data.password),
        role=_validate_role(user_data.role),
    )
    db.add(new_user)
    await db.flush()  # ensures new_user.id is available

    await log_user_activity(
        db,
        user_id=current_user.id,
        username=current_user.username,
        message=(
            f"{current_user.role.capitalize()} created {new_user.role} "
            f"with username {new_user.username} and user id {new_user.id}"
        ),
    )

    await db.commit()
    await db.refresh(new_user)
    return new_user


# ---------------------------
# LIST ALL USERS
# ---------------------------
async def list_users(db: AsyncSession, role: str = None):
    query = select(User).order_by(User.id)
    if role:
        query = query.where(User.role == role.lower())
    result = await db.execute(query)
    return result.scalars().all()


# ---------------------------
# GET USER BY ID
# ---------------------------
async def get_user_by_id(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


# ---------------------------
# UPDATE USER
# ---------------------------
async def update_user(db: AsyncSession, user_id: int, user_data: UserUpdate, current_user) -> User:
    """
    Update a user and log a descriptive message.
    """
    target_user = await get_user_by_id(db, user_id)
    changes = []

    for key, value in user_data.model_dump(exclude_unset=True).items():
        if key == "role" and value is not None:
            value = _validate_role(value)
        if getattr(target_user, key) != value:
            changes.append(f"{key} to {value}")
            setattr(target_user, key, value)

    if changes:
        await log_user_activity(
            db,
            user_id=current_user.id,
            username=current_user.username,
            message=f"{current_user.role.capitalize()} updated {target_user.role} "
                    f"with username {target_user.username}: {', '.join(changes)}",
        )

    await db.commit()
    await db.refresh(target_user)
    return target_user


async def update_profile(db: AsyncSession, user: User, user_data: UserUpdate) -> User:
    """Customers edit their own contact details; role and status stay as they are."""
    for key, value in user_data.model_dump(exclude_unset=True, exclude={"role", "is_active"}).items():
        setattr(user, key, value)
    await db.commit()
    await db.refresh(user)
    return user


# ---------------------------
# DELETE USER
# ---------------------------
async def delete_user(db: AsyncSession, user_id: int, current_user) -> User:
    """
    Soft-delete (deactivate) a user and log a descriptive message.
    """
    target_user = await get_user_by_id(db, user_id)
    if target_user.id == current_user.id:
        raise ValidationError("You cannot deactivate your own account")

    target_user.is_active = False
    target_user.token_version += 1

    await log_user_activity(
        db,
        user_id=current_user.id,
        username=current_user.username,
        message=f"{current_user.role.capitalize()} deactivated {target_user.role} "
                f"with username {target_user.username}",
    )

    await db.commit()
    await db.refresh(target_user)
    return target_user
