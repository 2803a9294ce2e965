"""User upsert / lookup keyed on the identity provider's subject."""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from studio_core.db.models import UserRow
from studio_core.models.user import User

logger = logging.getLogger(__name__)


def _row_to_user(row: UserRow) -> User:
    return User(
        id=row.id,
        email=row.email,
        first_name=row.first_name,
        last_name=row.last_name,
        profile_image_url=row.profile_image_url,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def claims_to_fields(claims: dict[str, Any]) -> dict[str, Any]:
    """Map standard OIDC claims onto user columns."""
    return {
        "email": claims.get("email"),
        "first_name": claims.get("given_name") or claims.get("first_name"),
        "last_name": claims.get("family_name") or claims.get("last_name"),
        "profile_image_url": claims.get("picture") or claims.get("profile_image_url"),
    }


async def upsert_user(
    session_factory: async_sessionmaker[AsyncSession],
    claims: dict[str, Any],
) -> User:
    user_id = str(claims["sub"])
    fields = claims_to_fields(claims)

    async with session_factory() as session:
        row = await session.get(UserRow, user_id)
        if row is None:
            row = UserRow(id=user_id, **fields)
            session.add(row)
            logger.info("Created user %s", user_id)
        else:
            for key, value in fields.items():
                setattr(row, key, value)
        await session.commit()
        await session.refresh(row)
        return _row_to_user(row)


async def get_user(
    session_factory: async_sessionmaker[AsyncSession],
    user_id: str,
) -> User | None:
    async with session_factory() as session:
        row = await session.get(UserRow, user_id)
        return _row_to_user(row) if row else None
