from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import User


class UserRepository:

    @staticmethod
    async def create(db: AsyncSession, user: User) -> User:
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: int) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalars().first()

    @staticmethod
    async def find_by_login(
        db: AsyncSession,
        username: Optional[str] = None,
        email: Optional[str] = None,
        role: Optional[str] = None,
    ) -> Optional[User]:
        """First user matching the username OR the email, optionally of one role."""
        matches = []
        if username:
            matches.append(User.username == username)
        if email:
            matches.append(User.email == email)
        if not matches:
            return None
        query = select(User).where(or_(*matches))
        if role:
            query = query.where(User.role == role)
        result = await db.execute(query)
        return result.scalars().first()
