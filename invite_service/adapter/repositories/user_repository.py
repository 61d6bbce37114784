from typing import Optional

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from invite_service.app.repositories.user_repository import IUserRepository
from invite_service.domain.base import utcnow
from invite_service.domain.entities import User


class UserRepository(IUserRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, user: User) -> User:
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def record_login(self, user: User) -> User:
        user.last_login_at = utcnow()
        self.session.add(user)
        await self.session.flush()
        return user
