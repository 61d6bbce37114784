from sqlmodel.ext.asyncio.session import AsyncSession

from invite_service.app.repositories.session_repository import ISessionRepository
from invite_service.domain.entities import Session


class SessionRepository(ISessionRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, session_obj: Session) -> Session:
        self.session.add(session_obj)
        await self.session.flush()
        return session_obj
