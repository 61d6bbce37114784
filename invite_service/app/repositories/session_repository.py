from abc import ABC, abstractmethod

from invite_service.domain.entities import Session


class ISessionRepository(ABC):
    """Refresh-token session storage, used only by the account store"""

    @abstractmethod
    async def create(self, session_obj: Session) -> Session:
        """Persist a session whose refresh token is already hashed"""
        pass
