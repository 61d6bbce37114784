from abc import ABC, abstractmethod
from typing import Optional

from invite_service.domain.entities import User


class IUserRepository(ABC):
    """Account repository interface, used only by the account store"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get account by email address (case-insensitive)"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Insert a new account; raises IntegrityError on a duplicate email"""
        pass

    @abstractmethod
    async def record_login(self, user: User) -> User:
        """Stamp last_login_at on a successful sign-in"""
        pass
