from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from invite_service.domain.entities import Role


class IRoleRepository(ABC):
    """Role repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, role_id: UUID) -> Optional[Role]:
        """Get role definition by ID"""
        pass
