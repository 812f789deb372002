"""User Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.user import User


class UserRepository(ABC):
    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        """
        Retrieve user by ID

        Args:
            user_id: User ID

        Returns:
            User if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_corporate(self) -> List[User]:
        """
        Retrieve all corporate accounts

        Returns:
            Corporate users
        """
        pass
