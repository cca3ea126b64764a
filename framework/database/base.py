from abc import ABC, abstractmethod
from typing import AsyncIterator
from sqlmodel.ext.asyncio.session import AsyncSession

class BaseDatabaseDriver(ABC):
    """Store connection owned by the process; hands out one session per request."""

    @abstractmethod
    async def connect(self):
        pass

    @abstractmethod
    async def disconnect(self):
        pass

    @abstractmethod
    def get_session(self) -> AsyncIterator[AsyncSession]:
        pass
