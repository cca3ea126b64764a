"""
Request-scoped dependencies: one session and one UnitOfWork per request.
"""
from typing import AsyncIterator
from fastapi import Depends
from sqlmodel.ext.asyncio.session import AsyncSession
from framework.config import settings
from framework.database.manager import DatabaseManager
from framework.repository.unit_of_work import UnitOfWork
from apps.registry import repository_registry


async def get_db() -> AsyncIterator[AsyncSession]:
    """Get database session."""
    manager = DatabaseManager.get_instance()
    async for session in manager.db.get_session():
        yield session


async def get_uow(db: AsyncSession = Depends(get_db)) -> AsyncIterator[UnitOfWork]:
    """Dependency: UnitOfWork for this request, disposed when the request ends."""
    async with UnitOfWork(
        session=db,
        registry=repository_registry,
        enforce_versions=settings.ENFORCE_VERSION_TOKENS,
    ) as uow:
        yield uow
