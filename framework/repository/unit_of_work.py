"""
Unit of Work: manages repositories and transaction boundaries.
"""

import asyncio
from enum import Enum
from typing import Dict, Optional, Type, TypeVar
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from framework.database.context import EntityContext
from framework.exceptions.persistence import (
    ConcurrencyConflict,
    NotFound,
    PersistenceError,
    UnitOfWorkStateError,
)
from framework.logging.logger import get_logger
from .base import BaseRepository
from .registry import RepositoryRegistry

logger = get_logger("unit_of_work")

M = TypeVar("M", bound=SQLModel)


class UnitOfWorkState(str, Enum):
    OPEN = "open"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    DISPOSED = "disposed"


class UnitOfWork:
    """Related repositories over one shared session, committed or rolled back together.

    One instance serves one request. Staged changes are written only by an
    explicit commit(); leaving ``async with`` disposes and rolls back anything
    left uncommitted.
    """

    def __init__(
        self,
        session: Optional[AsyncSession] = None,
        registry: Optional[RepositoryRegistry] = None,
        enforce_versions: bool = True,
    ):
        """Initialize UnitOfWork; session must be provided."""
        if session is None:
            raise ValueError("Session must be provided. Use UnitOfWork.from_session() or pass session explicitly.")

        self.context = EntityContext(session, enforce_versions=enforce_versions)
        self.registry = registry or RepositoryRegistry()
        self.state = UnitOfWorkState.OPEN
        self._repositories: Dict[Type[SQLModel], BaseRepository] = {}

    @classmethod
    async def from_session(cls, session: AsyncSession, **kwargs) -> "UnitOfWork":
        """Create UnitOfWork from an existing session."""
        return cls(session=session, **kwargs)

    def __repr__(self) -> str:
        return f"UnitOfWork[{self.state.value}, repositories={len(self._repositories)}]"

    @property
    def session(self) -> AsyncSession:
        return self.context.session

    def repository(self, model: Type[M]) -> BaseRepository[M]:
        """Get or create the repository for a model (one per model per unit of work)."""
        self._ensure_not_disposed("repository")
        repo = self._repositories.get(model)
        if repo is None:
            repo_class = self.registry.resolve(model)
            repo = repo_class(self.context, model)
            self._repositories[model] = repo
        return repo

    async def commit(self) -> None:
        """Apply all staged changes atomically.

        NotFound and ConcurrencyConflict propagate as-is; store failures are
        raised as PersistenceError. Either way the transaction is rolled back.
        """
        self._ensure_open("commit")
        try:
            applied = await self.context.save_changes()
        except (NotFound, ConcurrencyConflict):
            await self._abort_after_failure()
            raise
        except SQLAlchemyError as e:
            logger.error(f"Commit failed, rolled back: {e}")
            await self._abort_after_failure()
            raise PersistenceError(f"Commit failed: {e}", cause=e) from e
        except asyncio.CancelledError:
            logger.warning("Commit cancelled, rolling back")
            await self._abort_after_failure()
            raise
        self.state = UnitOfWorkState.COMMITTED
        logger.debug(f"Committed {applied} staged change(s)")

    async def rollback(self) -> None:
        """Rollback all staged changes."""
        self._ensure_open("rollback")
        await self._abort()

    async def dispose(self) -> None:
        """Release the session; uncommitted changes are rolled back. Safe to call twice."""
        if self.state is UnitOfWorkState.DISPOSED:
            return
        try:
            if self.state is UnitOfWorkState.OPEN:
                if self.context.pending:
                    logger.debug(f"Disposing with {len(self.context.pending)} uncommitted change(s)")
                await self._abort()
        finally:
            self.state = UnitOfWorkState.DISPOSED
            self._repositories.clear()
            await self.context.close()

    async def _abort(self) -> None:
        self.state = UnitOfWorkState.ROLLED_BACK
        await self.context.discard()

    async def _abort_after_failure(self) -> None:
        # Rollback errors are logged; the commit error propagates
        try:
            await self._abort()
        except SQLAlchemyError as e:
            logger.error(f"Rollback after failed commit also failed: {e}")

    def _ensure_open(self, operation: str) -> None:
        if self.state is not UnitOfWorkState.OPEN:
            raise UnitOfWorkStateError(f"Cannot {operation}: unit of work is {self.state.value}")

    def _ensure_not_disposed(self, operation: str) -> None:
        if self.state is UnitOfWorkState.DISPOSED:
            raise UnitOfWorkStateError(f"Cannot {operation}: unit of work is disposed")

    async def __aenter__(self):
        self._ensure_not_disposed("enter")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.dispose()
