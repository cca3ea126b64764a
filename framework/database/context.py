"""
Entity context: one AsyncSession plus the changes staged against it.

Repositories never write to the session directly; they stage changes here and
the unit of work applies them in one transaction on commit. Entities handed
out by reads are detached, so in-place edits are persisted only through a
staged update.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Type
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from framework.exceptions.persistence import ConcurrencyConflict, NotFound, UnitOfWorkStateError
from framework.logging.logger import get_logger

logger = get_logger("entity_context")

VERSION_FIELD = "version"


class ChangeKind(str, Enum):
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class StagedChange:
    kind: ChangeKind
    model: Type[SQLModel]
    entity: Optional[SQLModel] = None
    entity_id: Any = None
    original_version: Optional[int] = None


def is_versioned(model: Type[SQLModel]) -> bool:
    """True if the model carries an optimistic-concurrency version column."""
    return VERSION_FIELD in getattr(model, "model_fields", {})


class EntityContext:
    """Owns the session of one unit of work and the ordered list of staged changes."""

    def __init__(self, session: AsyncSession, enforce_versions: bool = True):
        self.session = session
        self.enforce_versions = enforce_versions
        self._staged: List[StagedChange] = []
        self._sealed = False
        self._closed = False
        # Staged changes reach the database only through save_changes()
        self.session.sync_session.autoflush = False

    @property
    def pending(self) -> List[StagedChange]:
        return list(self._staged)

    async def exec(self, statement):
        if self._closed:
            raise UnitOfWorkStateError("Cannot query: entity context is closed")
        return await self.session.exec(statement)

    def detach(self, entities: Iterable[SQLModel]) -> None:
        """Expunge read results so only staged operations can write them back."""
        for entity in entities:
            if entity in self.session:
                self.session.expunge(entity)

    def stage_add(self, entity: SQLModel) -> None:
        self._check_staging()
        self._staged.append(StagedChange(ChangeKind.ADD, type(entity), entity=entity))

    def stage_update(self, entity: SQLModel) -> None:
        self._check_staging()
        self._staged.append(
            StagedChange(ChangeKind.UPDATE, type(entity), entity=entity, entity_id=entity.id)
        )

    def stage_delete(self, model: Type[SQLModel], entity_id: Any) -> None:
        self._check_staging()
        self._staged.append(StagedChange(ChangeKind.DELETE, model, entity_id=entity_id))

    def _check_staging(self) -> None:
        if self._closed or self._sealed:
            raise UnitOfWorkStateError("Cannot stage changes: transaction already finished")

    async def save_changes(self) -> int:
        """Apply staged changes in order and commit; returns the number applied."""
        staged, self._staged = self._staged, []
        try:
            for change in staged:
                if change.kind is ChangeKind.ADD:
                    await self._apply_add(change)
                elif change.kind is ChangeKind.UPDATE:
                    await self._apply_update(change)
                else:
                    await self._apply_delete(change)
            await self.session.commit()
        except BaseException:
            self._restore_versions(staged)
            raise
        self._sealed = True
        return len(staged)

    async def discard(self) -> None:
        """Drop staged changes and roll back the open transaction."""
        self._staged.clear()
        self._sealed = True
        await self.session.rollback()

    async def close(self) -> None:
        self._staged.clear()
        self._sealed = True
        self._closed = True
        await self.session.close()

    async def _apply_add(self, change: StagedChange) -> None:
        entity = change.entity
        if is_versioned(change.model) and getattr(entity, VERSION_FIELD) is None:
            setattr(entity, VERSION_FIELD, 1)
        self.session.add(entity)

    async def _apply_update(self, change: StagedChange) -> None:
        model, entity = change.model, change.entity
        if change.entity_id is None:
            raise NotFound(model, None)
        # Earlier staged adds and deletes must be visible to the existence check
        await self.session.flush()

        versioned = is_versioned(model)
        column = getattr(model, VERSION_FIELD) if versioned else model.id
        statement = select(column).where(model.id == change.entity_id)
        if versioned:
            statement = statement.with_for_update()
        result = await self.session.exec(statement)
        stored = result.first()
        if stored is None:
            raise NotFound(model, change.entity_id)

        if versioned:
            current = getattr(entity, VERSION_FIELD)
            if self.enforce_versions and current != stored:
                logger.warning(
                    f"Version conflict on {model.__name__} {change.entity_id}: "
                    f"entity version {current}, stored {stored}"
                )
                raise ConcurrencyConflict(model, change.entity_id, current, stored)
            change.original_version = current
            setattr(entity, VERSION_FIELD, stored + 1)

        await self.session.merge(entity)

    async def _apply_delete(self, change: StagedChange) -> None:
        model = change.model
        await self.session.flush()
        result = await self.session.exec(select(model).where(model.id == change.entity_id))
        entity = result.first()
        if entity is None:
            raise NotFound(model, change.entity_id)
        await self.session.delete(entity)

    @staticmethod
    def _restore_versions(staged: List[StagedChange]) -> None:
        """Undo version bumps on caller entities after a failed commit."""
        for change in reversed(staged):
            if change.original_version is not None:
                setattr(change.entity, VERSION_FIELD, change.original_version)
                change.original_version = None
