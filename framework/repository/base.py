"""
Repository abstract base class and generic implementation.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar
from pydantic import BaseModel, Field
from sqlmodel import SQLModel, func, select
from framework.database.context import EntityContext
from framework.exceptions.persistence import NotFound

T = TypeVar("T", bound=SQLModel)


class Page(BaseModel):
    """Pagination window for list queries."""
    limit: int = Field(default=100, ge=1, le=1000)
    offset: int = Field(default=0, ge=0)


class IRepository(ABC, Generic[T]):
    """Repository interface; defines standard data access API."""

    @abstractmethod
    async def get_by_id(self, id: int) -> Optional[T]:
        """Get entity by ID, None if missing."""
        pass

    @abstractmethod
    async def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        page: Optional[Page] = None,
        order_by: str = "id",
        descending: bool = False,
    ) -> List[T]:
        """List entities matching filters, ordered and paginated."""
        pass

    @abstractmethod
    def create(self, entity: T) -> T:
        """Stage entity for insertion."""
        pass

    @abstractmethod
    def update(self, entity: T) -> T:
        """Stage entity modification."""
        pass

    @abstractmethod
    def delete(self, id: int) -> None:
        """Stage entity deletion."""
        pass


class BaseRepository(IRepository[T]):
    """Generic repository over one SQLModel type; subclasses can add custom queries.

    Reads return detached entities. Writes are staged on the entity context
    and only reach the database when the owning unit of work commits.
    """

    def __init__(self, context: EntityContext, model: Type[T]):
        """Initialize repository with entity context and model."""
        self.context = context
        self.model = model

    def __repr__(self) -> str:
        return f"{type(self).__name__}[{self.model.__name__}]"

    @property
    def session(self):
        return self.context.session

    async def get_by_id(self, id: int) -> Optional[T]:
        """Get entity by ID."""
        statement = select(self.model).where(self.model.id == id)
        result = await self.context.exec(statement)
        return self._detached(result.first())

    async def get_or_raise(self, id: int) -> T:
        """Get entity by ID or raise NotFound."""
        entity = await self.get_by_id(id)
        if entity is None:
            raise NotFound(self.model, id)
        return entity

    async def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        page: Optional[Page] = None,
        order_by: str = "id",
        descending: bool = False,
    ) -> List[T]:
        """List entities (paginated) whose columns equal the given filter values."""
        page = page or Page()
        column = self._column(order_by)
        statement = self._filtered(select(self.model), filters or {})
        statement = statement.order_by(column.desc() if descending else column.asc())
        statement = statement.limit(page.limit).offset(page.offset)
        result = await self.context.exec(statement)
        return self._detached_all(result.all())

    async def get_all(self, limit: int = 100, offset: int = 0) -> List[T]:
        """Get all entities (paginated)."""
        return await self.list(page=Page(limit=limit, offset=offset))

    def create(self, entity: T) -> T:
        """Stage entity for insertion; visible after commit."""
        self._check_type(entity)
        self.context.stage_add(entity)
        return entity

    add = create

    def update(self, entity: T) -> T:
        """Stage entity modification; version is checked on commit."""
        self._check_type(entity)
        self.context.stage_update(entity)
        return entity

    def delete(self, id: int) -> None:
        """Stage deletion by ID; NotFound on commit if the row is gone."""
        self.context.stage_delete(self.model, id)

    remove = delete

    async def find_one(self, **filters) -> Optional[T]:
        """Find one entity by filters (e.g. username='admin')."""
        statement = self._filtered(select(self.model), filters)
        result = await self.context.exec(statement)
        return self._detached(result.first())

    async def find_all(self, **filters) -> List[T]:
        """Find entities by filters."""
        statement = self._filtered(select(self.model), filters)
        result = await self.context.exec(statement)
        return self._detached_all(result.all())

    async def count(self, **filters) -> int:
        """Count entities matching filters."""
        statement = self._filtered(select(func.count(self.model.id)), filters)
        result = await self.context.exec(statement)
        return result.one()

    def _column(self, name: str):
        if name not in self.model.model_fields:
            raise ValueError(f"{self.model.__name__} has no column '{name}'")
        return getattr(self.model, name)

    def _filtered(self, statement, filters: Dict[str, Any]):
        for key, value in filters.items():
            statement = statement.where(self._column(key) == value)
        return statement

    def _check_type(self, entity: Any) -> None:
        if not isinstance(entity, self.model):
            raise TypeError(f"{self!r} cannot stage {type(entity).__name__}")

    def _detached(self, entity: Optional[T]) -> Optional[T]:
        if entity is not None:
            self.context.detach([entity])
        return entity

    def _detached_all(self, entities) -> List[T]:
        entities = list(entities)
        self.context.detach(entities)
        return entities
