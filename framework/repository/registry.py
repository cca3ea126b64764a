"""
Explicit model -> repository class mapping, built once at startup.
"""

from typing import Dict, Type
from sqlmodel import SQLModel
from .base import BaseRepository


class RepositoryRegistry:
    """Which repository class serves which model; unregistered models get BaseRepository."""

    def __init__(self):
        self._repositories: Dict[Type[SQLModel], Type[BaseRepository]] = {}

    def register(self, model: Type[SQLModel], repo_class: Type[BaseRepository]) -> "RepositoryRegistry":
        if not issubclass(repo_class, BaseRepository):
            raise TypeError(f"{repo_class.__name__} is not a BaseRepository")
        self._repositories[model] = repo_class
        return self

    def resolve(self, model: Type[SQLModel]) -> Type[BaseRepository]:
        return self._repositories.get(model, BaseRepository)

    def __contains__(self, model: Type[SQLModel]) -> bool:
        return model in self._repositories

    def __len__(self) -> int:
        return len(self._repositories)
