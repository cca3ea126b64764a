"""
Repository pattern: data access abstraction, decouples service layer from database session.
"""

from .base import BaseRepository, IRepository, Page
from .registry import RepositoryRegistry
from .unit_of_work import UnitOfWork, UnitOfWorkState

__all__ = [
    "BaseRepository",
    "IRepository",
    "Page",
    "RepositoryRegistry",
    "UnitOfWork",
    "UnitOfWorkState",
]
