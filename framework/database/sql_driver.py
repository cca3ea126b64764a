from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from .base import BaseDatabaseDriver


def _timeout_args(url: str, timeout: int) -> dict:
    """Driver-specific connect args carrying the command timeout."""
    backend = make_url(url).get_backend_name()
    if backend == "mysql":
        return {"connect_timeout": timeout}
    if backend == "sqlite":
        return {"timeout": timeout}
    if backend == "postgresql":
        return {"command_timeout": timeout}
    return {}


class SQLDriver(BaseDatabaseDriver):
    def __init__(self, url: str, command_timeout: int = 60, echo: bool = False):
        self.url = url
        self.engine = create_async_engine(
            url, echo=echo, future=True, connect_args=_timeout_args(url, command_timeout)
        )
        # autoflush off: units of work write only on explicit commit
        self.session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

    async def connect(self):
        """Check the database is reachable (engine manages pooled connections)."""
        async with self.engine.begin() as conn:
            await conn.execute(text("SELECT 1"))

    async def disconnect(self):
        """Dispose the engine and its pool."""
        await self.engine.dispose()

    async def get_session(self):
        async with self.session_factory() as session:
            yield session
