"""Test config and shared fixtures."""
import pytest
from typing import AsyncGenerator, Callable
from decimal import Decimal
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from main import app
from apps.dependencies import get_db
from apps.models import Tenant, User, Category, Product
from apps.registry import repository_registry
from framework.repository.unit_of_work import UnitOfWork
from framework.security import CurrentUser, create_access_token, get_current_user, get_password_hash


@pytest.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """File-backed SQLite per test, so separate sessions see each other only after commit."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def async_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Plain session for seeding and inspecting the store outside any unit of work."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_uow(session_factory) -> Callable[..., UnitOfWork]:
    """Factory for independent units of work over the test database."""
    def _make(enforce_versions: bool = True) -> UnitOfWork:
        return UnitOfWork(
            session=session_factory(),
            registry=repository_registry,
            enforce_versions=enforce_versions,
        )
    return _make


@pytest.fixture
async def sample_tenant(async_session: AsyncSession) -> Tenant:
    """Create sample tenant."""
    tenant = Tenant(id=1, name="test_tenant")
    async_session.add(tenant)
    await async_session.commit()
    await async_session.refresh(tenant)
    return tenant


@pytest.fixture
async def sample_user(async_session: AsyncSession, sample_tenant: Tenant) -> User:
    """Create sample admin user."""
    user = User(
        id=1,
        username="test_user",
        hashed_password=get_password_hash("secret123"),
        tenant_id=sample_tenant.id,
        role="admin"
    )
    async_session.add(user)
    await async_session.commit()
    await async_session.refresh(user)
    return user


@pytest.fixture
async def sample_category(async_session: AsyncSession, sample_tenant: Tenant) -> Category:
    category = Category(id=1, tenant_id=sample_tenant.id, name="GPUs")
    async_session.add(category)
    await async_session.commit()
    await async_session.refresh(category)
    return category


@pytest.fixture
async def sample_product(async_session: AsyncSession, sample_tenant: Tenant, sample_category: Category) -> Product:
    product = Product(
        id=1,
        tenant_id=sample_tenant.id,
        category_id=sample_category.id,
        sku="GPU-4090",
        name="RTX 4090",
        price=Decimal("1599.00"),
        stock=5,
    )
    async_session.add(product)
    await async_session.commit()
    await async_session.refresh(product)
    return product


@pytest.fixture
def test_user(sample_user: User) -> CurrentUser:
    return CurrentUser(
        id=sample_user.id,
        username=sample_user.username,
        tenant_id=sample_user.tenant_id,
        role=sample_user.role
    )


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Test client on the test database; requests are unauthenticated unless a token is sent."""
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def admin_client(client: AsyncClient, test_user: CurrentUser) -> AsyncClient:
    """Client acting as the sample tenant's admin."""
    app.dependency_overrides[get_current_user] = lambda: test_user
    return client


@pytest.fixture
def bearer_for() -> Callable[[CurrentUser], dict]:
    """Authorization header carrying a real signed token for the given user."""
    def _headers(user: CurrentUser) -> dict:
        token = create_access_token(
            {"sub": user.username, "user_id": user.id, "tenant_id": user.tenant_id, "role": user.role}
        )
        return {"Authorization": f"Bearer {token}"}
    return _headers
