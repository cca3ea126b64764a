from loguru import logger
from typing import Optional
from sqlalchemy.exc import IntegrityError
from framework.security import get_password_hash, verify_password
from framework.exceptions.handler import BusinessException
from framework.exceptions.persistence import PersistenceError
from framework.repository.unit_of_work import UnitOfWork
from .models import Tenant, User
from .repository import TenantRepository, UserRepository

class IdentityService:
    def __init__(self, uow: UnitOfWork):
        """Initialize Identity Service with UnitOfWork."""
        self.uow = uow

    @property
    def tenants(self) -> TenantRepository:
        return self.uow.repository(Tenant)

    @property
    def users(self) -> UserRepository:
        return self.uow.repository(User)

    async def register_tenant_admin(
        self, username: str, password: str, tenant_name: str, email: Optional[str] = None
    ) -> User:
        """Register new tenant and its admin in one commit."""
        if await self.tenants.get_by_name(tenant_name):
            raise BusinessException("Tenant/org name already registered", code=400)
        if await self.users.get_by_username(username):
            raise BusinessException("Username already exists", code=4001)

        new_tenant = self.tenants.create(Tenant(name=tenant_name))
        new_user = User(
            username=username,
            email=email,
            hashed_password=get_password_hash(password),
            role="admin",
        )
        new_user.tenant = new_tenant
        self.users.create(new_user)

        try:
            await self.uow.commit()
        except PersistenceError as e:
            # Lost a race with a concurrent registration
            if isinstance(e.cause, IntegrityError):
                logger.warning(f"Registration conflict for {username}/{tenant_name}: {e.cause}")
                raise BusinessException("Username or tenant already exists", code=4001)
            raise

        logger.info(f"Tenant {tenant_name} created with admin {username}")
        return new_user

    async def add_member(self, tenant_id: int, username: str, password: str, role: str = "member") -> User:
        """Add a user to an existing tenant."""
        if await self.users.get_by_username(username):
            raise BusinessException("Username already exists", code=4001)
        user = self.users.create(
            User(
                username=username,
                hashed_password=get_password_hash(password),
                tenant_id=tenant_id,
                role=role,
            )
        )
        await self.uow.commit()
        logger.info(f"User {username} added to tenant {tenant_id} as {role}")
        return user

    async def authenticate_user(self, username: str, password: str) -> User:
        """Authenticate user and return user info."""
        user = await self.users.get_by_username(username)
        if not user or not verify_password(password, user.hashed_password):
            raise BusinessException("Invalid username or password", code=401)
        if not await self.tenants.get_by_id(user.tenant_id):
            raise BusinessException("User tenant not found", code=500)

        logger.info(f"User {username} authenticated successfully")
        return user
