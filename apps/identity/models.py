from sqlmodel import SQLModel, Field, Relationship
from typing import Optional
from datetime import datetime, timezone

class Tenant(SQLModel, table=True):
    """A shop; every catalog and inventory row belongs to exactly one tenant."""
    __tablename__ = "tenants"
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True, index=True, max_length=255)
    currency: str = Field(default="USD", max_length=3)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class User(SQLModel, table=True):
    __tablename__ = "users"
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True, max_length=255)
    email: Optional[str] = Field(default=None, max_length=320)
    hashed_password: str
    tenant_id: Optional[int] = Field(default=None, foreign_key="tenants.id", index=True, nullable=False)
    role: str = Field(default="member", max_length=50)  # admin, member
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Lets a new user be staged together with a new tenant; FK filled in on commit
    tenant: Optional[Tenant] = Relationship()
