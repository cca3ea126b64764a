from fastapi import APIRouter, Depends, Response
from framework.repository.unit_of_work import UnitOfWork
from framework.response import ResponseModel
from framework.security import CurrentUser, create_access_token, get_current_user, require_admin
from framework.config import settings
from apps.dependencies import get_uow
from ..models import User
from ..service import IdentityService
from pydantic import BaseModel, Field
from datetime import timedelta
from typing import Optional

router = APIRouter()

class RegisterSchema(BaseModel):
    username: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6)
    tenant_name: str = Field(min_length=1, max_length=255)
    email: Optional[str] = None

class LoginSchema(BaseModel):
    username: str
    password: str

class MemberSchema(BaseModel):
    username: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6)
    role: str = Field(default="member", pattern="^(admin|member)$")

def get_identity_service(uow: UnitOfWork = Depends(get_uow)) -> IdentityService:
    """Dependency: create IdentityService."""
    return IdentityService(uow)

def user_out(user: User) -> dict:
    return {"id": user.id, "username": user.username, "tenant_id": user.tenant_id, "role": user.role}

@router.post("/register")
async def register(
    data: RegisterSchema,
    service: IdentityService = Depends(get_identity_service)
):
    """Register new tenant and its admin."""
    user = await service.register_tenant_admin(
        data.username, data.password, data.tenant_name, email=data.email
    )
    return ResponseModel.success(data={"username": user.username, "tenant_id": user.tenant_id})

@router.post("/login")
async def login(
    data: LoginSchema,
    response: Response,
    service: IdentityService = Depends(get_identity_service)
):
    """Login: return JWT and set cookie."""
    user = await service.authenticate_user(data.username, data.password)
    expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={
            "sub": user.username,
            "user_id": user.id,
            "tenant_id": user.tenant_id,
            "role": user.role
        },
        expires_delta=expires_delta
    )

    response.set_cookie(
        key=settings.ACCESS_TOKEN_COOKIE_NAME,
        value=access_token,
        max_age=int(expires_delta.total_seconds()),
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE
    )

    return ResponseModel.success(
        data={
            "access_token": access_token,
            "token_type": "bearer",
            "user": user_out(user)
        }
    )

@router.post("/logout")
async def logout(response: Response):
    """Logout: clear token cookie."""
    response.delete_cookie(
        key=settings.ACCESS_TOKEN_COOKIE_NAME,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE
    )
    return ResponseModel.success(data={"message": "Logged out successfully"})

@router.get("/me")
async def me(current_user: CurrentUser = Depends(get_current_user)):
    """Current user from the token."""
    return ResponseModel.success(data=current_user.model_dump())

@router.post("/members")
async def add_member(
    data: MemberSchema,
    admin: CurrentUser = Depends(require_admin),
    service: IdentityService = Depends(get_identity_service)
):
    """Add a user to the admin's tenant."""
    user = await service.add_member(admin.tenant_id, data.username, data.password, role=data.role)
    return ResponseModel.success(data=user_out(user))
