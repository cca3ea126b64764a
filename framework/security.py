from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import jwt, JWTError
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel
from framework.config import settings

ALGORITHM = "HS256"

# 1. Password hashing (BCrypt)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# 2. OAuth2 scheme; token URL shown in the API docs
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_AUTH_PREFIX}/login", auto_error=False)

# --- Core models ---

class CurrentUser(BaseModel):
    """Current logged-in user context"""
    id: int
    username: str
    tenant_id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

# --- Helpers ---

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT token signed with SECRET_KEY (no issuer/audience claims)."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)

def decode_access_token(token: str) -> Optional[CurrentUser]:
    """Validate signature and expiry; None if the token is invalid or incomplete."""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[ALGORITHM],
            options={"verify_aud": False, "verify_iss": False},
        )
    except JWTError:
        return None

    username = payload.get("sub")
    tenant_id = payload.get("tenant_id")
    user_id = payload.get("user_id")
    if username is None or tenant_id is None or user_id is None:
        return None

    return CurrentUser(
        id=user_id,
        username=username,
        tenant_id=tenant_id,
        role=payload.get("role") or "member",
    )

# --- FastAPI dependencies ---

def get_token_from_request(
    request: Request,
    token_from_header: Optional[str] = Depends(oauth2_scheme)
) -> Optional[str]:
    """
    Get token from request: prefer cookie, then Authorization header.
    """
    token = request.cookies.get(settings.ACCESS_TOKEN_COOKIE_NAME)

    if not token and token_from_header:
        token = token_from_header

    return token

def get_current_user(
    token: Optional[str] = Depends(get_token_from_request)
) -> CurrentUser:
    """
    Dependency: validate token and extract user. Use in router as user: CurrentUser = Depends(get_current_user).
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    user = decode_access_token(token)
    if user is None:
        raise credentials_exception
    return user

def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Dependency: current user must be a tenant admin."""
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
    return user
