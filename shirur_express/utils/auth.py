#shirur_express/utils/auth
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from typing import Optional
import asyncpg

from ..database import get_db
from ..config import settings
from ..errors import AuthError, AuthorizationError
from ..models.auth import RequestContext, UserRole
from ..queries import provider_queries, user_queries

# Constants
ACCESS_TOKEN_EXPIRE_MINUTES = settings.access_token_expire_minutes

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token", auto_error=False)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

async def authenticate_user(username: str, password: str, conn: asyncpg.Connection) -> Optional[dict]:
    user = await user_queries.get_user_by_username(conn, username.lower())
    if not user:
        # keep timing similar for unknown usernames
        pwd_context.dummy_verify()
        return None
    if not verify_password(password, user["password_hash"]):
        return None
    return user


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    conn: asyncpg.Connection = Depends(get_db)
) -> RequestContext:
    """Resolve the bearer token into the caller's request context"""
    if not token:
        raise AuthError("Not authenticated")
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm]
        )
        user_id: str = payload.get("sub")
        if user_id is None:
            raise AuthError("Could not validate credentials")
    except JWTError:
        raise AuthError("Could not validate credentials")

    user = await user_queries.get_user_by_id(conn, user_id)
    if user is None:
        raise AuthError("Could not validate credentials")

    context = RequestContext(
        user_id=user["user_id"],
        role=user["role"],
        username=user["username"],
        phone=user.get("phone")
    )
    if context.role == UserRole.PROVIDER:
        provider = await provider_queries.get_provider_by_user_id(conn, context.user_id)
        if provider:
            context.provider_id = provider["provider_id"]
            context.provider_category = provider["category_slug"]
    return context


def require_customer(ctx: RequestContext = Depends(get_current_user)) -> RequestContext:
    if ctx.role != UserRole.CUSTOMER:
        raise AuthorizationError("Only customers can do this")
    return ctx


def require_provider(ctx: RequestContext = Depends(get_current_user)) -> RequestContext:
    """Provider role with a created profile"""
    if ctx.role != UserRole.PROVIDER:
        raise AuthorizationError("You are not a service provider")
    if ctx.provider_id is None:
        raise AuthorizationError("Create your provider profile first")
    return ctx


__all__ = [
    "oauth2_scheme",
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "authenticate_user",
    "get_current_user",
    "require_customer",
    "require_provider",
    "ACCESS_TOKEN_EXPIRE_MINUTES"
]
