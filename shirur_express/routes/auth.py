# shirur_express/routes/auth.py
from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from datetime import timedelta
from typing import Annotated
import logging
import asyncpg

from ..utils.auth import (
    authenticate_user,
    create_access_token,
    get_current_user,
    get_password_hash,
    ACCESS_TOKEN_EXPIRE_MINUTES
)
from ..database import get_db
from ..errors import AuthError, ValidationError
from ..models.auth import RequestContext, SignupRequest, Token, UserOut, UserRole
from ..queries import user_queries

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["Authentication"])

@auth_router.post("/signup", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def signup(
    payload: SignupRequest,
    conn: asyncpg.Connection = Depends(get_db)
):
    if payload.role == UserRole.ADMIN:
        raise ValidationError("Admin accounts cannot be created through signup")

    username = payload.username.lower()
    if await user_queries.get_user_by_username(conn, username):
        raise ValidationError("Username already taken")
    if await user_queries.get_user_by_email(conn, payload.email):
        raise ValidationError("Email already registered")

    user = await user_queries.create_user(
        conn,
        username=username,
        email=payload.email,
        password_hash=get_password_hash(payload.password),
        role=payload.role.value,
        phone=payload.phone
    )
    logger.info(f"New {payload.role.value} account {user['user_id']}")
    return user

@auth_router.post("/token", response_model=Token)
async def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    conn: asyncpg.Connection = Depends(get_db)
):
    user = await authenticate_user(form_data.username, form_data.password, conn)
    if not user:
        raise AuthError("Incorrect username or password")

    access_token = create_access_token(
        data={"sub": str(user["user_id"]), "role": user["role"]},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "role": user["role"]
    }

@auth_router.get("/me", response_model=UserOut)
async def read_me(
    ctx: RequestContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    return await user_queries.get_user_by_id(conn, ctx.user_id)

__all__ = ["auth_router"]
