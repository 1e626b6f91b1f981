"""
Auth API routes — register, login, current user.

Route prefix: /api/v1/auth
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import db_session, get_current_user_id
from auth.jwt import create_token
from auth.password import MAX_PASSWORD_BYTES, dummy_password_hash, hash_password, verify_password
from config.settings import config
from core.exceptions import Conflict, StorageError, Unauthenticated
from database.helpers import create_user, get_user_by_email, get_user_by_id
from utils.schemas import AuthResponse, UserOut
from utils.validators import normalize_email, password_strength, strength_label

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


# ── Request schemas ────────────────────────────────────────────────────


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)
    email: str = Field(..., min_length=5, max_length=255)
    password: str = Field(..., min_length=8, max_length=128)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @field_validator("password")
    @classmethod
    def _strong_enough(cls, value: str) -> str:
        if len(value.encode()) > MAX_PASSWORD_BYTES:
            raise ValueError(f"too long (at most {MAX_PASSWORD_BYTES} bytes)")
        score = password_strength(value)
        if score < config.min_password_strength:
            raise ValueError(f"too weak ({strength_label(score)}), please choose a stronger password")
        return value


class LoginRequest(BaseModel):
    email: str
    password: str


def _auth_payload(user) -> Dict[str, Any]:
    return {
        "token": create_token(str(user.user_id)),
        "user": UserOut.model_validate(user),
    }


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    req: RegisterRequest,
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """Register a new user."""
    email = normalize_email(req.email)
    if await get_user_by_email(session, email) is not None:
        raise Conflict("Email already registered")

    password_hash = await asyncio.to_thread(hash_password, req.password)
    try:
        user = await create_user(session, req.name, email, password_hash)
        await session.commit()
    except IntegrityError as exc:
        # lost a race with a concurrent registration for the same email
        await session.rollback()
        raise Conflict("Email already registered") from exc
    except SQLAlchemyError as exc:
        logger.exception("Could not store new user %s", email)
        await session.rollback()
        raise StorageError() from exc

    logger.info("Registered user %s (%s)", user.name, user.user_id)
    return _auth_payload(user)


@router.post("/login", response_model=AuthResponse)
async def login(
    req: LoginRequest,
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """Login with email + password."""
    user = await get_user_by_email(session, req.email.strip().lower())

    # unknown emails still pay for a bcrypt check so timing does not reveal accounts
    stored_hash = user.password_hash if user is not None else await asyncio.to_thread(dummy_password_hash)
    valid = await asyncio.to_thread(verify_password, req.password, stored_hash)

    if user is None or not valid:
        logger.info("Failed login for %s", req.email)
        raise Unauthenticated("Invalid email or password")

    logger.info("Login: %s (%s)", user.name, user.user_id)
    return _auth_payload(user)


@router.get("/me", response_model=UserOut)
async def me(
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(db_session),
):
    """Return the account behind the bearer token."""
    user = await get_user_by_id(session, user_id)
    if user is None:
        raise Unauthenticated("Account no longer exists")
    return user
