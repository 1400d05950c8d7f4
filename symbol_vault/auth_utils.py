"""
Authentication utilities for Symbol Vault.

This module provides password hashing, JWT token creation and validation,
sign-up / sign-in, and the rule that resolves who is acting on a request:
an authenticated user, or the anonymous user when no token is given.
"""

from datetime import UTC, datetime, timedelta
from typing import Dict, Optional

import jwt
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from passlib.hash import bcrypt

from symbol_vault.config import Settings, get_settings
from symbol_vault.db.repositories.user import UserRepository
from symbol_vault.exceptions import InvalidCredentials
from symbol_vault.schemas import Credentials, SignInResponse, UserProfile
from symbol_vault.structlog_config import get_logger

logger = get_logger(__name__)

# Token is optional: missing credentials fall back to the anonymous user
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/v1/auth/sign-in", auto_error=False)


def hash_password(password: str) -> str:
    return bcrypt.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.verify(password, hashed_password)
    except ValueError:
        # Not a bcrypt hash, e.g. the anonymous user
        return False


def create_access_token(
    data: dict, expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a JWT access token with the provided data and expiration.

    Args:
        data: The data to encode in the token
        expires_delta: How long the token should be valid; defaults to
            JWT_EXPIRATION_DAYS

    Returns:
        JWT token string
    """
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(days=settings.JWT_EXPIRATION_DAYS)
    to_encode = data.copy()
    to_encode.update({"exp": datetime.now(UTC) + expires_delta})

    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Dict:
    """
    Decode and validate a JWT token.

    Raises:
        InvalidCredentials: If the token is invalid or expired
    """
    settings = get_settings()
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise InvalidCredentials("token has expired")
    except jwt.InvalidTokenError:
        raise InvalidCredentials("invalid token")


def resolve_acting_user(token: Optional[str], settings: Settings) -> int:
    """
    Decide which user a write is attributed to.

    No token means the anonymous user (ANONYMOUS_USER_ID); a valid token means
    the user it names. A token that is present but invalid is rejected rather
    than silently downgraded to anonymous.

    Raises:
        InvalidCredentials: If the token is invalid, expired, or has no user id
    """
    if not token:
        return settings.ANONYMOUS_USER_ID

    payload = decode_token(token)
    user_id = payload.get("user_id")
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise InvalidCredentials("invalid token payload")
    return user_id


def get_acting_user_id(token: Optional[str] = Depends(oauth2_scheme)) -> int:
    """FastAPI dependency wrapping `resolve_acting_user`."""
    return resolve_acting_user(token, get_settings())


def sign_up(credentials: Credentials, repo: UserRepository) -> UserProfile:
    """
    Register a new user.

    Raises:
        Conflict: If the username is already taken
    """
    user = repo.create(credentials.username, hash_password(credentials.password))
    return UserProfile(user_id=user.id, username=user.username)


def sign_in(credentials: Credentials, repo: UserRepository) -> SignInResponse:
    """
    Check a username/password pair and issue an access token.

    Raises:
        InvalidCredentials: If the user does not exist or the password is wrong
    """
    user = repo.get_by_username(credentials.username)
    if user is None or not verify_password(credentials.password, user.hashed_password):
        logger.info("Sign-in rejected", operation="sign_in", username=credentials.username)
        raise InvalidCredentials("invalid login")

    profile = UserProfile(user_id=user.id, username=user.username)
    token = create_access_token({"user_id": user.id, "username": user.username})
    return SignInResponse(token=token, user=profile)
