"""
Authentication routes for Symbol Vault.

This module provides API endpoints for:
- Sign-up (username + password)
- Sign-in (returns a JWT access token)
"""

from fastapi import APIRouter, Depends, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from symbol_vault import auth_utils
from symbol_vault.db.repositories.user import UserRepository
from symbol_vault.dependencies import get_user_repository
from symbol_vault.schemas import Credentials, SignInResponse, UserProfile
from symbol_vault.structlog_config import get_logger

logger = get_logger(__name__)

router = APIRouter()

# Initialize rate limiter
limiter = Limiter(key_func=get_remote_address)


@router.post(
    "/sign-up",
    response_model=UserProfile,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit("10/minute")
def sign_up(
    request: Request,
    credentials: Credentials,
    repo: UserRepository = Depends(get_user_repository),
) -> UserProfile:
    """Create an account. Usernames are unique."""
    profile = auth_utils.sign_up(credentials, repo)
    logger.info("User signed up", operation="sign_up", user_id=profile.user_id)
    return profile


@router.post("/sign-in", response_model=SignInResponse)
@limiter.limit("10/minute")
def sign_in(
    request: Request,
    credentials: Credentials,
    repo: UserRepository = Depends(get_user_repository),
) -> SignInResponse:
    """Exchange a username and password for an access token."""
    return auth_utils.sign_in(credentials, repo)
