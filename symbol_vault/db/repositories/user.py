"""Repository for user accounts."""

from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from symbol_vault.exceptions import Conflict, StorageFailure
from symbol_vault.models import User
from symbol_vault.structlog_config import get_logger

logger = get_logger(__name__)


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_username(self, username: str) -> Optional[User]:
        """Get a user by username.

        Raises:
            StorageFailure: If the lookup fails
        """
        try:
            return self.db.query(User).filter(User.username == username).first()
        except SQLAlchemyError as e:
            logger.error(
                "User lookup failed",
                operation="db_query",
                table="users",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise StorageFailure("the operation could not be completed") from e

    def create(self, username: str, hashed_password: str) -> User:
        """Create a new user.

        Raises:
            Conflict: If the username is already taken
        """
        user = User(username=username, hashed_password=hashed_password)
        try:
            self.db.add(user)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(
                "Username already taken",
                operation="db_create",
                table="users",
                username=username,
                status="exists",
            )
            raise Conflict(f"username {username!r} is already taken")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "User creation failed",
                operation="db_create",
                table="users",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise StorageFailure("the operation could not be completed") from e

        self.db.refresh(user)
        logger.info(
            "User created successfully",
            operation="db_create",
            table="users",
            user_id=user.id,
            status="created",
        )
        return user
