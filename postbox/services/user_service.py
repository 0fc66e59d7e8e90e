"""User service - handles user management and authentication"""

from typing import Optional
import logging

from postbox.core.database import RecordStore
from postbox.core.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    ResourceNotFoundError
)
from postbox.core.security import get_password_hash
from postbox.models.document import Document
from postbox.models.user import User

logger = logging.getLogger(__name__)


def _find_by_email(document: Document, email: str) -> Optional[User]:
    return next((user for user in document.users.values() if user.email == email), None)


class UserService:
    """Service for user management"""

    COLLECTION = "users"

    def __init__(self, store: RecordStore):
        self.store = store

    def create_user(self, email: str, password: str) -> User:
        """
        Create new user

        The password is hashed before the store lock is taken; the email check
        and the insert share one critical section.

        Args:
            email: Email address, must be unused
            password: Plain text password

        Returns:
            Created user

        Raises:
            DuplicateEmailError: If the email is already registered
            HashingFailedError: If the password cannot be hashed
        """
        password_digest = get_password_hash(password)

        with self.store.edit() as document:
            if _find_by_email(document, email) is not None:
                raise DuplicateEmailError(email)

            user_id = self.store.next_id(self.COLLECTION, document.users)
            user = User(id=user_id, email=email, password_digest=password_digest)
            document.users[user_id] = user

        logger.info(f"Created user: {user.email} (id: {user.id})")
        return user

    def get_user_by_email(self, email: str) -> User:
        """Get user by email"""
        user = _find_by_email(self.store.read(), email)
        if user is None:
            raise ResourceNotFoundError(f"User with email '{email}'")
        return user

    def get_user_by_id(self, user_id: int) -> User:
        """Get user by ID"""
        user = self.store.read().users.get(user_id)
        if user is None:
            raise ResourceNotFoundError(f"User {user_id}")
        return user

    def update_user(self, user: User) -> User:
        """
        Replace the stored record for ``user.id``

        The upgrade flag is owned by ``upgrade_user`` and is carried over
        from the stored record.

        Args:
            user: Full replacement record

        Returns:
            The record as stored

        Raises:
            ResourceNotFoundError: If no user has this id
            DuplicateEmailError: If another user already has the new email
        """
        with self.store.edit() as document:
            current = document.users.get(user.id)
            if current is None:
                raise ResourceNotFoundError(f"User {user.id}")

            holder = _find_by_email(document, user.email)
            if holder is not None and holder.id != user.id:
                raise DuplicateEmailError(user.email)

            updated = user.model_copy(update={"is_upgraded": current.is_upgraded})
            document.users[user.id] = updated

        logger.info(f"Updated user {user.id}")
        return updated

    def change_credentials(self, user_id: int, email: str, password: str) -> User:
        """Hash ``password`` and replace the email and digest of ``user_id``"""
        return self.update_user(
            User(id=user_id, email=email, password_digest=get_password_hash(password))
        )

    def upgrade_user(self, user_id: int) -> User:
        """
        Mark user as upgraded

        Args:
            user_id: User ID

        Returns:
            Upgraded user
        """
        with self.store.edit() as document:
            user = document.users.get(user_id)
            if user is None:
                raise ResourceNotFoundError(f"User {user_id}")
            user.is_upgraded = True

        logger.info(f"Upgraded user {user_id}")
        return user

    def authenticate_user(self, email: str, password: str) -> User:
        """
        Authenticate user by email and password

        Unknown emails and wrong passwords raise the same error.

        Raises:
            InvalidCredentialsError: If authentication fails
        """
        user = _find_by_email(self.store.read(), email)

        if user is None or not user.check_password(password):
            logger.info(f"Failed login for: {email}")
            raise InvalidCredentialsError()

        logger.info(f"User authenticated: {email}")
        return user
