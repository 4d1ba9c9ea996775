"""
User CRUD operations.

This module provides database operations for branch users including
registration, lookup, credential checks and password changes.
"""

import logging
from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session, joinedload

from backend.fastapi.core.exceptions import ConflictError, NotFoundError, ValidationError
from backend.fastapi.models.branch import Branch
from backend.fastapi.models.user import User, UserRole
from backend.fastapi.schemas.user import UserCreate
from backend.security.password import hash_password, verify_password

logger = logging.getLogger(__name__)


class UserCRUD:
    """CRUD operations for User model."""

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db

    def create_user(self, user_data: UserCreate) -> User:
        """
        Register a new user in an active branch.

        The email is stored lower-case.

        Args:
            user_data: User creation data with email, password, branch, role

        Returns:
            Created User instance with its branch loaded

        Raises:
            ConflictError: If the email is already registered
            NotFoundError: If the branch does not exist
            ValidationError: If the branch is inactive
        """
        email = user_data.email.lower()
        if self.get_user_by_email(email):
            raise ConflictError("User with this email already exists")

        branch = self.db.query(Branch).filter(Branch.id == user_data.branch_id).first()
        if branch is None:
            raise NotFoundError("Branch not found")
        if not branch.is_active:
            raise ValidationError("Branch is inactive")

        db_user = User(
            email=email,
            name=user_data.name,
            password_hash=hash_password(user_data.password),
            role=user_data.role.value,
            branch_id=branch.id
        )

        self.db.add(db_user)
        self.db.commit()
        self.db.refresh(db_user)

        logger.info("Registered %s user %s in branch %s", db_user.role, email, branch.name)
        return db_user

    def get_user(self, user_id: UUID) -> Optional[User]:
        """
        Get user by ID with the branch loaded.

        Args:
            user_id: User UUID

        Returns:
            User instance or None if not found
        """
        return (
            self.db.query(User)
            .options(joinedload(User.branch))
            .filter(User.id == user_id)
            .first()
        )

    def get_user_by_email(self, email: str) -> Optional[User]:
        return (
            self.db.query(User)
            .options(joinedload(User.branch))
            .filter(User.email == email.strip().lower())
            .first()
        )

    def authenticate(self, email: str, password: str) -> Optional[User]:
        """
        Check a user's credentials.

        Returns:
            The user when the email exists and the password matches,
            None otherwise. Active flags are checked by the caller.
        """
        user = self.get_user_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            return None
        return user

    def change_password(self, user: User, current_password: str, new_password: str) -> User:
        """
        Replace a user's password after verifying the current one.

        Raises:
            ValidationError: If the current password does not match
        """
        if not verify_password(current_password, user.password_hash):
            raise ValidationError("Current password is incorrect")

        user.password_hash = hash_password(new_password)
        self.db.commit()
        self.db.refresh(user)

        logger.info("Password changed for %s", user.email)
        return user


def bootstrap_super_admin(db: Session, email: str, password: str,
                          branch_name: str, branch_code: str,
                          name: str = "Super Admin") -> Optional[User]:
    """
    Create the first branch and super admin when there are no users yet.

    Args:
        db: Database session
        email: Super admin email
        password: Super admin password
        branch_name: Name of the branch to create (or reuse by code)
        branch_code: Code of that branch
        name: Display name of the super admin

    Returns:
        The created super admin, or None when users already exist
    """
    if db.query(User).count() > 0:
        return None

    branch = db.query(Branch).filter(Branch.code == branch_code.upper()).first()
    if branch is None:
        branch = Branch(name=branch_name, code=branch_code.upper())
        db.add(branch)
        db.commit()
        db.refresh(branch)
        logger.info("Created initial branch %s", branch.name)

    return UserCRUD(db).create_user(UserCreate(
        email=email,
        name=name,
        password=password,
        branch_id=branch.id,
        role=UserRole.SUPER_ADMIN
    ))


# Convenience functions
def create_user(db: Session, user_data: UserCreate) -> User:
    """Register a new user."""
    return UserCRUD(db).create_user(user_data)


def get_user(db: Session, user_id: UUID) -> Optional[User]:
    """Get user by ID."""
    return UserCRUD(db).get_user(user_id)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get user by email."""
    return UserCRUD(db).get_user_by_email(email)


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Check credentials."""
    return UserCRUD(db).authenticate(email, password)


def change_password(db: Session, user: User, current_password: str, new_password: str) -> User:
    """Change a user's password."""
    return UserCRUD(db).change_password(user, current_password, new_password)
