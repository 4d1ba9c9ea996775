"""
Branch CRUD operations.

This module provides Create, Read, Update and soft-delete operations
for Branch model management.
"""

import logging
from uuid import UUID
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import func

from backend.fastapi.core.exceptions import ConflictError
from backend.fastapi.models.branch import Branch
from backend.fastapi.models.user import User
from backend.fastapi.models.washer import Washer
from backend.fastapi.schemas.branch import BranchCreate, BranchUpdate

logger = logging.getLogger(__name__)


def create_branch(db: Session, branch_data: BranchCreate) -> Branch:
    """
    Create a new branch.

    Args:
        db: Database session
        branch_data: Branch creation data

    Returns:
        Created branch instance

    Raises:
        ConflictError: If the branch name or code already exists
    """
    if get_branch_by_name(db, branch_data.name):
        raise ConflictError(f"Branch with name '{branch_data.name}' already exists")

    code = branch_data.code.upper()
    if get_branch_by_code(db, code):
        raise ConflictError(f"Branch with code '{code}' already exists")

    db_branch = Branch(
        name=branch_data.name,
        code=code,
        location=branch_data.location
    )

    db.add(db_branch)
    db.commit()
    db.refresh(db_branch)

    logger.info("Created branch %s (%s)", db_branch.name, db_branch.code)
    return db_branch


def get_branch(db: Session, branch_id: UUID) -> Optional[Branch]:
    """
    Get a branch by ID (active or not).

    Args:
        db: Database session
        branch_id: Branch unique identifier

    Returns:
        Branch instance if found, None otherwise
    """
    return db.query(Branch).filter(Branch.id == branch_id).first()


def get_branch_by_name(db: Session, name: str) -> Optional[Branch]:
    return db.query(Branch).filter(Branch.name == name).first()


def get_branch_by_code(db: Session, code: str) -> Optional[Branch]:
    return db.query(Branch).filter(func.upper(Branch.code) == code.upper()).first()


def get_branches(db: Session, include_inactive: bool = False,
                 skip: int = 0, limit: int = 100) -> List[Branch]:
    """
    Get branches ordered by name.

    Args:
        db: Database session
        include_inactive: Whether to include deactivated branches
        skip: Number of records to skip
        limit: Maximum number of records to return

    Returns:
        List of branch instances
    """
    query = db.query(Branch)
    if not include_inactive:
        query = query.filter(Branch.is_active.is_(True))
    return query.order_by(Branch.name.asc()).offset(skip).limit(limit).all()


def get_active_branches(db: Session) -> List[Branch]:
    """All active branches ordered by name (no pagination)."""
    return (
        db.query(Branch)
        .filter(Branch.is_active.is_(True))
        .order_by(Branch.name.asc())
        .all()
    )


def get_branches_count(db: Session, include_inactive: bool = False) -> int:
    query = db.query(Branch)
    if not include_inactive:
        query = query.filter(Branch.is_active.is_(True))
    return query.count()


def update_branch(db: Session, branch_id: UUID, branch_update: BranchUpdate) -> Optional[Branch]:
    """
    Update an existing branch.

    Args:
        db: Database session
        branch_id: Branch unique identifier
        branch_update: Branch update data

    Returns:
        Updated branch instance if found, None otherwise

    Raises:
        ConflictError: If the new name or code belongs to another branch
    """
    db_branch = get_branch(db, branch_id)
    if not db_branch:
        return None

    update_data = branch_update.model_dump(exclude_unset=True)

    if update_data.get("name") and update_data["name"] != db_branch.name:
        if get_branch_by_name(db, update_data["name"]):
            raise ConflictError(f"Branch with name '{update_data['name']}' already exists")

    if update_data.get("code"):
        update_data["code"] = update_data["code"].upper()
        if update_data["code"] != db_branch.code and get_branch_by_code(db, update_data["code"]):
            raise ConflictError(f"Branch with code '{update_data['code']}' already exists")

    for field, value in update_data.items():
        setattr(db_branch, field, value)

    db.commit()
    db.refresh(db_branch)

    return db_branch


def deactivate_branch(db: Session, branch_id: UUID) -> bool:
    """
    Soft delete a branch by clearing its active flag.

    Users of an inactive branch can no longer log in; its jobs and
    summaries are kept.

    Returns:
        True if the branch was deactivated, False if not found
    """
    db_branch = get_branch(db, branch_id)
    if not db_branch:
        return False

    db_branch.is_active = False
    db.commit()

    logger.info("Deactivated branch %s", db_branch.name)
    return True


def get_branch_with_stats(db: Session, branch_id: UUID) -> Optional[dict]:
    """
    Get branch with user and washer counts.

    Returns:
        Dictionary with branch info and stats, None if not found
    """
    branch = get_branch(db, branch_id)
    if not branch:
        return None

    user_count = db.query(User).filter(User.branch_id == branch_id).count()
    washer_count = db.query(Washer).filter(
        Washer.branch_id == branch_id,
        Washer.is_active.is_(True)
    ).count()

    return {
        "id": branch.id,
        "name": branch.name,
        "code": branch.code,
        "location": branch.location,
        "is_active": branch.is_active,
        "user_count": user_count,
        "active_washer_count": washer_count
    }
