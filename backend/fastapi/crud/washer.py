"""
Washer CRUD operations.

Washers are always looked up within the caller's branch; a washer of
another branch behaves as if it did not exist.
"""

import logging
from uuid import UUID
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session

from backend.fastapi.core.exceptions import ConflictError
from backend.fastapi.models.wash_job import LineItem, wash_job_washers
from backend.fastapi.models.washer import Washer
from backend.fastapi.schemas.washer import WasherCreate, WasherUpdate

logger = logging.getLogger(__name__)


def create_washer(db: Session, branch_id: UUID, washer_data: WasherCreate) -> Washer:
    """
    Create a washer in a branch.

    Raises:
        ConflictError: If the branch already has a washer with this name
    """
    if get_washer_by_name(db, branch_id, washer_data.name):
        raise ConflictError(f"Washer '{washer_data.name}' already exists in this branch")

    db_washer = Washer(
        name=washer_data.name,
        phone=washer_data.phone,
        branch_id=branch_id
    )

    db.add(db_washer)
    db.commit()
    db.refresh(db_washer)

    logger.info("Created washer %s in branch %s", db_washer.name, branch_id)
    return db_washer


def get_washer(db: Session, branch_id: UUID, washer_id: UUID) -> Optional[Washer]:
    """Get a washer by ID, only if it belongs to the branch."""
    return db.query(Washer).filter(
        Washer.id == washer_id,
        Washer.branch_id == branch_id
    ).first()


def get_washer_by_name(db: Session, branch_id: UUID, name: str) -> Optional[Washer]:
    return db.query(Washer).filter(
        Washer.name == name,
        Washer.branch_id == branch_id
    ).first()


def get_active_washers_by_names(db: Session, branch_id: UUID, names: Iterable[str]) -> List[Washer]:
    """
    Load active washers of a branch by name.

    Args:
        db: Database session
        branch_id: Branch to search in
        names: Washer names

    Returns:
        Matching washers (names that do not match are simply absent)
    """
    names = list(set(names))
    if not names:
        return []
    return db.query(Washer).filter(
        Washer.branch_id == branch_id,
        Washer.name.in_(names),
        Washer.is_active.is_(True)
    ).all()


def get_washers(db: Session, branch_id: UUID, is_active: Optional[bool] = None) -> List[Washer]:
    """
    Get the washers of a branch ordered by name.

    Args:
        db: Database session
        branch_id: Branch to list
        is_active: Optional filter on the active flag

    Returns:
        List of washers
    """
    query = db.query(Washer).filter(Washer.branch_id == branch_id)
    if is_active is not None:
        query = query.filter(Washer.is_active.is_(is_active))
    return query.order_by(Washer.name.asc()).all()


def get_washer_stats(db: Session, washer: Washer) -> dict:
    """Lifetime line item and job counts for a washer."""
    line_items_count = db.query(LineItem).filter(LineItem.washer_id == washer.id).count()
    wash_jobs_count = (
        db.query(wash_job_washers)
        .filter(wash_job_washers.c.washer_id == washer.id)
        .count()
    )
    return {
        "line_items_count": line_items_count,
        "wash_jobs_count": wash_jobs_count
    }


def update_washer(db: Session, branch_id: UUID, washer_id: UUID,
                  washer_update: WasherUpdate) -> Optional[Washer]:
    """
    Update a washer of the branch.

    Returns:
        Updated washer, None if not found in the branch

    Raises:
        ConflictError: If the new name is taken in the branch
    """
    db_washer = get_washer(db, branch_id, washer_id)
    if not db_washer:
        return None

    update_data = washer_update.model_dump(exclude_unset=True)
    new_name = update_data.get("name")
    if new_name and new_name != db_washer.name and get_washer_by_name(db, branch_id, new_name):
        raise ConflictError(f"Washer '{new_name}' already exists in this branch")

    for field, value in update_data.items():
        setattr(db_washer, field, value)

    db.commit()
    db.refresh(db_washer)

    return db_washer


def deactivate_washer(db: Session, branch_id: UUID, washer_id: UUID) -> bool:
    """
    Soft delete a washer.

    Past line items keep crediting the washer; inactive washers can no
    longer be named on new jobs.

    Returns:
        True if deactivated, False if not found in the branch
    """
    db_washer = get_washer(db, branch_id, washer_id)
    if not db_washer:
        return False

    db_washer.is_active = False
    db.commit()

    logger.info("Deactivated washer %s in branch %s", db_washer.name, branch_id)
    return True
