"""
Service item CRUD operations.

Service items are a single global catalogue shared by every branch.
"""

import logging
from uuid import UUID
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session

from backend.fastapi.core.exceptions import ConflictError
from backend.fastapi.models.service_item import ServiceItem
from backend.fastapi.models.wash_job import LineItem
from backend.fastapi.schemas.service_item import ServiceItemCreate, ServiceItemUpdate

logger = logging.getLogger(__name__)


def create_service_item(db: Session, item_data: ServiceItemCreate) -> ServiceItem:
    """
    Create a service item.

    Raises:
        ConflictError: If an item with this name exists
    """
    if get_service_item_by_name(db, item_data.name):
        raise ConflictError(f"Service item '{item_data.name}' already exists")

    db_item = ServiceItem(
        name=item_data.name,
        description=item_data.description,
        price=item_data.price
    )

    db.add(db_item)
    db.commit()
    db.refresh(db_item)

    logger.info("Created service item %s (price %s)", db_item.name, db_item.price)
    return db_item


def get_service_item(db: Session, item_id: UUID) -> Optional[ServiceItem]:
    return db.query(ServiceItem).filter(ServiceItem.id == item_id).first()


def get_service_item_by_name(db: Session, name: str) -> Optional[ServiceItem]:
    return db.query(ServiceItem).filter(ServiceItem.name == name).first()


def get_active_service_items_by_names(db: Session, names: Iterable[str]) -> List[ServiceItem]:
    """Load active service items by name; unknown names are absent from the result."""
    names = list(set(names))
    if not names:
        return []
    return db.query(ServiceItem).filter(
        ServiceItem.name.in_(names),
        ServiceItem.is_active.is_(True)
    ).all()


def get_service_items(db: Session, is_active: Optional[bool] = None) -> List[ServiceItem]:
    """Get service items ordered by name, optionally filtered on the active flag."""
    query = db.query(ServiceItem)
    if is_active is not None:
        query = query.filter(ServiceItem.is_active.is_(is_active))
    return query.order_by(ServiceItem.name.asc()).all()


def get_service_item_stats(db: Session, item: ServiceItem) -> dict:
    return {
        "line_items_count": db.query(LineItem).filter(LineItem.service_item_id == item.id).count()
    }


def update_service_item(db: Session, item_id: UUID,
                        item_update: ServiceItemUpdate) -> Optional[ServiceItem]:
    """
    Update a service item.

    Price changes only affect jobs recorded afterwards; line items keep
    the price they were recorded with.

    Returns:
        Updated item, None if not found

    Raises:
        ConflictError: If the new name is taken
    """
    db_item = get_service_item(db, item_id)
    if not db_item:
        return None

    update_data = item_update.model_dump(exclude_unset=True)
    new_name = update_data.get("name")
    if new_name and new_name != db_item.name and get_service_item_by_name(db, new_name):
        raise ConflictError(f"Service item '{new_name}' already exists")

    for field, value in update_data.items():
        setattr(db_item, field, value)

    db.commit()
    db.refresh(db_item)

    return db_item


def deactivate_service_item(db: Session, item_id: UUID) -> bool:
    """Soft delete a service item. Returns False if not found."""
    db_item = get_service_item(db, item_id)
    if not db_item:
        return False

    db_item.is_active = False
    db.commit()

    logger.info("Deactivated service item %s", db_item.name)
    return True
