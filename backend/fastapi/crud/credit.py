"""
Credit resolution for submitted line items.

Turns the names an operator typed into the washer and service item each
line is recorded against, and the price it is recorded at. Engine,
radiator and condenser work is always credited to the branch's
designated washer, whoever was named on the line.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional, Sequence
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.orm import Session

from backend.fastapi.core.exceptions import PolicyViolationError, UnresolvedReferenceError
from backend.fastapi.core.init_settings import global_settings
from backend.fastapi.core.payment_split import is_special_item
from backend.fastapi.crud.service_item import get_active_service_items_by_names
from backend.fastapi.crud.washer import get_active_washers_by_names
from backend.fastapi.models.service_item import ServiceItem
from backend.fastapi.models.washer import Washer
from backend.fastapi.schemas.wash_job import LineItemRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedLine:
    """A submitted line with its credited washer and effective price."""

    washer: Washer
    service_item: ServiceItem
    price: Decimal
    requested_washer_name: str

    @property
    def is_reassigned(self) -> bool:
        return self.washer.name != self.requested_washer_name


def get_designated_washer(db: Session, branch_id: UUID) -> Optional[Washer]:
    """
    Find the branch's designated washer for special items.

    The washer is matched by the ``DESIGNATED_WASHER_NAME`` setting,
    case-insensitively, among the branch's active washers.

    Args:
        db: Database session
        branch_id: Branch to search in

    Returns:
        The designated washer, or None when the branch has none active
    """
    name = global_settings.DESIGNATED_WASHER_NAME
    return (
        db.query(Washer)
        .filter(
            Washer.branch_id == branch_id,
            Washer.is_active.is_(True),
            func.lower(Washer.name) == name.lower()
        )
        .order_by(Washer.created_at.asc())
        .first()
    )


def _unique(names: Sequence[str]) -> List[str]:
    """Distinct names in submission order."""
    return list(dict.fromkeys(names))


def resolve_credits(db: Session, branch_id: UUID,
                    items: Sequence[LineItemRequest]) -> List[ResolvedLine]:
    """
    Resolve every submitted line of a job, or reject the whole submission.

    Checks run in this order, and the first failing check rejects the job:

    1. every service item name matches an active service item;
    2. every variable-priced item (list price 0) carries a positive
       custom price;
    3. a special item requires an active designated washer in the branch;
    4. every washer named on a non-special line is active in the branch.

    Args:
        db: Database session
        branch_id: Branch of the submitting user
        items: Submitted lines

    Returns:
        One ResolvedLine per submitted line, in submission order

    Raises:
        UnresolvedReferenceError: Unknown service items or washers
        PolicyViolationError: Missing custom price or designated washer
    """
    item_names = _unique([line.service_item_name for line in items])
    service_items: Dict[str, ServiceItem] = {
        item.name: item for item in get_active_service_items_by_names(db, item_names)
    }

    missing_items = [name for name in item_names if name not in service_items]
    if missing_items:
        raise UnresolvedReferenceError(
            f"Service items not found or inactive: {', '.join(missing_items)}",
            names=missing_items
        )

    unpriced = _unique([
        line.service_item_name for line in items
        if service_items[line.service_item_name].has_variable_price
        and (line.custom_price is None or line.custom_price <= 0)
    ])
    if unpriced:
        logger.info("Rejected job without custom price for %s", unpriced)
        raise PolicyViolationError(
            f"Custom price required for variable pricing items: {', '.join(unpriced)}",
            names=unpriced
        )

    designated = None
    if any(is_special_item(line.service_item_name) for line in items):
        designated = get_designated_washer(db, branch_id)
        if designated is None:
            name = global_settings.DESIGNATED_WASHER_NAME
            logger.info("Rejected special item in branch %s: no active %s", branch_id, name)
            raise PolicyViolationError(
                f'Special items (Engine, Radiator, Condenser) require washer "{name}" '
                f"to be active in your branch",
                names=[name]
            )

    washer_names = _unique([
        line.washer_name for line in items
        if not is_special_item(line.service_item_name)
    ])
    washers: Dict[str, Washer] = {
        washer.name: washer for washer in get_active_washers_by_names(db, branch_id, washer_names)
    }

    missing_washers = [name for name in washer_names if name not in washers]
    if missing_washers:
        raise UnresolvedReferenceError(
            f"Washers not found, inactive, or not in your branch: {', '.join(missing_washers)}",
            names=missing_washers
        )

    resolved = []
    for line in items:
        service_item = service_items[line.service_item_name]
        price = line.custom_price if service_item.has_variable_price else service_item.price
        washer = designated if is_special_item(service_item.name) else washers[line.washer_name]
        resolved.append(ResolvedLine(
            washer=washer,
            service_item=service_item,
            price=Decimal(price),
            requested_washer_name=line.washer_name
        ))

    return resolved
