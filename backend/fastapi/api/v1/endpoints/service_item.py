"""
Service item API endpoints.

The catalogue is shared by all branches; any authenticated user can
read it and maintain it.
"""

import logging
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from backend.fastapi.crud.service_item import (
    create_service_item, get_service_item, get_service_items,
    get_service_item_stats, update_service_item, deactivate_service_item
)
from backend.fastapi.dependencies.database import get_sync_db
from backend.fastapi.models.user import User
from backend.fastapi.schemas.service_item import (
    ServiceItemCreate, ServiceItemUpdate, ServiceItemRead,
    ServiceItemWithStats, ServiceItemListResponse
)
from backend.security.dependencies import RequireUser

logger = logging.getLogger(__name__)

router = APIRouter(tags=["service-items"])


@router.post("/", response_model=ServiceItemRead, status_code=status.HTTP_201_CREATED,
             summary="Create Service Item")
async def create_new_service_item(
    item_data: ServiceItemCreate,
    db: Session = Depends(get_sync_db),
    current_user: User = RequireUser
):
    """
    Create a service item. A price of 0 means the price is entered per job.

    **Errors:**
    - **409**: An item with this name exists
    - **422**: Validation errors (e.g. negative price)
    """
    try:
        item = create_service_item(db, item_data)
        return ServiceItemRead.model_validate(item)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to create service item: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create service item"
        )


@router.get("/", response_model=ServiceItemListResponse, summary="List Service Items")
async def list_service_items(
    is_active: Optional[bool] = Query(None, description="Filter by active flag"),
    db: Session = Depends(get_sync_db),
    current_user: User = RequireUser
):
    items = get_service_items(db, is_active=is_active)
    return ServiceItemListResponse(
        service_items=[ServiceItemRead.model_validate(item) for item in items],
        total=len(items)
    )


@router.get("/{item_id}", response_model=ServiceItemWithStats, summary="Get Service Item")
async def get_service_item_by_id(
    item_id: UUID,
    db: Session = Depends(get_sync_db),
    current_user: User = RequireUser
):
    """
    Get a service item with its line item count.

    **Errors:**
    - **404**: Service item not found
    """
    item = get_service_item(db, item_id)
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Service item not found"
        )
    data = ServiceItemRead.model_validate(item).model_dump()
    data.update(get_service_item_stats(db, item))
    return ServiceItemWithStats(**data)


@router.put("/{item_id}", response_model=ServiceItemRead, summary="Update Service Item")
async def update_existing_service_item(
    item_id: UUID,
    item_update: ServiceItemUpdate,
    db: Session = Depends(get_sync_db),
    current_user: User = RequireUser
):
    """
    Update a service item. Recorded jobs keep their prices.

    **Errors:**
    - **404**: Service item not found
    - **409**: New name already exists
    """
    try:
        item = update_service_item(db, item_id, item_update)
        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Service item not found"
            )
        return ServiceItemRead.model_validate(item)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to update service item: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update service item"
        )


@router.delete("/{item_id}", summary="Deactivate Service Item")
async def deactivate_existing_service_item(
    item_id: UUID,
    db: Session = Depends(get_sync_db),
    current_user: User = RequireUser
):
    if not deactivate_service_item(db, item_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Service item not found"
        )
    return {"message": "Service item deactivated successfully"}
