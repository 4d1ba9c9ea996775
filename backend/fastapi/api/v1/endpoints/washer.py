"""
Washer management API endpoints.

All operations act on the washers of the caller's branch.
"""

import logging
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from backend.fastapi.crud.washer import (
    create_washer, get_washer, get_washers, get_washer_stats,
    update_washer, deactivate_washer
)
from backend.fastapi.dependencies.database import get_sync_db
from backend.fastapi.models.branch import Branch
from backend.fastapi.schemas.washer import (
    WasherCreate, WasherUpdate, WasherRead, WasherWithStats, WasherListResponse
)
from backend.security.dependencies import RequireBranch

logger = logging.getLogger(__name__)

router = APIRouter(tags=["washer-management"])


@router.post("/", response_model=WasherRead, status_code=status.HTTP_201_CREATED,
             summary="Create Washer")
async def create_new_washer(
    washer_data: WasherCreate,
    db: Session = Depends(get_sync_db),
    branch: Branch = RequireBranch
):
    """
    Create a washer in the caller's branch.

    **Errors:**
    - **409**: A washer with this name exists in the branch
    - **422**: Validation errors
    """
    try:
        washer = create_washer(db, branch.id, washer_data)
        return WasherRead.model_validate(washer)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to create washer: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create washer"
        )


@router.get("/", response_model=WasherListResponse, summary="List Washers")
async def list_washers(
    is_active: Optional[bool] = Query(None, description="Filter by active flag"),
    db: Session = Depends(get_sync_db),
    branch: Branch = RequireBranch
):
    """Get the branch's washers ordered by name."""
    washers = get_washers(db, branch.id, is_active=is_active)
    return WasherListResponse(
        washers=[WasherRead.model_validate(washer) for washer in washers],
        total=len(washers)
    )


@router.get("/{washer_id}", response_model=WasherWithStats, summary="Get Washer")
async def get_washer_by_id(
    washer_id: UUID,
    db: Session = Depends(get_sync_db),
    branch: Branch = RequireBranch
):
    """
    Get a washer with lifetime line item and job counts.

    **Errors:**
    - **404**: Washer not found in the branch
    """
    washer = get_washer(db, branch.id, washer_id)
    if not washer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Washer not found"
        )
    data = WasherRead.model_validate(washer).model_dump()
    data.update(get_washer_stats(db, washer))
    return WasherWithStats(**data)


@router.put("/{washer_id}", response_model=WasherRead, summary="Update Washer")
async def update_existing_washer(
    washer_id: UUID,
    washer_update: WasherUpdate,
    db: Session = Depends(get_sync_db),
    branch: Branch = RequireBranch
):
    """
    Update a washer of the branch.

    **Errors:**
    - **404**: Washer not found in the branch
    - **409**: New name already used in the branch
    """
    try:
        washer = update_washer(db, branch.id, washer_id, washer_update)
        if not washer:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Washer not found"
            )
        return WasherRead.model_validate(washer)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to update washer: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update washer"
        )


@router.delete("/{washer_id}", summary="Deactivate Washer")
async def deactivate_existing_washer(
    washer_id: UUID,
    db: Session = Depends(get_sync_db),
    branch: Branch = RequireBranch
):
    """
    Deactivate a washer; past jobs keep crediting them.

    **Errors:**
    - **404**: Washer not found in the branch
    """
    if not deactivate_washer(db, branch.id, washer_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Washer not found"
        )
    return {"message": "Washer deactivated successfully"}
