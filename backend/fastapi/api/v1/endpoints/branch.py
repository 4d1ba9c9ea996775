"""
Branch management API endpoints.

This module provides FastAPI endpoints for branch management operations
including creating, reading, updating, and deactivating branches.
"""

import logging
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from backend.fastapi.dependencies.database import get_sync_db
from backend.fastapi.models.user import User
from backend.fastapi.schemas.branch import (
    BranchCreate, BranchRead, BranchUpdate, BranchWithStats, BranchListResponse
)
from backend.fastapi.crud.branch import (
    create_branch, get_branches, get_branches_count,
    update_branch, deactivate_branch, get_branch_with_stats
)
from backend.security.dependencies import RequireSuperAdmin

logger = logging.getLogger(__name__)

router = APIRouter(tags=["branch-management"])


@router.post("/", response_model=BranchRead, status_code=status.HTTP_201_CREATED,
             summary="Create New Branch")
async def create_new_branch(
    branch_data: BranchCreate,
    db: Session = Depends(get_sync_db),
    current_user: User = RequireSuperAdmin
):
    """
    Create a new branch.

    **Permissions:** Requires super admin authentication

    **Parameters:**
    - **name**: Unique branch name (2-100 characters)
    - **code**: Unique short code (stored upper-case)
    - **location**: Optional address

    **Errors:**
    - **401**: Not authenticated
    - **403**: Not a super admin
    - **409**: Branch name or code already exists
    - **422**: Validation errors
    """
    try:
        branch = create_branch(db, branch_data)
        return BranchRead.model_validate(branch)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to create branch: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create branch"
        )


@router.get("/", response_model=BranchListResponse, summary="List All Branches")
async def list_branches(
    include_inactive: bool = Query(False, description="Include deactivated branches"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum records to return"),
    db: Session = Depends(get_sync_db),
    current_user: User = RequireSuperAdmin
):
    """
    Get branches ordered by name.

    **Permissions:** Requires super admin authentication
    """
    branches = get_branches(db, include_inactive=include_inactive, skip=skip, limit=limit)
    return BranchListResponse(
        branches=[BranchRead.model_validate(branch) for branch in branches],
        total=get_branches_count(db, include_inactive=include_inactive)
    )


@router.get("/{branch_id}", response_model=BranchWithStats, summary="Get Branch by ID")
async def get_branch_by_id(
    branch_id: UUID,
    db: Session = Depends(get_sync_db),
    current_user: User = RequireSuperAdmin
):
    """
    Get a branch with user and washer counts.

    **Errors:**
    - **404**: Branch not found
    """
    branch = get_branch_with_stats(db, branch_id)
    if not branch:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Branch not found"
        )
    return BranchWithStats.model_validate(branch)


@router.put("/{branch_id}", response_model=BranchRead, summary="Update Branch")
async def update_existing_branch(
    branch_id: UUID,
    branch_update: BranchUpdate,
    db: Session = Depends(get_sync_db),
    current_user: User = RequireSuperAdmin
):
    """
    Update a branch.

    **Errors:**
    - **404**: Branch not found
    - **409**: New name or code already exists
    """
    try:
        branch = update_branch(db, branch_id, branch_update)
        if not branch:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Branch not found"
            )
        return BranchRead.model_validate(branch)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to update branch: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update branch"
        )


@router.delete("/{branch_id}", summary="Deactivate Branch")
async def deactivate_existing_branch(
    branch_id: UUID,
    db: Session = Depends(get_sync_db),
    current_user: User = RequireSuperAdmin
):
    """
    Deactivate a branch. Its users can no longer log in; records are kept.

    **Errors:**
    - **400**: Deactivating your own branch
    - **404**: Branch not found
    """
    if branch_id == current_user.branch_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot deactivate your own branch"
        )

    if not deactivate_branch(db, branch_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Branch not found"
        )
    return {"message": "Branch deactivated successfully"}
