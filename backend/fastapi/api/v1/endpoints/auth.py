"""
Authentication API endpoints.

Login, registration (super admin only), the current user's profile,
password changes and the public branch list used by login forms.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.fastapi.core.init_settings import global_settings
from backend.fastapi.crud.branch import get_active_branches
from backend.fastapi.crud.user import authenticate_user, change_password, create_user
from backend.fastapi.dependencies.database import get_sync_db
from backend.fastapi.models.user import User
from backend.fastapi.schemas.branch import BranchRead, BranchListResponse
from backend.fastapi.schemas.user import (
    UserCreate, UserLogin, PasswordChange, UserRead, UserTokenResponse
)
from backend.security.auth import create_user_token
from backend.security.dependencies import RequireUser, RequireSuperAdmin

logger = logging.getLogger(__name__)

router = APIRouter(tags=["authentication"])


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED,
             summary="Register User")
async def register_user(
    user_data: UserCreate,
    db: Session = Depends(get_sync_db),
    current_user: User = RequireSuperAdmin
):
    """
    Register a user in an active branch.

    **Permissions:** Requires super admin authentication

    **Errors:**
    - **400**: Branch is inactive
    - **401**: Not authenticated
    - **403**: Not a super admin
    - **404**: Branch not found
    - **409**: Email already registered
    - **422**: Validation errors
    """
    try:
        user = create_user(db, user_data)
        return UserRead.model_validate(user)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to register user: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to register user"
        )


@router.post("/login", response_model=UserTokenResponse, summary="User Login")
async def login(
    credentials: UserLogin,
    db: Session = Depends(get_sync_db)
):
    """
    Authenticate with email and password and get a JWT access token.

    **Errors:**
    - **401**: Invalid credentials, deactivated account or inactive branch
    """
    user = authenticate_user(db, credentials.email, credentials.password)
    if user is None:
        logger.info("Failed login for %s", credentials.email.lower())
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account is deactivated"
        )

    if not user.branch.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Branch is inactive"
        )

    token = create_user_token(str(user.id), user.email, str(user.branch_id), user.role)
    logger.info("User %s logged in (branch %s)", user.email, user.branch.code)

    return UserTokenResponse(
        access_token=token,
        token_type="bearer",
        expires_in=global_settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserRead.model_validate(user)
    )


@router.get("/me", response_model=UserRead, summary="Current User")
async def read_current_user(current_user: User = RequireUser):
    """Get the authenticated user's profile with their branch."""
    return UserRead.model_validate(current_user)


@router.post("/logout", summary="Logout")
async def logout(current_user: User = RequireUser):
    """
    Logout acknowledgement.

    Tokens are stateless; the client discards its token.
    """
    return {"message": "Logged out successfully"}


@router.put("/change-password", summary="Change Password")
async def update_password(
    password_data: PasswordChange,
    db: Session = Depends(get_sync_db),
    current_user: User = RequireUser
):
    """
    Change the authenticated user's password.

    **Errors:**
    - **400**: Current password is incorrect
    - **401**: Not authenticated
    """
    change_password(db, current_user, password_data.current_password, password_data.new_password)
    return {"message": "Password changed successfully"}


@router.get("/branches", response_model=BranchListResponse, summary="Active Branches")
async def list_active_branches(db: Session = Depends(get_sync_db)):
    """Public list of active branches, ordered by name."""
    branches = [BranchRead.model_validate(branch) for branch in get_active_branches(db)]
    return BranchListResponse(branches=branches, total=len(branches))
