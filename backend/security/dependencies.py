"""
Authentication dependencies for FastAPI.

This module provides dependency functions for protecting FastAPI routes
and extracting the authenticated user together with their branch.
"""

from uuid import UUID
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session, joinedload

from backend.fastapi.dependencies.database import get_sync_db
from backend.fastapi.models.branch import Branch
from backend.fastapi.models.user import User
from backend.security.auth import verify_access_token


# HTTP Bearer token scheme
security = HTTPBearer()


async def get_current_user_token(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> dict:
    """
    Extract and validate JWT token from Authorization header.

    Raises:
        HTTPException: If token is invalid or missing
    """
    return verify_access_token(credentials.credentials)


async def get_current_user(
    token_data: dict = Depends(get_current_user_token),
    db: Session = Depends(get_sync_db)
) -> User:
    """
    Get current authenticated user with their branch loaded.

    Args:
        token_data: Decoded JWT token payload
        db: Database session

    Returns:
        Active User instance whose branch is active

    Raises:
        HTTPException: 401 if the user is unknown, or their account or
            branch is inactive

    Usage:
        @router.get("/records")
        def list_records(current_user: User = Depends(get_current_user)):
            return {"branch": current_user.branch.name}
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        user_id = UUID(str(token_data.get("sub")))
    except ValueError:
        raise credentials_exception

    user = db.query(User).options(joinedload(User.branch)).filter(User.id == user_id).first()
    if user is None:
        raise credentials_exception

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account is deactivated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if user.branch is None or not user.branch.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Branch is inactive",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


async def get_current_branch(
    current_user: User = Depends(get_current_user)
) -> Branch:
    """The caller's active branch; every record and report is scoped to it."""
    return current_user.branch


async def get_current_super_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Get current user, requiring the super_admin role.

    Raises:
        HTTPException: 403 if the user is not a super admin
    """
    if not current_user.is_super_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions. Super admin access required."
        )
    return current_user


# Convenience dependencies for different permission levels
RequireAuth = Depends(get_current_user_token)
RequireUser = Depends(get_current_user)
RequireBranch = Depends(get_current_branch)
RequireSuperAdmin = Depends(get_current_super_admin)
