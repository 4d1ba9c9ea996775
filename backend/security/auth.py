"""
JWT authentication utilities for the FastAPI application.

This module provides functions for creating, validating, and decoding JWT tokens
for user authentication and authorization.
"""

from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from fastapi import HTTPException, status

from backend.fastapi.core.init_settings import global_settings


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Dictionary containing token payload data (sub, email, etc.)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token as string

    Example:
        >>> token = create_access_token({"sub": "user_id"})
        >>> len(token) > 100
        True
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(
            minutes=global_settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({
        "exp": expire,
        "iat": datetime.utcnow()
    })

    return jwt.encode(
        to_encode,
        global_settings.JWT_SECRET_KEY,
        algorithm=global_settings.JWT_ALGORITHM
    )


def verify_access_token(token: str) -> Dict[str, Any]:
    """
    Verify and decode a JWT access token.

    Args:
        token: JWT token string to verify

    Returns:
        Dictionary containing decoded token payload

    Raises:
        HTTPException: If token is invalid, expired, or malformed
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(
            token,
            global_settings.JWT_SECRET_KEY,
            algorithms=[global_settings.JWT_ALGORITHM]
        )

        if payload.get("sub") is None:
            raise credentials_exception

        return payload

    except JWTError:
        raise credentials_exception


def create_user_token(user_id: str, email: str, branch_id: str, role: str,
                      expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT token for a branch user.

    Args:
        user_id: User ID (UUID as string)
        email: User email
        branch_id: User's branch ID (UUID as string)
        role: 'admin' or 'super_admin'
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token

    Example:
        >>> token = create_user_token("123e4567-e89b-12d3-a456-426614174000",
        ...                           "manager@example.com",
        ...                           "223e4567-e89b-12d3-a456-426614174000", "admin")
        >>> verify_access_token(token)["branch_id"]
        '223e4567-e89b-12d3-a456-426614174000'
    """
    token_data = {
        "sub": user_id,
        "email": email,
        "branch_id": branch_id,
        "role": role
    }

    return create_access_token(token_data, expires_delta)
