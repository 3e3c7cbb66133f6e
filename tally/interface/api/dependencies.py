"""Shared route dependencies."""

from fastapi import Header, HTTPException, status


async def optional_user_id(x_user_id: str | None = Header(default=None)) -> str | None:
    """User ID set by the upstream authentication layer, if any."""
    return x_user_id or None


async def require_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """User ID set by the upstream authentication layer.

    Raises:
        HTTPException: 401 if the request is not authenticated
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return x_user_id
