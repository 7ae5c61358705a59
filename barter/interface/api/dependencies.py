"""Request dependencies shared by the API routes."""

from uuid import UUID

from fastapi import Header, HTTPException, status


def get_actor_id(x_user_id: str | None = Header(default=None)) -> str:
    """Resolve the acting user from the ``X-User-Id`` header.

    Authentication happens at the gateway, which forwards the caller's
    user ID in this header.

    Raises:
        HTTPException: If the header is missing or not a UUID
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id header required",
        )
    try:
        return str(UUID(x_user_id))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-User-Id must be a UUID",
        )
