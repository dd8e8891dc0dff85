from fastapi import Depends, HTTPException, status, Header
from typing import Optional
from sqlalchemy.orm import Session
from app.database import get_db
from app.models import UserRole
from app import crud, schemas

async def get_current_user(
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
    db: Session = Depends(get_db)
) -> schemas.CurrentUser:
    """
    Resolve the calling user from the X-User-ID header.

    Identities are issued upstream (gateway / identity provider); this service
    only checks that the user exists.

    Raises:
        HTTPException: If the header is missing or names an unknown user
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-ID header is required",
        )

    db_user = crud.get_user(db, x_user_id)
    if not db_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid X-User-ID",
        )

    return schemas.CurrentUser(
        id=db_user.id,
        email=db_user.email,
        name=db_user.name,
        role=db_user.role,
        timezone=db_user.timezone,
    )

async def require_admin(current_user: schemas.CurrentUser = Depends(get_current_user)) -> schemas.CurrentUser:
    """Only admins may pass."""
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user
