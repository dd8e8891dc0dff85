from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth import get_current_user
from app import schemas, crud
from app.middleware.rate_limit import limiter, get_rate_limit_for_endpoint
from app.utils.exceptions import SadhanaError
from app.utils.logger import get_logger

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={404: {"description": "Not found"}}
)

logger = get_logger(__name__)


@router.post("", response_model=schemas.UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(get_rate_limit_for_endpoint("user_write"))
async def register_user(
    body: schemas.UserCreate,
    request: Request,
    db: Session = Depends(get_db),
):
    """Register a practitioner issued by the identity provider."""
    try:
        return crud.create_user(db, body.id, body.email, name=body.name, timezone=body.timezone)
    except (HTTPException, SadhanaError):
        raise
    except Exception as e:
        logger.exception(f"Failed to register user {body.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to register user")


@router.get("/me", response_model=schemas.UserResponse)
async def read_me(
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get the current user's profile, goals and sadhana streak counters."""
    return crud.get_user(db, current_user.id)


@router.patch("/me/goals", response_model=schemas.UserResponse)
@limiter.limit(get_rate_limit_for_endpoint("user_write"))
async def update_my_goals(
    body: schemas.GoalsUpdate,
    request: Request,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update daily goals. Calendars reclassify past days against the new goals."""
    update_data = body.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No goals provided")
    try:
        user = crud.update_goals(db, current_user.id, update_data)
        logger.info(f"Updated goals for user {current_user.id}: {update_data}")
        return user
    except (HTTPException, SadhanaError):
        raise
    except Exception as e:
        logger.exception(f"Failed to update goals for user {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update goals")
