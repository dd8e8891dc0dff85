from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth import get_current_user
from app.config import settings
from app.dependencies import get_now
from app.schemas import CurrentUser
from app.schemas.streak import StreakOverviewResponse
from app.crud.streak import get_streak_overview
from app.services.day_boundary import to_date_key
from app.utils.exceptions import SadhanaError
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/streaks", tags=["streaks"])


@router.get("/me", response_model=StreakOverviewResponse)
async def get_my_streaks(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Get the sadhana streak and every book and shloka challenge streak."""
    try:
        today = to_date_key(now, settings.DAY_BOUNDARY_TZ)
        return get_streak_overview(db, current_user.id, today)
    except SadhanaError:
        raise
    except Exception as e:
        logger.exception(f"Failed to get streaks for user {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to get streak information")
