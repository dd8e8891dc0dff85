import hmac
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth import require_admin
from app.config import settings
from app.dependencies import get_now
from app.middleware.rate_limit import limiter, get_rate_limit_for_endpoint
from app.schemas import CurrentUser
from app.schemas.streak import SweepResponse
from app.services.day_boundary import today_key
from app.services.streak_sweeper import sweep
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/cron", tags=["cron"])


def verify_cron_secret(
    x_cron_secret: Optional[str] = Header(None, alias=settings.CRON_SECRET_HEADER),
) -> None:
    """
    Allow the scheduler in when it presents CRON_SECRET.

    Without a configured secret the trigger is open in DEBUG only.
    """
    if not settings.CRON_SECRET:
        if settings.DEBUG:
            return
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Streak reset trigger is not configured")
    if not x_cron_secret or not hmac.compare_digest(x_cron_secret, settings.CRON_SECRET):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid cron secret")


def _run_sweep(db: Session, reference_day: date, trigger: str) -> SweepResponse:
    logger.info(f"Streak reset triggered by {trigger} for {reference_day}")
    result = sweep(db, reference_day)
    if result.errors:
        logger.error(f"Streak reset finished with {result.errors} failed stream types: {result.failed_streams}")
    return SweepResponse(**result.as_dict())


@router.post("/reset-streaks", response_model=SweepResponse, dependencies=[Depends(verify_cron_secret)])
@limiter.limit(get_rate_limit_for_endpoint("cron"))
async def reset_streaks(
    request: Request,
    reference_day: Optional[date] = Query(None, alias="date", description="Defaults to today"),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Zero every streak whose last activity is before yesterday (daily scheduler hook)."""
    return _run_sweep(db, reference_day or today_key(now, settings.DAY_BOUNDARY_TZ), "scheduler")


@router.post("/reset-streaks/manual", response_model=SweepResponse)
async def reset_streaks_manual(
    reference_day: Optional[date] = Query(None, alias="date"),
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Run the streak reset on demand (admins only)."""
    return _run_sweep(db, reference_day or today_key(now, settings.DAY_BOUNDARY_TZ), f"admin {admin.id}")
