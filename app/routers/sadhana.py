import re
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth import get_current_user
from app.dependencies import get_now
from app import schemas, crud
from app.config import settings
from app.crud.sadhana import month_bounds, iter_days
from app.middleware.rate_limit import limiter, get_rate_limit_for_endpoint
from app.services.day_boundary import to_date_key
from app.services.goal_classifier import Metric, classify, decimal_hour, metric_goal, metric_value
from app.utils.exceptions import SadhanaError, ValidationFailedError
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/sadhana", tags=["sadhana"])

MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")
DASHBOARD_RANGES = {"7": 7, "30": 30, "all": None}


def _parse_month(month: Optional[str], today: date) -> date:
    if not month:
        return today.replace(day=1)
    match = MONTH_PATTERN.match(month)
    if not match:
        raise ValidationFailedError("month must be formatted as YYYY-MM", {"month": month})
    try:
        return date(int(match.group(1)), int(match.group(2)), 1)
    except ValueError:
        # Month 13, year 0000 and the like
        raise ValidationFailedError("month must be formatted as YYYY-MM", {"month": month})


@router.put("/logs", response_model=schemas.SadhanaUpsertResponse)
@limiter.limit(get_rate_limit_for_endpoint("sadhana_write"))
async def upsert_sadhana_log(
    body: schemas.SadhanaLogUpsert,
    request: Request,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Save the sadhana entry for a day and update the daily streak."""
    try:
        log, state = crud.upsert_sadhana_log(db, current_user.id, body, now)
        today = to_date_key(now, settings.DAY_BOUNDARY_TZ)
        return schemas.SadhanaUpsertResponse(
            log=schemas.SadhanaLogResponse.model_validate(log),
            streak=schemas.StreakInfo(**crud.state_info(state, today)),
        )
    except (HTTPException, SadhanaError):
        raise
    except Exception as e:
        logger.exception(f"Failed to save sadhana log for user {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to sync sadhana data")


@router.get("/logs/{log_date}", response_model=schemas.DailySadhanaResponse)
async def get_daily_sadhana(
    log_date: date,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get one day's entry together with the goals it is measured against."""
    user = crud.get_user(db, current_user.id)
    log = crud.get_daily_log(db, current_user.id, log_date)
    return schemas.DailySadhanaResponse(
        log=schemas.SadhanaLogResponse.model_validate(log) if log else None,
        goals=schemas.Goals.model_validate(user),
    )


@router.get("/calendar", response_model=schemas.CalendarResponse)
async def get_calendar(
    month: Optional[str] = Query(None, description="Month as YYYY-MM, defaults to the current month"),
    metric: Metric = Query(Metric.CHANTING),
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """
    Month heatmap: every day of the month classified against the current goal.

    Days without a log are reported with status "none".
    """
    if metric == Metric.SLEEP:
        raise ValidationFailedError("Sleep cycle has no goal; use the dashboard")

    today = to_date_key(now, settings.DAY_BOUNDARY_TZ)
    first, last = month_bounds(_parse_month(month, today))
    try:
        user = crud.get_user(db, current_user.id)
        logs = {log.date: log for log in crud.get_logs_between(db, current_user.id, first, last)}
        goal = metric_goal(user, metric)

        days = []
        for day in iter_days(first, last):
            value = metric_value(logs.get(day), metric)
            days.append(schemas.CalendarDay(date=day, value=value, status=classify(value, goal)))

        return schemas.CalendarResponse(
            month=first.strftime("%Y-%m"),
            metric=metric,
            goal=goal,
            days=days,
            streak=schemas.StreakInfo(**crud.streak_info(user, "last_sadhana_date", today)),
        )
    except (HTTPException, SadhanaError):
        raise
    except Exception as e:
        logger.exception(f"Failed to build calendar for user {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Unable to fetch your spiritual progress")


@router.get("/dashboard", response_model=schemas.DashboardResponse)
async def get_dashboard(
    metric: Metric = Query(Metric.CHANTING),
    range: str = Query("7", pattern=r"^(7|30|all)$"),
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Chart data over the latest 7, 30 or all logged days.

    Goal metrics come back as bars with a status each. The sleep cycle comes
    back as bed/wake times in fractional hours of the user's timezone.
    """
    logs = crud.get_recent_logs(db, current_user.id, DASHBOARD_RANGES[range])

    if metric == Metric.SLEEP:
        return schemas.DashboardResponse(
            metric=metric,
            range=range,
            sleep=[
                schemas.SleepPoint(
                    date=log.date,
                    sleep_hour=decimal_hour(log.sleep_time, current_user.timezone),
                    wake_hour=decimal_hour(log.wake_up_time, current_user.timezone),
                )
                for log in logs
            ],
        )

    user = crud.get_user(db, current_user.id)
    goal = metric_goal(user, metric)
    bars = []
    for log in logs:
        value = metric_value(log, metric)
        bars.append(schemas.DashboardBar(date=log.date, value=value, status=classify(value, goal)))
    return schemas.DashboardResponse(metric=metric, range=range, goal=goal, bars=bars)
