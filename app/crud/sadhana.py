import calendar
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.config import settings
from app.crud.user import get_user_for_update
from app.models import SadhanaLog
from app.schemas.sadhana import SadhanaLogUpsert
from app.services.day_boundary import utc_naive
from app.services.goal_classifier import aarti_count
from app.services.streak_engine import ActivityEvent, StreakState, advance, sadhana_magnitude
from app.utils.exceptions import NotFoundError
from app.utils.logger import get_logger

logger = get_logger(__name__)

LOG_FIELDS = (
    "chanting_rounds", "lecture_duration",
    "mangal_aarti", "darshan_aarti", "bhoga_aarti", "gaura_aarti",
    "missed_note",
)


def get_daily_log(db: Session, user_id: str, day: date) -> Optional[SadhanaLog]:
    """Get the user's log for one calendar day."""
    return db.query(SadhanaLog).filter(
        SadhanaLog.user_id == user_id,
        SadhanaLog.date == day
    ).first()


def get_logs_between(db: Session, user_id: str, start: date, end: date) -> List[SadhanaLog]:
    """Get the user's logs from ``start`` to ``end`` inclusive, oldest first."""
    return db.query(SadhanaLog).filter(
        SadhanaLog.user_id == user_id,
        SadhanaLog.date >= start,
        SadhanaLog.date <= end
    ).order_by(SadhanaLog.date).all()


def get_recent_logs(db: Session, user_id: str, limit: Optional[int] = None) -> List[SadhanaLog]:
    """Get the user's latest ``limit`` logs (all when None), oldest first."""
    query = db.query(SadhanaLog).filter(SadhanaLog.user_id == user_id).order_by(SadhanaLog.date.desc())
    if limit is not None:
        query = query.limit(limit)
    return query.all()[::-1]


def month_bounds(month: date) -> Tuple[date, date]:
    """First and last day of the month containing ``month``."""
    last_day = calendar.monthrange(month.year, month.month)[1]
    return month.replace(day=1), month.replace(day=last_day)


def iter_days(start: date, end: date):
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def upsert_sadhana_log(db: Session, user_id: str, payload: SadhanaLogUpsert, now: datetime) -> Tuple[SadhanaLog, StreakState]:
    """
    Create or update the log for ``payload.date`` and advance the sadhana streak.

    The user row is locked first so that double submits serialize and produce
    at most one streak transition.

    Returns:
        Tuple of (SadhanaLog, streak state after the update)
    """
    user = get_user_for_update(db, user_id)
    if not user:
        raise NotFoundError("User", user_id)

    log_day = payload.date
    log = get_daily_log(db, user_id, log_day)
    if log is None:
        log = SadhanaLog(user_id=user_id, date=log_day, total_read=0)
        db.add(log)

    data = payload.model_dump()
    for field in LOG_FIELDS:
        setattr(log, field, data[field])
    log.wake_up_time = utc_naive(payload.wake_up_time) if payload.wake_up_time else None
    log.sleep_time = utc_naive(payload.sleep_time) if payload.sleep_time else None

    event = ActivityEvent(
        day=log_day,
        magnitude=sadhana_magnitude(
            chanting_rounds=log.chanting_rounds,
            lecture_duration=log.lecture_duration,
            aartis=aarti_count(log),
        ),
        occurs_at=now,
    )
    previous = StreakState.from_record(user, "last_sadhana_date")
    state = advance(
        previous,
        event,
        reference_tz=settings.DAY_BOUNDARY_TZ,
        allow_backfill=settings.STREAK_ALLOW_BACKFILL,
    )
    if state != previous:
        state.apply_to(user, "last_sadhana_date")
        logger.debug(
            f"Sadhana streak for {user_id}: {previous.current_streak} -> {state.current_streak} "
            f"(highest {state.highest_streak})"
        )

    db.commit()
    db.refresh(log)
    return log, state
