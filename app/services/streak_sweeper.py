"""
Daily maintenance that zeroes streaks nobody kept up.

``advance`` only runs when something is logged, so a user who simply stops
never sees their streak drop. ``sweep`` makes that silence visible: any
stream whose last activity is before yesterday gets ``current_streak = 0``.
``highest_streak`` and the last activity day are left as history.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Tuple

from sqlalchemy.orm import Session

from app.models import User, UserBookProgress, ShlokaChallenge
from app.services.day_boundary import previous_day
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Stream type -> (model, last activity day column)
STREAM_TYPES: Dict[str, Tuple[type, str]] = {
    "users": (User, "last_sadhana_date"),
    "books": (UserBookProgress, "last_read_date"),
    "challenges": (ShlokaChallenge, "last_learned_date"),
}


@dataclass
class SweepResult:
    reference_day: date
    users_reset: int = 0
    books_reset: int = 0
    challenges_reset: int = 0
    errors: int = 0
    failed_streams: List[str] = field(default_factory=list)

    @property
    def total_reset(self) -> int:
        return self.users_reset + self.books_reset + self.challenges_reset

    def as_dict(self) -> dict:
        return {
            "reference_day": self.reference_day.isoformat(),
            "users_reset": self.users_reset,
            "books_reset": self.books_reset,
            "challenges_reset": self.challenges_reset,
            "errors": self.errors,
            "failed_streams": list(self.failed_streams),
        }


def sweep_stream(db: Session, stream: str, reference_day: date) -> int:
    """Reset lapsed streaks of one stream type in a single bulk update and commit it."""
    model, day_attr = STREAM_TYPES[stream]
    day_column = getattr(model, day_attr)
    cutoff = previous_day(reference_day)

    count = (
        db.query(model)
        .filter(day_column < cutoff, model.current_streak > 0)
        .update({model.current_streak: 0}, synchronize_session=False)
    )
    db.commit()
    return count


def sweep(db: Session, reference_day: date) -> SweepResult:
    """
    Reset every streak whose last activity is before ``reference_day - 1``.

    Each stream type is updated and committed on its own; a failure in one is
    logged, rolled back and counted in ``errors`` while the others proceed.
    Running it twice on the same day resets nothing the second time.
    """
    result = SweepResult(reference_day=reference_day)
    for stream in STREAM_TYPES:
        try:
            count = sweep_stream(db, stream, reference_day)
        except Exception as e:
            logger.exception(f"Streak sweep failed for {stream} on {reference_day}: {e}")
            db.rollback()
            result.errors += 1
            result.failed_streams.append(stream)
            continue
        setattr(result, f"{stream}_reset", count)
        logger.info(f"Streak sweep reset {count} {stream} streaks (reference day {reference_day})")
    return result
