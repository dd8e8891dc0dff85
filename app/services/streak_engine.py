"""
Streak state machine shared by the sadhana log, book progress and shloka
challenges.

Each stream keeps a ``StreakState`` on its own row. An activity-logging call
site turns its domain event into an ``ActivityEvent`` (how much positive
progress happened, on which day, at what time) and asks ``advance`` for the
next state. The function is pure: it never reads the clock and never touches
the database.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Optional

from app.services.day_boundary import DEFAULT_REFERENCE_TZ, is_previous_day, to_date_key
from app.utils.logger import get_logger

logger = get_logger(__name__)

SHLOKA_LEARNED = "LEARNED"


@dataclass(frozen=True)
class StreakState:
    current_streak: int = 0
    highest_streak: int = 0
    last_activity_day: Optional[date] = None

    def __post_init__(self):
        if self.current_streak < 0 or self.highest_streak < 0:
            raise ValueError("streak counters cannot be negative")
        if self.highest_streak < self.current_streak:
            raise ValueError("highest_streak must be >= current_streak")
        if self.last_activity_day is not None and (
            isinstance(self.last_activity_day, datetime) or not isinstance(self.last_activity_day, date)
        ):
            raise ValueError("last_activity_day must be a date key")

    @classmethod
    def from_record(cls, record: Any, last_day_attr: str) -> "StreakState":
        """Read the streak columns off an ORM row (user, book progress, challenge)."""
        current = record.current_streak or 0
        highest = record.highest_streak or 0
        return cls(
            current_streak=current,
            # Rows written before highest was tracked may lag behind current
            highest_streak=max(highest, current),
            last_activity_day=getattr(record, last_day_attr),
        )

    def apply_to(self, record: Any, last_day_attr: str) -> None:
        record.current_streak = self.current_streak
        record.highest_streak = self.highest_streak
        setattr(record, last_day_attr, self.last_activity_day)


@dataclass(frozen=True)
class ActivityEvent:
    """
    One logged activity.

    ``day`` is the calendar day the entry is for, ``magnitude`` how much
    positive progress it carries (rounds, pages, newly learned verses) and
    ``occurs_at`` when it was submitted.
    """
    day: date
    magnitude: float
    occurs_at: datetime


ProgressPredicate = Callable[[ActivityEvent], bool]


def has_positive_magnitude(event: ActivityEvent) -> bool:
    return event.magnitude > 0


def advance(
    state: StreakState,
    event: ActivityEvent,
    is_positive: ProgressPredicate = has_positive_magnitude,
    reference_tz: str = DEFAULT_REFERENCE_TZ,
    allow_backfill: bool = False,
) -> StreakState:
    """
    Compute the streak state after ``event``.

    Rules, in order:
      * no positive progress: state unchanged (decrements never lower a streak)
      * first activity ever: streak becomes 1
      * already active on that day: streak unchanged, floored at 1
      * active the day before: streak + 1
      * anything else is a gap: streak restarts at 1

    The activity day is the day ``occurs_at`` falls on. An entry whose own
    ``day`` differs (a backfill) leaves the state untouched unless
    ``allow_backfill`` is set, in which case ``day`` is used as the activity
    day even if that moves ``last_activity_day`` backward.
    """
    if not is_positive(event):
        return state

    today = to_date_key(event.occurs_at, reference_tz)
    activity_day = today
    event_day = to_date_key(event.day, reference_tz)
    if event_day != today:
        if not allow_backfill:
            logger.debug(f"Backfill for {event_day} on {today} recorded without streak change")
            return state
        activity_day = event_day

    last = state.last_activity_day
    if last is None:
        current = 1
    elif last == activity_day:
        current = state.current_streak or 1
    elif is_previous_day(last, activity_day):
        current = state.current_streak + 1
    else:
        current = 1

    return StreakState(
        current_streak=current,
        highest_streak=max(state.highest_streak, current),
        last_activity_day=activity_day,
    )


def effective_streak(state: StreakState, today: date) -> int:
    """
    Streak to display on ``today``.

    Between a lapse and the next sweep the stored counter is stale; anything
    last active before yesterday already shows as 0.
    """
    last = state.last_activity_day
    if last is None:
        return 0
    if last < today and not is_previous_day(last, today):
        return 0
    return state.current_streak


def sadhana_magnitude(chanting_rounds: int = 0, lecture_duration: int = 0, aartis: int = 0) -> int:
    """
    Positive when the sadhana form records any practice.

    Pages read are not part of it: they arrive through book progress, which
    keeps its own streak.
    """
    return max(chanting_rounds or 0, 0) + max(lecture_duration or 0, 0) + max(aartis or 0, 0)


def shloka_magnitude(previous_status: Optional[str], new_status: str) -> int:
    """1 when a verse is newly marked learned, 0 for any other status change."""
    new_learned = str(new_status).upper() == SHLOKA_LEARNED
    was_learned = previous_status is not None and str(previous_status).upper() == SHLOKA_LEARNED
    return 1 if new_learned and not was_learned else 0
