from datetime import datetime
from enum import Enum
from typing import Any, Optional

import pytz

from app.config import MAX_AARTIS_GOAL

AARTI_FIELDS = ("mangal_aarti", "darshan_aarti", "bhoga_aarti", "gaura_aarti")


class GoalStatus(str, Enum):
    """How a day's value compares with the user's goal (calendar and chart colors)."""
    NONE = "none"
    BELOW = "below"
    MET = "met"
    EXCEEDED = "exceeded"


class Metric(str, Enum):
    CHANTING = "chanting"
    READING = "reading"
    HEARING = "hearing"
    AARTI = "aarti"
    SLEEP = "sleep"


# Metric -> (log column, user goal column). Aarti is derived from four flags.
METRIC_FIELDS = {
    Metric.CHANTING: ("chanting_rounds", "rounds_goal"),
    Metric.READING: ("total_read", "reading_goal"),
    Metric.HEARING: ("lecture_duration", "hearing_goal"),
    Metric.AARTI: (None, "aartis_goal"),
}


def classify(value: float, goal: float) -> GoalStatus:
    """
    Classify a day's value against a goal.

    A goal of 0 means "unset": any activity counts as met.
    """
    if value < 0:
        raise ValueError("value cannot be negative")
    if value == 0:
        return GoalStatus.NONE
    if goal <= 0:
        return GoalStatus.MET
    if value < goal:
        return GoalStatus.BELOW
    if value == goal:
        return GoalStatus.MET
    return GoalStatus.EXCEEDED


def aarti_count(log: Any) -> int:
    return sum(1 for field in AARTI_FIELDS if getattr(log, field, False))


def clamp_aartis_goal(goal: int) -> int:
    return min(max(goal or 0, 0), MAX_AARTIS_GOAL)


def metric_value(log: Optional[Any], metric: Metric) -> int:
    """Raw value of ``metric`` in a sadhana log; a missing log counts as 0."""
    if log is None:
        return 0
    if metric == Metric.AARTI:
        return aarti_count(log)
    column, _ = METRIC_FIELDS[metric]
    return getattr(log, column, 0) or 0


def metric_goal(goals: Any, metric: Metric) -> int:
    _, goal_field = METRIC_FIELDS[metric]
    goal = getattr(goals, goal_field, 0) or 0
    if metric == Metric.AARTI:
        return clamp_aartis_goal(goal)
    return goal


def classify_metric(log: Optional[Any], metric: Metric, goals: Any) -> GoalStatus:
    """Classify one metric of a sadhana log using the user's current goals."""
    if metric == Metric.SLEEP:
        raise ValueError("sleep cycle has no goal")
    return classify(metric_value(log, metric), metric_goal(goals, metric))


def decimal_hour(ts: Optional[datetime], tz_name: str = "UTC") -> float:
    """
    Express a bed/wake time as a fractional hour (22:30 -> 22.5) in ``tz_name``.

    Naive values are stored as UTC. A missing time charts as 0.
    """
    if ts is None:
        return 0.0
    if ts.tzinfo is None:
        ts = pytz.utc.localize(ts)
    local = ts.astimezone(pytz.timezone(tz_name))
    return round(local.hour + local.minute / 60, 2)
