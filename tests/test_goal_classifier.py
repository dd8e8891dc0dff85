from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from app.services.goal_classifier import (
    GoalStatus,
    Metric,
    aarti_count,
    classify,
    classify_metric,
    decimal_hour,
    metric_goal,
)


@pytest.mark.parametrize(
    "value,goal,expected",
    [
        (0, 16, GoalStatus.NONE),
        (8, 16, GoalStatus.BELOW),
        (16, 16, GoalStatus.MET),
        (20, 16, GoalStatus.EXCEEDED),
        (5, 0, GoalStatus.MET),
        (0, 0, GoalStatus.NONE),
        (0.5, 1, GoalStatus.BELOW),
    ],
)
def test_classify(value, goal, expected):
    assert classify(value, goal) == expected


def test_classify_rejects_negative_value():
    with pytest.raises(ValueError):
        classify(-1, 16)


def make_log(**fields):
    defaults = dict(
        chanting_rounds=0, lecture_duration=0, total_read=0,
        mangal_aarti=False, darshan_aarti=False, bhoga_aarti=False, gaura_aarti=False,
    )
    defaults.update(fields)
    return SimpleNamespace(**defaults)


GOALS = SimpleNamespace(rounds_goal=16, reading_goal=30, hearing_goal=30, aartis_goal=4)


def test_aarti_count_counts_flags():
    assert aarti_count(make_log(mangal_aarti=True, gaura_aarti=True)) == 2


def test_classify_metric_per_column():
    log = make_log(chanting_rounds=16, total_read=40, lecture_duration=10, mangal_aarti=True)
    assert classify_metric(log, Metric.CHANTING, GOALS) == GoalStatus.MET
    assert classify_metric(log, Metric.READING, GOALS) == GoalStatus.EXCEEDED
    assert classify_metric(log, Metric.HEARING, GOALS) == GoalStatus.BELOW
    assert classify_metric(log, Metric.AARTI, GOALS) == GoalStatus.BELOW


def test_missing_log_is_none():
    assert classify_metric(None, Metric.CHANTING, GOALS) == GoalStatus.NONE


def test_sleep_has_no_goal():
    with pytest.raises(ValueError):
        classify_metric(make_log(), Metric.SLEEP, GOALS)


def test_aartis_goal_is_clamped():
    goals = SimpleNamespace(aartis_goal=7)
    assert metric_goal(goals, Metric.AARTI) == 4
    all_four = make_log(mangal_aarti=True, darshan_aarti=True, bhoga_aarti=True, gaura_aarti=True)
    assert classify_metric(all_four, Metric.AARTI, goals) == GoalStatus.MET


def test_decimal_hour():
    assert decimal_hour(None) == 0.0
    assert decimal_hour(datetime(2025, 1, 5, 22, 30)) == 22.5
    # Stored naive UTC shown in the user's zone
    assert decimal_hour(datetime(2025, 1, 5, 16, 30), "Asia/Kolkata") == 22.0
    aware = datetime(2025, 1, 5, 4, 15, tzinfo=timezone.utc)
    assert decimal_hour(aware) == 4.25
