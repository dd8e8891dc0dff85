from pydantic import BaseModel, Field
from typing import List, Optional
import datetime as dt

from app.schemas.streak import StreakInfo
from app.schemas.user import Goals
from app.services.goal_classifier import GoalStatus, Metric


class SadhanaLogUpsert(BaseModel):
    """Daily sadhana form"""
    date: dt.date
    chanting_rounds: int = Field(0, ge=0, le=108)
    lecture_duration: int = Field(0, ge=0, le=1440)
    mangal_aarti: bool = False
    darshan_aarti: bool = False
    bhoga_aarti: bool = False
    gaura_aarti: bool = False
    wake_up_time: Optional[dt.datetime] = None
    sleep_time: Optional[dt.datetime] = None
    missed_note: Optional[str] = Field(None, max_length=2000)


class SadhanaLogResponse(BaseModel):
    id: str
    user_id: str
    date: dt.date
    chanting_rounds: int
    lecture_duration: int
    total_read: int
    mangal_aarti: bool
    darshan_aarti: bool
    bhoga_aarti: bool
    gaura_aarti: bool
    wake_up_time: Optional[dt.datetime] = None
    sleep_time: Optional[dt.datetime] = None
    missed_note: Optional[str] = None

    class Config:
        from_attributes = True


class SadhanaUpsertResponse(BaseModel):
    log: SadhanaLogResponse
    streak: StreakInfo


class DailySadhanaResponse(BaseModel):
    log: Optional[SadhanaLogResponse] = None
    goals: Goals


class CalendarDay(BaseModel):
    date: dt.date
    value: int
    status: GoalStatus


class CalendarResponse(BaseModel):
    month: str
    metric: Metric
    goal: int
    days: List[CalendarDay]
    streak: StreakInfo


class DashboardBar(BaseModel):
    date: dt.date
    value: int
    status: GoalStatus


class SleepPoint(BaseModel):
    date: dt.date
    sleep_hour: float
    wake_hour: float


class DashboardResponse(BaseModel):
    metric: Metric
    range: str
    goal: Optional[int] = None
    bars: List[DashboardBar] = []
    sleep: List[SleepPoint] = []
