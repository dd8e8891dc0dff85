from pydantic import BaseModel
from typing import List, Optional
from datetime import date


class StreakInfo(BaseModel):
    current_streak: int
    highest_streak: int
    last_activity_day: Optional[date] = None
    # current_streak as of today, 0 if the streak lapsed and no sweep ran yet
    effective_streak: int


class BookStreak(StreakInfo):
    progress_id: str
    book_id: str
    title: str


class ChallengeStreak(StreakInfo):
    challenge_id: str
    title: str


class StreakOverviewResponse(BaseModel):
    user_id: str
    today: date
    sadhana: StreakInfo
    books: List[BookStreak]
    challenges: List[ChallengeStreak]


class SweepResponse(BaseModel):
    reference_day: date
    users_reset: int
    books_reset: int
    challenges_reset: int
    errors: int
    failed_streams: List[str]
