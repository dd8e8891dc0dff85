from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import date, datetime

from app.models.shloka import ShlokaStatus


class ChallengeCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)


class ShlokaCreate(BaseModel):
    reference: str = Field(..., min_length=1, max_length=100)
    content: str = Field(..., min_length=1)
    translation: Optional[str] = None


class ShlokaStatusUpdate(BaseModel):
    status: str

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        v = v.upper()
        if v not in ShlokaStatus.ALL:
            raise ValueError(f"status must be one of {', '.join(ShlokaStatus.ALL)}")
        return v


class ShlokaResponse(BaseModel):
    id: str
    challenge_id: str
    reference: str
    content: str
    translation: Optional[str] = None
    status: str

    class Config:
        from_attributes = True


class ChallengeResponse(BaseModel):
    id: str
    title: str
    current_streak: int
    highest_streak: int
    last_learned_date: Optional[date] = None
    last_activity_at: Optional[datetime] = None
    shlokas: List[ShlokaResponse] = []

    class Config:
        from_attributes = True


class ShlokaStatusResponse(BaseModel):
    shloka: ShlokaResponse
    current_streak: int
    highest_streak: int
