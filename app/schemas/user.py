from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import date, datetime
import pytz

from app.config import MAX_ROUNDS_GOAL, MAX_READING_GOAL, MAX_HEARING_GOAL, MAX_AARTIS_GOAL


class UserBase(BaseModel):
    """Base user schema with common attributes"""
    email: Optional[str] = None
    name: Optional[str] = None
    timezone: Optional[str] = None

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v):
        if v is not None and v not in pytz.all_timezones_set:
            raise ValueError(f'Unknown timezone: {v}')
        return v

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if v is not None and len(v.strip()) < 2:
            raise ValueError('Name must be at least 2 characters long')
        return v


class UserCreate(UserBase):
    """Registration payload; the id comes from the identity provider"""
    id: str = Field(..., min_length=1, max_length=128)
    email: str = Field(..., min_length=3, max_length=320)


class GoalsUpdate(BaseModel):
    """Partial update of daily goals"""
    rounds_goal: Optional[int] = Field(None, ge=1, le=MAX_ROUNDS_GOAL)
    reading_goal: Optional[int] = Field(None, ge=0, le=MAX_READING_GOAL)
    hearing_goal: Optional[int] = Field(None, ge=0, le=MAX_HEARING_GOAL)
    aartis_goal: Optional[int] = Field(None, ge=0, le=MAX_AARTIS_GOAL)


class Goals(BaseModel):
    rounds_goal: int
    reading_goal: int
    hearing_goal: int
    aartis_goal: int

    class Config:
        from_attributes = True


class UserResponse(UserBase):
    """Schema for user response"""
    id: str
    role: str
    rounds_goal: int
    reading_goal: int
    hearing_goal: int
    aartis_goal: int
    current_streak: int
    highest_streak: int
    last_sadhana_date: Optional[date] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CurrentUser(BaseModel):
    """Simplified user model for authenticated requests"""
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: str
    timezone: str
