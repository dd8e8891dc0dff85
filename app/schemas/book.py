from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import date

from app.models.book import ProgressType


def _validate_type(v: str) -> str:
    v = v.upper()
    if v not in ProgressType.ALL:
        raise ValueError(f"type must be one of {', '.join(ProgressType.ALL)}")
    return v


class CatalogBook(BaseModel):
    id: str
    title: str
    author: str
    is_added: bool


class ShelfItem(BaseModel):
    id: str  # progress id
    book_id: str
    title: str
    author: str
    type: str
    total: int
    current: int
    is_completed: bool
    current_streak: int
    highest_streak: int
    last_read_date: Optional[date] = None
    is_private: bool = False


class LibraryResponse(BaseModel):
    global_books: List[CatalogBook]
    user_shelf: List[ShelfItem]


class AddToShelfRequest(BaseModel):
    book_id: str
    total_units: int = Field(..., gt=0)
    type: str = ProgressType.PAGES

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        return _validate_type(v)


class PrivateBookCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    author: Optional[str] = Field(None, max_length=200)
    total_units: int = Field(..., gt=0)
    type: str = ProgressType.PAGES

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        return _validate_type(v)


class ProgressUpdate(BaseModel):
    """Pages/chapters read (positive) or a correction (negative)"""
    delta: int = Field(..., ge=-10000, le=10000)


class BookStatusResponse(BaseModel):
    message: str
    status: str
