from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from app.config import settings
from app.models import Book, UserBookProgress, SadhanaLog
from app.crud.user import get_user_for_update
from app.services.day_boundary import to_date_key
from app.services.streak_engine import ActivityEvent, StreakState, advance
from app.utils.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from app.utils.logger import get_logger

logger = get_logger(__name__)


class BooksCRUD:

    @staticmethod
    def get_catalog(db: Session) -> List[Book]:
        """Global catalogue (books without an owner), by title."""
        return db.query(Book).filter(Book.owner_id.is_(None)).order_by(Book.title.asc()).all()

    @staticmethod
    def get_shelf(db: Session, user_id: str) -> List[UserBookProgress]:
        """Books on the user's shelf with their book rows loaded."""
        return db.query(UserBookProgress).filter(
            UserBookProgress.user_id == user_id
        ).options(
            joinedload(UserBookProgress.book)
        ).order_by(UserBookProgress.created_at.asc()).all()

    @staticmethod
    def get_library(db: Session, user_id: str) -> Tuple[List[Book], List[UserBookProgress]]:
        return BooksCRUD.get_catalog(db), BooksCRUD.get_shelf(db, user_id)

    @staticmethod
    def _get_owned_progress(db: Session, user_id: str, progress_id: str, lock: bool = False) -> UserBookProgress:
        query = db.query(UserBookProgress).filter(UserBookProgress.id == progress_id)
        if lock:
            query = query.with_for_update()
        progress = query.first()
        if not progress:
            raise NotFoundError("Book progress", progress_id)
        if progress.user_id != user_id:
            raise PermissionDeniedError("This book is not on your shelf")
        return progress

    @staticmethod
    def add_to_shelf(db: Session, user_id: str, book_id: str, total_units: int, progress_type: str) -> UserBookProgress:
        """Put a catalogue book (or one of the user's private books) on the shelf."""
        book = db.query(Book).filter(
            Book.id == book_id,
            or_(Book.owner_id.is_(None), Book.owner_id == user_id)
        ).first()
        if not book:
            raise NotFoundError("Book", book_id)

        existing = db.query(UserBookProgress).filter(
            UserBookProgress.user_id == user_id,
            UserBookProgress.book_id == book_id
        ).first()
        if existing:
            raise ConflictError("This book is already on your shelf.")

        progress = UserBookProgress(
            user_id=user_id,
            book_id=book_id,
            total_units=total_units,
            type=progress_type,
            current_value=0,
            current_streak=0,
            highest_streak=0,
        )
        db.add(progress)
        db.commit()
        db.refresh(progress)
        return progress

    @staticmethod
    def add_private_book(db: Session, user_id: str, title: str, author: Optional[str],
                         total_units: int, progress_type: str) -> UserBookProgress:
        """Create a private book and its shelf entry in one transaction."""
        book = Book(title=title, author=author, owner_id=user_id)
        db.add(book)
        db.flush()

        progress = UserBookProgress(
            user_id=user_id,
            book_id=book.id,
            total_units=total_units,
            type=progress_type,
            current_value=0,
            current_streak=0,
            highest_streak=0,
        )
        db.add(progress)
        db.commit()
        db.refresh(progress)
        return progress

    @staticmethod
    def update_progress(db: Session, user_id: str, progress_id: str, delta: int, now: datetime) -> Tuple[UserBookProgress, StreakState]:
        """
        Move the reading position by ``delta`` units.

        The value is clamped to [0, total_units]. Only the units actually
        gained count as reading: they advance the book's streak and are added
        to today's ``SadhanaLog.total_read``. Corrections subtract from that
        total (never below 0) and leave the streak alone.

        The user row is locked first, in the same order as the sadhana form
        upsert, so both writers of the day's log serialize.
        """
        if not get_user_for_update(db, user_id):
            raise NotFoundError("User", user_id)
        progress = BooksCRUD._get_owned_progress(db, user_id, progress_id, lock=True)

        previous_value = progress.current_value or 0
        next_value = min(progress.total_units, max(0, previous_value + delta))
        applied = next_value - previous_value

        progress.current_value = next_value
        progress.is_completed = next_value >= progress.total_units

        today = to_date_key(now, settings.DAY_BOUNDARY_TZ)
        previous = StreakState.from_record(progress, "last_read_date")
        state = advance(
            previous,
            ActivityEvent(day=today, magnitude=applied, occurs_at=now),
            reference_tz=settings.DAY_BOUNDARY_TZ,
        )
        if state != previous:
            state.apply_to(progress, "last_read_date")
            logger.debug(f"Reading streak for {progress_id}: {previous.current_streak} -> {state.current_streak}")

        if applied != 0:
            BooksCRUD._add_to_daily_total(db, user_id, today, applied)

        db.commit()
        db.refresh(progress)
        return progress, state

    @staticmethod
    def _add_to_daily_total(db: Session, user_id: str, day, amount: int) -> None:
        log = db.query(SadhanaLog).filter(
            SadhanaLog.user_id == user_id,
            SadhanaLog.date == day
        ).first()
        if log is None:
            if amount <= 0:
                return
            log = SadhanaLog(user_id=user_id, date=day, total_read=0)
            db.add(log)
        log.total_read = max(0, (log.total_read or 0) + amount)

    @staticmethod
    def reset_progress(db: Session, user_id: str, progress_id: str) -> UserBookProgress:
        """Start the book over; streaks are kept."""
        progress = BooksCRUD._get_owned_progress(db, user_id, progress_id)
        progress.current_value = 0
        progress.is_completed = False
        db.commit()
        db.refresh(progress)
        return progress

    @staticmethod
    def remove_from_shelf(db: Session, user_id: str, progress_id: str) -> bool:
        """Delete a shelf entry together with its reading streak."""
        progress = BooksCRUD._get_owned_progress(db, user_id, progress_id)
        db.delete(progress)
        db.commit()
        return True

    @staticmethod
    def delete_book(db: Session, user_id: str, book_id: str) -> bool:
        """
        Remove a book for the user.

        A private book is deleted outright (progress cascades). For a catalogue
        book only the user's shelf entry goes.
        """
        book = db.query(Book).filter(Book.id == book_id).first()
        if not book:
            raise NotFoundError("Book", book_id)

        if book.owner_id == user_id:
            db.delete(book)
            db.commit()
            return True
        if book.owner_id is not None:
            raise PermissionDeniedError("This book belongs to another user")

        progress = db.query(UserBookProgress).filter(
            UserBookProgress.user_id == user_id,
            UserBookProgress.book_id == book_id
        ).first()
        if not progress:
            raise NotFoundError("Book progress", book_id)
        db.delete(progress)
        db.commit()
        return True


def shelf_item(progress: UserBookProgress) -> dict:
    """Shape a shelf entry for the API."""
    book = progress.book
    return {
        "id": progress.id,
        "book_id": progress.book_id,
        "title": book.title,
        "author": book.display_author,
        "type": progress.type,
        "total": progress.total_units,
        "current": progress.current_value,
        "is_completed": progress.is_completed,
        "current_streak": progress.current_streak,
        "highest_streak": progress.highest_streak,
        "last_read_date": progress.last_read_date,
        "is_private": book.is_private,
    }
