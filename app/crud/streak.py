from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from app.models import User, UserBookProgress, ShlokaChallenge
from app.services.streak_engine import StreakState, effective_streak
from app.utils.exceptions import NotFoundError


def streak_info(record, last_day_attr: str, today: date) -> dict:
    """Streak badge fields for any streak-carrying row."""
    return state_info(StreakState.from_record(record, last_day_attr), today)


def state_info(state: StreakState, today: date) -> dict:
    return {
        "current_streak": state.current_streak,
        "highest_streak": state.highest_streak,
        "last_activity_day": state.last_activity_day,
        "effective_streak": effective_streak(state, today),
    }


def get_streak_overview(db: Session, user_id: str, today: date) -> dict:
    """
    Sadhana streak plus every book and challenge streak of a user.

    Args:
        db: Database session
        user_id: User ID
        today: Today's day key, computed once by the caller

    Returns:
        Dict shaped like StreakOverviewResponse
    """
    user: Optional[User] = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User", user_id)

    books = db.query(UserBookProgress).filter(
        UserBookProgress.user_id == user_id
    ).options(joinedload(UserBookProgress.book)).all()
    challenges = db.query(ShlokaChallenge).filter(ShlokaChallenge.user_id == user_id).all()

    return {
        "user_id": user_id,
        "today": today,
        "sadhana": streak_info(user, "last_sadhana_date", today),
        "books": [
            {
                "progress_id": p.id,
                "book_id": p.book_id,
                "title": p.book.title,
                **streak_info(p, "last_read_date", today),
            }
            for p in books
        ],
        "challenges": [
            {
                "challenge_id": c.id,
                "title": c.title,
                **streak_info(c, "last_learned_date", today),
            }
            for c in challenges
        ],
    }
