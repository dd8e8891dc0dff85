from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func
from app.models import User, UserRole
from app.config import settings
from app.services.goal_classifier import clamp_aartis_goal
from app.utils.exceptions import ConflictError, NotFoundError
from app.utils.logger import get_logger
from typing import Optional

logger = get_logger(__name__)

GOAL_FIELDS = ("rounds_goal", "reading_goal", "hearing_goal", "aartis_goal")

def get_user(db: Session, user_id: str) -> Optional[User]:
    """Get a user by ID."""
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get a user by email (case-insensitive)."""
    return db.query(User).filter(func.lower(User.email) == email.lower()).first()

def get_user_for_update(db: Session, user_id: str) -> Optional[User]:
    """Get a user row locked for the rest of the transaction (streak writes)."""
    return db.query(User).filter(User.id == user_id).with_for_update().first()

def create_user(db: Session, user_id: str, email: str, name: Optional[str] = None,
                timezone: Optional[str] = None, role: str = UserRole.SADHAK) -> User:
    """
    Create a new user with default goals and an empty sadhana streak.

    Raises:
        ConflictError: if the id or email is already registered
    """
    if get_user(db, user_id) or get_user_by_email(db, email):
        raise ConflictError("A user with this id or email already exists")

    db_user = User(
        id=user_id,
        email=email,
        name=name,
        role=role,
        timezone=timezone or settings.DEFAULT_USER_TIMEZONE,
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("A user with this id or email already exists")
    db.refresh(db_user)
    logger.info(f"Created user {user_id}")
    return db_user

def update_goals(db: Session, user_id: str, update_data: dict) -> User:
    """
    Update the user's daily goals.

    Goals are not versioned: past days are reclassified against the new values.
    """
    db_user = get_user(db, user_id)
    if not db_user:
        raise NotFoundError("User", user_id)

    for field, value in update_data.items():
        if field in GOAL_FIELDS and value is not None:
            if field == "aartis_goal":
                value = clamp_aartis_goal(value)
            setattr(db_user, field, value)

    db.commit()
    db.refresh(db_user)
    return db_user
