from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, selectinload

from app.config import settings
from app.models import Shloka, ShlokaChallenge, ShlokaStatus
from app.services.day_boundary import to_date_key, utc_naive
from app.services.streak_engine import ActivityEvent, StreakState, advance, shloka_magnitude
from app.utils.exceptions import NotFoundError
from app.utils.logger import get_logger

logger = get_logger(__name__)


def get_challenges(db: Session, user_id: str) -> List[ShlokaChallenge]:
    """User's challenges with their verses, most recently active first."""
    return db.query(ShlokaChallenge).filter(
        ShlokaChallenge.user_id == user_id
    ).options(
        selectinload(ShlokaChallenge.shlokas)
    ).order_by(ShlokaChallenge.last_activity_at.desc()).all()


def get_challenge(db: Session, user_id: str, challenge_id: str, lock: bool = False) -> ShlokaChallenge:
    query = db.query(ShlokaChallenge).filter(
        ShlokaChallenge.id == challenge_id,
        ShlokaChallenge.user_id == user_id
    )
    if lock:
        query = query.with_for_update()
    challenge = query.first()
    if not challenge:
        raise NotFoundError("Challenge", challenge_id)
    return challenge


def create_challenge(db: Session, user_id: str, title: str, now: datetime) -> ShlokaChallenge:
    challenge = ShlokaChallenge(
        user_id=user_id,
        title=title,
        current_streak=0,
        highest_streak=0,
        last_activity_at=utc_naive(now),
    )
    db.add(challenge)
    db.commit()
    db.refresh(challenge)
    return challenge


def delete_challenge(db: Session, user_id: str, challenge_id: str) -> bool:
    """Delete a challenge, its verses and its streak."""
    challenge = get_challenge(db, user_id, challenge_id)
    db.delete(challenge)
    db.commit()
    return True


def add_shloka(db: Session, user_id: str, challenge_id: str, reference: str, content: str,
               translation: Optional[str], now: datetime) -> Shloka:
    """Add a verse to memorize. Adding is not progress and leaves the streak alone."""
    challenge = get_challenge(db, user_id, challenge_id)
    shloka = Shloka(
        challenge_id=challenge.id,
        reference=reference,
        content=content,
        translation=translation,
        status=ShlokaStatus.NOT_STARTED,
    )
    db.add(shloka)
    challenge.last_activity_at = utc_naive(now)
    db.commit()
    db.refresh(shloka)
    return shloka


def _get_owned_shloka(db: Session, user_id: str, shloka_id: str) -> Shloka:
    shloka = db.query(Shloka).join(ShlokaChallenge).filter(
        Shloka.id == shloka_id,
        ShlokaChallenge.user_id == user_id
    ).first()
    if not shloka:
        raise NotFoundError("Shloka", shloka_id)
    return shloka


def update_shloka_status(db: Session, user_id: str, shloka_id: str, status: str, now: datetime) -> Tuple[Shloka, ShlokaChallenge]:
    """
    Change a verse's status; newly learning it by heart advances the challenge streak.

    Returns:
        Tuple of (Shloka, ShlokaChallenge) after the update
    """
    shloka = _get_owned_shloka(db, user_id, shloka_id)
    challenge = get_challenge(db, user_id, shloka.challenge_id, lock=True)

    today = to_date_key(now, settings.DAY_BOUNDARY_TZ)
    previous = StreakState.from_record(challenge, "last_learned_date")
    state = advance(
        previous,
        ActivityEvent(day=today, magnitude=shloka_magnitude(shloka.status, status), occurs_at=now),
        reference_tz=settings.DAY_BOUNDARY_TZ,
    )
    if state != previous:
        state.apply_to(challenge, "last_learned_date")
        logger.debug(f"Shloka streak for {challenge.id}: {previous.current_streak} -> {state.current_streak}")

    shloka.status = status
    challenge.last_activity_at = utc_naive(now)
    db.commit()
    db.refresh(shloka)
    db.refresh(challenge)
    return shloka, challenge


def delete_shloka(db: Session, user_id: str, shloka_id: str) -> bool:
    shloka = _get_owned_shloka(db, user_id, shloka_id)
    db.delete(shloka)
    db.commit()
    return True
