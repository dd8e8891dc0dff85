from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth import get_current_user
from app.dependencies import get_now
from app import crud
from app.middleware.rate_limit import limiter, get_rate_limit_for_endpoint
from app.schemas import CurrentUser
from app.schemas.shloka import (
    ChallengeCreate, ChallengeResponse, ShlokaCreate, ShlokaResponse, ShlokaStatusUpdate, ShlokaStatusResponse
)
from app.utils.exceptions import SadhanaError
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["challenges"])


@router.get("/challenges", response_model=List[ChallengeResponse])
async def list_challenges(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Shloka challenges with their verses, most recently active first."""
    return crud.get_challenges(db, current_user.id)


@router.post("/challenges", response_model=ChallengeResponse, status_code=status.HTTP_201_CREATED)
async def create_challenge(
    body: ChallengeCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    try:
        challenge = crud.create_challenge(db, current_user.id, body.title, now)
        return ChallengeResponse.model_validate(challenge)
    except Exception as e:
        logger.exception(f"Failed to create challenge for {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create challenge")


@router.delete("/challenges/{challenge_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_challenge(
    challenge_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete a challenge with its verses and streak."""
    crud.delete_challenge(db, current_user.id, challenge_id)


@router.post("/challenges/{challenge_id}/shlokas", response_model=ShlokaResponse, status_code=status.HTTP_201_CREATED)
async def add_shloka(
    challenge_id: str,
    body: ShlokaCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    try:
        return crud.add_shloka(db, current_user.id, challenge_id, body.reference, body.content, body.translation, now)
    except (HTTPException, SadhanaError):
        raise
    except Exception as e:
        logger.exception(f"Failed to add shloka to {challenge_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to add shloka")


@router.patch("/shlokas/{shloka_id}/status", response_model=ShlokaStatusResponse)
@limiter.limit(get_rate_limit_for_endpoint("progress_write"))
async def update_shloka_status(
    shloka_id: str,
    body: ShlokaStatusUpdate,
    request: Request,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Change a verse's status; marking it LEARNED counts toward the challenge streak."""
    try:
        shloka, challenge = crud.update_shloka_status(db, current_user.id, shloka_id, body.status, now)
        return ShlokaStatusResponse(
            shloka=ShlokaResponse.model_validate(shloka),
            current_streak=challenge.current_streak,
            highest_streak=challenge.highest_streak,
        )
    except (HTTPException, SadhanaError):
        raise
    except Exception as e:
        logger.exception(f"Streak update failed for shloka {shloka_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update shloka status")


@router.delete("/shlokas/{shloka_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_shloka(
    shloka_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    crud.delete_shloka(db, current_user.id, shloka_id)
