from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth import get_current_user
from app.dependencies import get_now
from app.crud.books import BooksCRUD, shelf_item
from app.middleware.rate_limit import limiter, get_rate_limit_for_endpoint
from app.schemas import CurrentUser
from app.schemas.book import (
    AddToShelfRequest, PrivateBookCreate, ProgressUpdate, LibraryResponse, ShelfItem, CatalogBook,
    BookStatusResponse
)
from app.utils.exceptions import SadhanaError
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/books", tags=["books"])


@router.get("", response_model=LibraryResponse)
async def get_library(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Global catalogue (flagged when already shelved) and the user's shelf."""
    catalog, shelf = BooksCRUD.get_library(db, current_user.id)
    shelved_ids = {p.book_id for p in shelf}
    return LibraryResponse(
        global_books=[
            CatalogBook(id=b.id, title=b.title, author=b.display_author, is_added=b.id in shelved_ids)
            for b in catalog
        ],
        user_shelf=[ShelfItem(**shelf_item(p)) for p in shelf],
    )


@router.post("/shelf", response_model=ShelfItem, status_code=status.HTTP_201_CREATED)
async def add_to_shelf(
    body: AddToShelfRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add a catalogue book to the shelf with its unit count and type."""
    try:
        progress = BooksCRUD.add_to_shelf(db, current_user.id, body.book_id, body.total_units, body.type)
        return ShelfItem(**shelf_item(progress))
    except (HTTPException, SadhanaError):
        raise
    except Exception as e:
        logger.exception(f"Error adding book {body.book_id} to shelf of {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to add book. Please try again later.")


@router.post("/private", response_model=ShelfItem, status_code=status.HTTP_201_CREATED)
async def add_private_book(
    body: PrivateBookCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a book only this user sees and shelve it."""
    try:
        progress = BooksCRUD.add_private_book(
            db, current_user.id, body.title, body.author, body.total_units, body.type
        )
        return ShelfItem(**shelf_item(progress))
    except (HTTPException, SadhanaError):
        raise
    except Exception as e:
        logger.exception(f"Error creating private book for {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create private book.")


@router.post("/progress/{progress_id}", response_model=ShelfItem)
@limiter.limit(get_rate_limit_for_endpoint("progress_write"))
async def update_progress(
    progress_id: str,
    body: ProgressUpdate,
    request: Request,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Record pages/chapters read (or correct a mistake with a negative delta)."""
    try:
        progress, _ = BooksCRUD.update_progress(db, current_user.id, progress_id, body.delta, now)
        return ShelfItem(**shelf_item(progress))
    except (HTTPException, SadhanaError):
        raise
    except Exception as e:
        logger.exception(f"Error updating progress {progress_id}: {e}")
        raise HTTPException(status_code=500, detail="Could not update progress")


@router.post("/progress/{progress_id}/reset", response_model=ShelfItem)
async def reset_progress(
    progress_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Start a book over. Reading streaks are kept."""
    try:
        progress = BooksCRUD.reset_progress(db, current_user.id, progress_id)
        return ShelfItem(**shelf_item(progress))
    except (HTTPException, SadhanaError):
        raise
    except Exception as e:
        logger.exception(f"Error resetting progress {progress_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to reset progress")


@router.delete("/progress/{progress_id}", response_model=BookStatusResponse)
async def remove_from_shelf(
    progress_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Take a book off the shelf, dropping its reading streak."""
    try:
        BooksCRUD.remove_from_shelf(db, current_user.id, progress_id)
        return BookStatusResponse(message="Book removed from shelf", status="removed")
    except (HTTPException, SadhanaError):
        raise
    except Exception as e:
        logger.exception(f"Error removing progress {progress_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to remove book from shelf")


@router.delete("/{book_id}", response_model=BookStatusResponse)
async def delete_book(
    book_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete a private book, or remove a catalogue book from the shelf."""
    try:
        BooksCRUD.delete_book(db, current_user.id, book_id)
        return BookStatusResponse(message="Book deleted", status="deleted")
    except (HTTPException, SadhanaError):
        raise
    except Exception as e:
        logger.exception(f"Error deleting book {book_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to remove book from shelf")
