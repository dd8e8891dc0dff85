from sqlalchemy import Column, String, Date, DateTime, Integer, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
import uuid


class ProgressType:
    PAGES = "PAGES"
    CHAPTERS = "CHAPTERS"

    ALL = (PAGES, CHAPTERS)


# Shown when a book has no author: catalogue books are Prabhupada's, private ones unknown
DEFAULT_AUTHOR = "Srila Prabhupada"
UNKNOWN_AUTHOR = "Unknown Author"


class Book(Base):
    """A book in the global catalogue (owner_id is NULL) or a user's private book."""
    __tablename__ = "books"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    title = Column(String, nullable=False)
    author = Column(String, nullable=True)
    owner_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    created_at = Column(DateTime, server_default=func.now())

    owner = relationship("User", back_populates="private_books")
    progress_entries = relationship("UserBookProgress", back_populates="book", cascade="all, delete-orphan")

    @property
    def is_private(self) -> bool:
        return self.owner_id is not None

    @property
    def display_author(self) -> str:
        if self.author:
            return self.author
        return UNKNOWN_AUTHOR if self.is_private else DEFAULT_AUTHOR

    def __repr__(self):
        return f"<Book id={self.id} title={self.title} owner={self.owner_id}>"


class UserBookProgress(Base):
    """A book on a user's shelf: reading position plus its own reading streak."""
    __tablename__ = "user_book_progress"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    book_id = Column(String, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String, nullable=False, default=ProgressType.PAGES)
    total_units = Column(Integer, nullable=False)
    current_value = Column(Integer, nullable=False, default=0)
    is_completed = Column(Boolean, nullable=False, default=False)

    # Reading streak
    current_streak = Column(Integer, nullable=False, default=0)
    highest_streak = Column(Integer, nullable=False, default=0)
    last_read_date = Column(Date, nullable=True, index=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="book_progress")
    book = relationship("Book", back_populates="progress_entries")

    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_user_book_progress_user_book"),
    )

    def __repr__(self):
        return (
            f"<UserBookProgress id={self.id} book={self.book_id} value={self.current_value}/{self.total_units} "
            f"streak={self.current_streak}>"
        )
