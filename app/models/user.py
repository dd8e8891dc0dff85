from sqlalchemy import Column, String, DateTime, Date, Integer
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
from app.config import settings


class UserRole:
    SADHAK = "SADHAK"
    MENTOR = "MENTOR"
    ADMIN = "ADMIN"

    ALL = (SADHAK, MENTOR, ADMIN)


class User(Base):
    """A practitioner, with goal settings and the overall daily sadhana streak."""
    __tablename__ = "users"

    id = Column(String, primary_key=True)  # Issued by the external identity provider
    email = Column(String, unique=True, index=True)
    name = Column(String, nullable=True)
    role = Column(String, default=UserRole.SADHAK, nullable=False)
    timezone = Column(String, nullable=False, default=settings.DEFAULT_USER_TIMEZONE)

    # Daily goals
    rounds_goal = Column(Integer, nullable=False, default=settings.DEFAULT_ROUNDS_GOAL)
    reading_goal = Column(Integer, nullable=False, default=settings.DEFAULT_READING_GOAL)
    hearing_goal = Column(Integer, nullable=False, default=settings.DEFAULT_HEARING_GOAL)
    aartis_goal = Column(Integer, nullable=False, default=settings.DEFAULT_AARTIS_GOAL)

    # Sadhana streak
    current_streak = Column(Integer, nullable=False, default=0)
    highest_streak = Column(Integer, nullable=False, default=0)
    last_sadhana_date = Column(Date, nullable=True, index=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships - one to many
    sadhana_logs = relationship("SadhanaLog", back_populates="user", cascade="all, delete-orphan")
    book_progress = relationship("UserBookProgress", back_populates="user", cascade="all, delete-orphan")
    private_books = relationship("Book", back_populates="owner", cascade="all, delete-orphan")
    shloka_challenges = relationship("ShlokaChallenge", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return (
            f"<User id={self.id} email={self.email} role={self.role} "
            f"streak={self.current_streak}/{self.highest_streak} last={self.last_sadhana_date}>"
        )
