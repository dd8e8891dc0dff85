from sqlalchemy import Column, String, Date, DateTime, Integer, Text, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
import uuid


class ShlokaStatus:
    NOT_STARTED = "NOT_STARTED"
    LEARNING = "LEARNING"
    LEARNED = "LEARNED"

    ALL = (NOT_STARTED, LEARNING, LEARNED)


class ShlokaChallenge(Base):
    """A named set of verses to memorize, with a memorization streak."""
    __tablename__ = "shloka_challenges"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)

    current_streak = Column(Integer, nullable=False, default=0)
    highest_streak = Column(Integer, nullable=False, default=0)
    # Day a verse was last marked learned (streak key)
    last_learned_date = Column(Date, nullable=True, index=True)
    # Any change to the challenge; used only for ordering
    last_activity_at = Column(DateTime, server_default=func.now())

    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="shloka_challenges")
    shlokas = relationship("Shloka", back_populates="challenge", cascade="all, delete-orphan",
                           order_by="Shloka.created_at")

    def __repr__(self):
        return f"<ShlokaChallenge id={self.id} title={self.title} streak={self.current_streak}>"


class Shloka(Base):
    __tablename__ = "shlokas"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    challenge_id = Column(String, ForeignKey("shloka_challenges.id", ondelete="CASCADE"), nullable=False, index=True)
    reference = Column(String, nullable=False)  # e.g. "BG 2.13"
    content = Column(Text, nullable=False)
    translation = Column(Text, nullable=True)
    status = Column(String, nullable=False, default=ShlokaStatus.NOT_STARTED)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    challenge = relationship("ShlokaChallenge", back_populates="shlokas")

    def __repr__(self):
        return f"<Shloka id={self.id} reference={self.reference} status={self.status}>"
