from sqlalchemy import Column, String, Date, DateTime, Integer, Boolean, Text, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
import uuid


class SadhanaLog(Base):
    """One row per user per calendar day."""
    __tablename__ = "sadhana_logs"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)

    chanting_rounds = Column(Integer, nullable=False, default=0)
    lecture_duration = Column(Integer, nullable=False, default=0)  # minutes heard
    total_read = Column(Integer, nullable=False, default=0)  # pages, summed from book progress

    mangal_aarti = Column(Boolean, nullable=False, default=False)
    darshan_aarti = Column(Boolean, nullable=False, default=False)
    bhoga_aarti = Column(Boolean, nullable=False, default=False)
    gaura_aarti = Column(Boolean, nullable=False, default=False)

    wake_up_time = Column(DateTime, nullable=True)  # naive UTC
    sleep_time = Column(DateTime, nullable=True)  # naive UTC
    missed_note = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="sadhana_logs")

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_sadhana_logs_user_date"),
    )

    def __repr__(self):
        return f"<SadhanaLog user_id={self.user_id} date={self.date} rounds={self.chanting_rounds}>"
