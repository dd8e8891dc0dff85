from app.database import Base
from app.models.user import User, UserRole
from app.models.sadhana_log import SadhanaLog
from app.models.book import Book, UserBookProgress, ProgressType
from app.models.shloka import ShlokaChallenge, Shloka, ShlokaStatus

__all__ = [
    "Base", "User", "UserRole", "SadhanaLog",
    "Book", "UserBookProgress", "ProgressType",
    "ShlokaChallenge", "Shloka", "ShlokaStatus",
]
