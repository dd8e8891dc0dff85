from app.schemas.user import UserBase, UserCreate, UserResponse, CurrentUser, GoalsUpdate, Goals
from app.schemas.streak import StreakInfo, BookStreak, ChallengeStreak, StreakOverviewResponse, SweepResponse
from app.schemas.sadhana import (
    SadhanaLogUpsert, SadhanaLogResponse, SadhanaUpsertResponse, DailySadhanaResponse,
    CalendarDay, CalendarResponse, DashboardBar, SleepPoint, DashboardResponse
)
from app.schemas.book import (
    CatalogBook, ShelfItem, LibraryResponse, AddToShelfRequest, PrivateBookCreate,
    ProgressUpdate, BookStatusResponse
)
from app.schemas.shloka import (
    ChallengeCreate, ShlokaCreate, ShlokaStatusUpdate, ShlokaResponse, ChallengeResponse,
    ShlokaStatusResponse
)

__all__ = [
    "UserBase", "UserCreate", "UserResponse", "CurrentUser", "GoalsUpdate", "Goals",
    "StreakInfo", "BookStreak", "ChallengeStreak", "StreakOverviewResponse", "SweepResponse",
    "SadhanaLogUpsert", "SadhanaLogResponse", "SadhanaUpsertResponse", "DailySadhanaResponse",
    "CalendarDay", "CalendarResponse", "DashboardBar", "SleepPoint", "DashboardResponse",
    "CatalogBook", "ShelfItem", "LibraryResponse", "AddToShelfRequest", "PrivateBookCreate",
    "ProgressUpdate", "BookStatusResponse",
    "ChallengeCreate", "ShlokaCreate", "ShlokaStatusUpdate", "ShlokaResponse", "ChallengeResponse",
    "ShlokaStatusResponse",
]
