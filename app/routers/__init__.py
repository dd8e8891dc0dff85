# API Routers
from app.routers import users, sadhana, streaks, books, challenges, cron

__all__ = ["users", "sadhana", "streaks", "books", "challenges", "cron"]
