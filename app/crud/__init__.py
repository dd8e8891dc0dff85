from app.crud.user import (
    get_user,
    get_user_by_email,
    get_user_for_update,
    create_user,
    update_goals,
)
from app.crud.sadhana import (
    get_daily_log,
    get_logs_between,
    get_recent_logs,
    upsert_sadhana_log,
)
from app.crud.shlokas import (
    get_challenges,
    get_challenge,
    create_challenge,
    delete_challenge,
    add_shloka,
    update_shloka_status,
    delete_shloka,
)
from app.crud.streak import get_streak_overview, streak_info, state_info
from app.crud.books import BooksCRUD

__all__ = [
    # User operations
    "get_user",
    "get_user_by_email",
    "get_user_for_update",
    "create_user",
    "update_goals",

    # Sadhana log operations
    "get_daily_log",
    "get_logs_between",
    "get_recent_logs",
    "upsert_sadhana_log",

    # Shloka challenge operations
    "get_challenges",
    "get_challenge",
    "create_challenge",
    "delete_challenge",
    "add_shloka",
    "update_shloka_status",
    "delete_shloka",

    # Streak operations
    "get_streak_overview",
    "streak_info",
    "state_info",

    # Book operations
    "BooksCRUD",
]
