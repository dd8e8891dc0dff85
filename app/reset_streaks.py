"""
Run the daily streak reset from a scheduler (cron, k8s CronJob, ...).

    python -m app.reset_streaks [--date YYYY-MM-DD] [--log-level DEBUG]

Exits non-zero when any stream type failed so the scheduler can alert.
"""
import argparse
import sys
import uuid
from datetime import date
from typing import List, Optional

from app.config import settings
from app.database import session_scope
from app.logging_config import configure_logging
from app.services.day_boundary import today_key
from app.services.streak_sweeper import sweep
from app.utils.logger import get_logger, set_request_context, clear_request_context

logger = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reset streaks with no activity since before yesterday.")
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Reference day (YYYY-MM-DD); defaults to today in the day-boundary zone",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL, e.g. DEBUG")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)
    reference_day = args.date or today_key(reference_tz=settings.DAY_BOUNDARY_TZ)

    set_request_context(f"sweep-{uuid.uuid4()}")
    try:
        with session_scope() as db:
            result = sweep(db, reference_day)
    finally:
        clear_request_context()

    logger.info(
        f"Streak reset for {reference_day}: users={result.users_reset} books={result.books_reset} "
        f"challenges={result.challenges_reset} errors={result.errors}"
    )
    return 1 if result.errors else 0


if __name__ == "__main__":
    sys.exit(main())
