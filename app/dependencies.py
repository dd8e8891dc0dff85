from datetime import datetime, timezone as dt_timezone


def get_now() -> datetime:
    """
    FastAPI dependency returning the current UTC time.

    This is the only place request handlers read the clock; the value is passed
    down so every day-boundary decision in one request agrees.
    """
    return datetime.now(dt_timezone.utc)

