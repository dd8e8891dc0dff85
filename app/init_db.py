from app.database import create_tables
from app.logging_config import configure_logging
from app.utils.logger import get_logger

logger = get_logger(__name__)

def init_db():
    """Create any missing tables. Schema changes go through the Alembic revisions in migrations/."""
    try:
        create_tables()
        logger.info("Database initialization check complete")
    except Exception as e:
        logger.error(f"Error during database initialization: {e}")
        raise

if __name__ == "__main__":
    configure_logging()
    init_db()
