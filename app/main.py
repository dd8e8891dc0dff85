from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from app.config import settings
from app.database import create_tables, get_pool_status
from app.logging_config import configure_logging
from app.middleware.rate_limit import limiter, rate_limit_exceeded_handler
from app.middleware.request_id import RequestIDMiddleware
from app.routers import users, sadhana, streaks, books, challenges, cron
from app.utils.exceptions import SadhanaError
from app.utils.logger import get_logger

configure_logging()
logger = get_logger(__name__)

API_VERSION = "1.0.0"


def _docs_urls() -> dict:
    """Interactive docs are only served in DEBUG mode."""
    if settings.DEBUG:
        return {"docs_url": "/docs", "redoc_url": "/redoc", "openapi_url": "/openapi.json"}
    return {"docs_url": None, "redoc_url": None, "openapi_url": None}


app = FastAPI(
    title="Sadhana Tracker API",
    description="Daily sadhana logging with reading and shloka streaks",
    version=API_VERSION,
    **_docs_urls()
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


@app.exception_handler(SadhanaError)
async def sadhana_error_handler(request: Request, exc: SadhanaError):
    """Turn domain errors raised below the routers into JSON responses."""
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} on {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Added last so it wraps CORS and sees every request first
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)

for module in (users, sadhana, streaks, books, challenges, cron):
    app.include_router(module.router)


@app.on_event("startup")
async def startup_event():
    create_tables()
    logger.info(
        f"Sadhana Tracker API {API_VERSION} started "
        f"(debug={settings.DEBUG}, day boundary={settings.DAY_BOUNDARY_TZ}, backfill={settings.STREAK_ALLOW_BACKFILL})"
    )


@app.get("/")
async def root():
    return {"message": "Sadhana Tracker API", "version": API_VERSION}


@app.get("/health")
async def health_check():
    """Liveness probe with connection pool counters."""
    return {"status": "healthy", "service": "sadhana-api", "database": get_pool_status()}
