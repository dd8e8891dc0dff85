from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse
from app.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)

def get_user_id_or_ip(request: Request):
    """
    Key requests by the X-User-ID header, falling back to the client address.
    """
    user_id = request.headers.get("X-User-ID")
    if user_id:
        return f"user:{user_id}"
    return f"ip:{get_remote_address(request)}"

# Create limiter instance
limiter = Limiter(
    key_func=get_user_id_or_ip,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    default_limits=["1000/hour"]  # Global default limit
)

# Rate limiting configurations for different endpoints
RATE_LIMITS = {
    # Daily sadhana form submissions
    "sadhana_write": "60/minute",

    # Book and shloka progress taps
    "progress_write": "120/minute",

    # Registration and settings
    "user_write": "30/minute",

    # Scheduled maintenance
    "cron": "10/minute",
}

def get_rate_limit_for_endpoint(endpoint: str) -> str:
    """Get rate limit configuration for specific endpoint."""
    return RATE_LIMITS.get(endpoint, "100/minute")

async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """
    Rate limit exceeded handler with a JSON body and Retry-After header.
    """
    logger.warning(f"Rate limit exceeded for {get_user_id_or_ip(request)} on {request.url.path}")
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}. Please try again later."},
        headers={"Retry-After": "60"},
    )
