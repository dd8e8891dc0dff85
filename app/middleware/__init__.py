# Middleware package for the Sadhana API

from .request_id import RequestIDMiddleware
from .rate_limit import limiter, get_rate_limit_for_endpoint, rate_limit_exceeded_handler

__all__ = [
    "RequestIDMiddleware",
    "limiter",
    "get_rate_limit_for_endpoint",
    "rate_limit_exceeded_handler",
]
