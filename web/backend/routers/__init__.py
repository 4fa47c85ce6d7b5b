"""API route handlers."""

from .cache import router as cache_router
from .ranking import router as ranking_router
from .metrics import router as metrics_router
