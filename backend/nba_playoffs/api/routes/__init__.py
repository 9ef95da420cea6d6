"""
API route modules.
"""

from .simulations_routes import router as simulations_router
from .stats_routes import router as stats_router
from .teams_routes import router as teams_router

__all__ = ["simulations_router", "stats_router", "teams_router"]
