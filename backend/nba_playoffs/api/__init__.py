"""
API module.
"""

from .routes import simulations_router, stats_router, teams_router

__all__ = [
    "simulations_router",
    "stats_router",
    "teams_router",
]
