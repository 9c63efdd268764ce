"""
Router package for the Vitality workout API.

This package contains all API routers organized by domain:
- health: Health check endpoint
- workouts: Workout read, reconcile-and-save, preview and reorder
"""

from api.routers.health import router as health_router
from api.routers.workouts import router as workouts_router

__all__ = [
    "health_router",
    "workouts_router",
]
