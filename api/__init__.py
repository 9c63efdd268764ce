"""
API package for the Vitality workout API.

This package contains:
- deps.py: FastAPI dependency providers for DI
- routers/: API route handlers
"""

# Re-export dependency providers for convenient access
from api.deps import (
    get_settings,
    get_supabase_client,
    get_supabase_client_required,
    get_workout_repo,
    get_get_workout_use_case,
    get_reconcile_workout_use_case,
    get_reorder_exercises_use_case,
    get_remove_workouts_use_case,
    get_current_user,
)

__all__ = [
    # Settings
    "get_settings",
    # Database
    "get_supabase_client",
    "get_supabase_client_required",
    # Repositories
    "get_workout_repo",
    # Use cases
    "get_get_workout_use_case",
    "get_reconcile_workout_use_case",
    "get_reorder_exercises_use_case",
    "get_remove_workouts_use_case",
    # Authentication
    "get_current_user",
]
