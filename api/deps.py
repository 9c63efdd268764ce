"""
FastAPI Dependency Providers for the Vitality workout API.

This module provides FastAPI dependency injection functions that return
interface types (Protocols) rather than concrete implementations. This
enables clean separation of concerns and easy testing with fake implementations.

Architecture:
- Settings and Supabase client are cached per-process (lru_cache)
- Repository and use case providers create new instances per-request
- Auth providers wrap backend.auth

Usage in routers:
    from api.deps import get_current_user, get_reconcile_workout_use_case
    from application.use_cases import ReconcileWorkoutUseCase

    @router.put("/workouts/{workout_id}")
    async def save_workout(
        workout_id: str,
        user_id: str = Depends(get_current_user),
        use_case: ReconcileWorkoutUseCase = Depends(get_reconcile_workout_use_case),
    ):
        ...

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_workout_repo] = lambda: FakeWorkoutRepository()
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException
from supabase import Client, create_client

# Protocol types (interfaces)
from application.ports import WorkoutRepository

# Use cases
from application.use_cases import (
    GetWorkoutUseCase,
    ReconcileWorkoutUseCase,
    RemoveWorkoutsUseCase,
    ReorderExercisesUseCase,
)

# Concrete implementations
from infrastructure import SupabaseWorkoutRepository

from backend.settings import Settings, get_settings as _get_settings
from backend.auth import get_current_user as _get_current_user


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.
    Use this as a FastAPI dependency for settings access.
    """
    return _get_settings()


# =============================================================================
# Supabase Client Provider
# =============================================================================


@lru_cache
def get_supabase_client() -> Optional[Client]:
    """
    Get Supabase client instance (cached).

    Creates a Supabase client using credentials from settings.
    Returns None if credentials are not configured.
    """
    settings = _get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        return None

    return create_client(settings.supabase_url, settings.supabase_key)


def get_supabase_client_required() -> Client:
    """
    Get Supabase client instance, raising if not configured.

    Raises:
        HTTPException: 503 if Supabase is not configured
    """
    client = get_supabase_client()
    if client is None:
        raise HTTPException(
            status_code=503,
            detail="Database not available. Supabase credentials not configured.",
        )
    return client


# =============================================================================
# Repository Providers
# =============================================================================


def get_workout_repo(
    client: Client = Depends(get_supabase_client_required),
    settings: Settings = Depends(get_settings),
) -> WorkoutRepository:
    """
    Get workout repository instance.

    The return type is the Protocol to enable easy mocking.
    """
    return SupabaseWorkoutRepository(client, rpc_name=settings.workout_reconciliation_rpc)


# =============================================================================
# Use Case Providers
# =============================================================================


def get_get_workout_use_case(
    workout_repo: WorkoutRepository = Depends(get_workout_repo),
) -> GetWorkoutUseCase:
    return GetWorkoutUseCase(workout_repo=workout_repo)


def get_reconcile_workout_use_case(
    workout_repo: WorkoutRepository = Depends(get_workout_repo),
    settings: Settings = Depends(get_settings),
) -> ReconcileWorkoutUseCase:
    """Get the reconcile-and-save use case with configured limits."""
    return ReconcileWorkoutUseCase(
        workout_repo=workout_repo,
        max_exercises=settings.max_exercises_per_workout,
        max_entries=settings.max_entries_per_exercise,
    )


def get_reorder_exercises_use_case(
    workout_repo: WorkoutRepository = Depends(get_workout_repo),
) -> ReorderExercisesUseCase:
    return ReorderExercisesUseCase(workout_repo=workout_repo)


def get_remove_workouts_use_case(
    workout_repo: WorkoutRepository = Depends(get_workout_repo),
) -> RemoveWorkoutsUseCase:
    return RemoveWorkoutsUseCase(workout_repo=workout_repo)


# =============================================================================
# Authentication Providers
# =============================================================================


async def get_current_user(
    authorization: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
) -> str:
    """
    Get the current authenticated user ID.

    Wraps backend.auth.get_current_user for dependency injection.
    Supports session JWT (HS256) and API key authentication.

    Raises:
        HTTPException: 401 if authentication fails
    """
    return await _get_current_user(
        authorization=authorization,
        x_api_key=x_api_key,
    )


# =============================================================================
# Exports
# =============================================================================

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
    # Auth
    "get_current_user",
]
