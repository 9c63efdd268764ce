"""
Get Workout Use Case.

This use case handles retrieving a workout with its exercises, entries and
tag ids from the database.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from starlette.concurrency import run_in_threadpool

from application.ports import WorkoutRepository
from domain.models import Workout


@dataclass
class GetWorkoutResult:
    """Result of getting a single workout."""
    success: bool
    workout: Optional[Workout] = None
    error: Optional[str] = None


@dataclass
class ListWorkoutsResult:
    """Result of listing a user's workouts."""
    success: bool
    workouts: List[Workout] = field(default_factory=list)
    count: int = 0


class GetWorkoutUseCase:
    """Use case for reading workout snapshots."""

    def __init__(self, workout_repo: WorkoutRepository):
        """
        Initialize with required dependencies.

        Args:
            workout_repo: Repository for workout persistence
        """
        self._workout_repo = workout_repo

    async def get_workout(
        self,
        workout_id: str,
        user_id: str,
    ) -> GetWorkoutResult:
        """
        Get a single workout by ID.

        Args:
            workout_id: ID of the workout to retrieve
            user_id: Current user ID (for authorization)

        Returns:
            GetWorkoutResult with the workout snapshot or error
        """
        workout = await run_in_threadpool(
            self._workout_repo.fetch_workout_with_children, workout_id, user_id
        )

        if workout:
            return GetWorkoutResult(
                success=True,
                workout=workout,
            )
        else:
            return GetWorkoutResult(
                success=False,
                error="Workout not found or not owned by user",
            )

    async def list_workouts(self, user_id: str) -> ListWorkoutsResult:
        """
        List a user's workouts with children, newest date first.

        Args:
            user_id: Current user ID

        Returns:
            ListWorkoutsResult with the workouts and their count
        """
        workouts = await run_in_threadpool(self._workout_repo.list_workouts, user_id)

        return ListWorkoutsResult(
            success=True,
            workouts=workouts,
            count=len(workouts),
        )
