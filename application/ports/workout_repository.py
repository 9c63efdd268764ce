"""
Workout Repository Interface (Port).

This module defines the abstract interface for workout persistence operations.
Implementations may use Supabase, in-memory storage, or other backends.
"""
from typing import List, Optional, Protocol

from domain.models import Workout, WorkoutOperations


class WorkoutRepository(Protocol):
    """
    Abstract interface for workout persistence operations.

    Domain types are used instead of database-specific types to maintain
    clean architecture boundaries. Methods are synchronous; async callers
    run them in a thread pool.
    """

    def fetch_workout_with_children(
        self,
        workout_id: str,
        user_id: str,
    ) -> Optional[Workout]:
        """
        Get a workout with its exercises, entries and tag ids.

        Args:
            workout_id: Workout UUID
            user_id: Owner UUID (for authorization)

        Returns:
            Workout with exercises sorted by exercise_order, entries sorted by
            entry_order and unique tag_ids, or None if not found/unauthorized
        """
        ...

    def apply_reconciled_operations(
        self,
        workout_id: str,
        user_id: str,
        operations: WorkoutOperations,
    ) -> Optional[Workout]:
        """
        Apply a reconciled operation payload atomically.

        Removals are applied before creates and updates, and the whole
        payload either commits or leaves the stored workout unchanged.

        Args:
            workout_id: Workout UUID
            user_id: Owner UUID (for authorization)
            operations: Payload produced by reconciliation

        Returns:
            The workout as persisted after the write, or None if the workout
            no longer exists

        Raises:
            WorkoutPersistenceError: If the write fails
        """
        ...

    def create_workout_with_children(
        self,
        user_id: str,
        operations: WorkoutOperations,
    ) -> Optional[Workout]:
        """
        Insert a new workout from a payload reconciled against an empty baseline.

        `operations.update` holds the workout columns, `exercise_ops.creating`
        the exercises (each carrying its entries) and `tag_ops.adding` the tags.

        Args:
            user_id: Owner UUID
            operations: Payload produced by reconciliation, with an empty workout_id

        Returns:
            The inserted workout with its generated ids, or None if nothing
            was inserted

        Raises:
            WorkoutPersistenceError: If the insert fails
        """
        ...

    def list_workouts(
        self,
        user_id: str,
    ) -> List[Workout]:
        """
        Get every workout of a user with children, newest date first.

        Args:
            user_id: Owner UUID

        Returns:
            Workouts (empty list when the user has none or the read fails)
        """
        ...

    def remove_workouts(
        self,
        user_id: str,
        workout_ids: List[str],
    ) -> int:
        """
        Delete workouts owned by user_id; children are removed by cascade.

        Ids the user does not own are skipped.

        Returns:
            Number of workouts deleted

        Raises:
            WorkoutPersistenceError: If the delete fails
        """
        ...
