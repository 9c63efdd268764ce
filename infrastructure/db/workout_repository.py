"""
Supabase implementation of WorkoutRepository.

This module provides the concrete Supabase implementation for workout persistence.
Reads use one nested select; child writes go through a PostgreSQL stored procedure
so removals, creates, updates and tag changes commit in a single transaction.
"""
import json
import logging
from typing import Any, Dict, List, Optional

from supabase import Client

from application.exceptions import WorkoutPersistenceError
from domain.models import Exercise, ExerciseEntry, Workout, WorkoutOperations

logger = logging.getLogger(__name__)

DEFAULT_RECONCILIATION_RPC = "apply_workout_reconciliation"

WORKOUT_SELECT = (
    "id, user_id, title, date, description, image, "
    "exercises(id, workout_id, name, exercise_order, "
    "exercise_entries(id, exercise_id, entry_order, hours, minutes, seconds, weight, repetitions, text)), "
    "workout_tags(tag_id)"
)


def _row_to_workout(row: Dict[str, Any]) -> Workout:
    """Map a nested workouts row to the domain aggregate, sorted by order."""
    exercises: List[Exercise] = []
    for exercise_row in sorted(row.get("exercises") or [], key=lambda r: r.get("exercise_order") or 0):
        entries = [
            ExerciseEntry(**{k: v for k, v in entry_row.items() if v is not None})
            for entry_row in sorted(
                exercise_row.get("exercise_entries") or [], key=lambda r: r.get("entry_order") or 0
            )
        ]
        exercises.append(
            Exercise(
                id=exercise_row["id"],
                workout_id=exercise_row.get("workout_id") or row["id"],
                name=exercise_row.get("name") or "",
                exercise_order=exercise_row.get("exercise_order") or 0,
                entries=entries,
            )
        )

    tag_ids = list(dict.fromkeys(
        tag_row["tag_id"] for tag_row in row.get("workout_tags") or [] if tag_row.get("tag_id")
    ))

    return Workout(
        id=row["id"],
        user_id=row.get("user_id") or "",
        title=row.get("title") or "",
        date=row.get("date"),
        description=row.get("description") or "",
        image=row.get("image") or "",
        tag_ids=tag_ids,
        exercises=exercises,
    )


class SupabaseWorkoutRepository:
    """
    Supabase implementation of WorkoutRepository protocol.

    All Supabase query logic for workouts is encapsulated here.
    The client is injected via constructor for testability.
    """

    def __init__(self, client: Client, rpc_name: str = DEFAULT_RECONCILIATION_RPC):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected, not global)
            rpc_name: Stored procedure applying reconciled operations
        """
        self._client = client
        self._rpc_name = rpc_name

    def fetch_workout_with_children(
        self,
        workout_id: str,
        user_id: str,
    ) -> Optional[Workout]:
        """Get a workout with exercises, entries and tag ids."""
        try:
            result = (
                self._client.table("workouts")
                .select(WORKOUT_SELECT)
                .eq("id", workout_id)
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to get workout {workout_id}: {e}")
            return None

        if not result.data:
            return None
        return _row_to_workout(result.data[0])

    def apply_reconciled_operations(
        self,
        workout_id: str,
        user_id: str,
        operations: WorkoutOperations,
    ) -> Optional[Workout]:
        """
        Apply reconciled operations atomically.

        Uses a PostgreSQL stored procedure that deletes removed records first,
        then inserts and updates, then applies tag changes. If any statement
        fails, the entire operation is rolled back.

        Raises:
            WorkoutPersistenceError: If the RPC call fails
        """
        try:
            response = self._client.rpc(
                self._rpc_name,
                {
                    "p_workout_id": workout_id,
                    "p_user_id": user_id,
                    "p_operations": json.dumps(operations.model_dump(mode="json")),
                },
            ).execute()

            if response.data is None:
                raise WorkoutPersistenceError("RPC returned no data")
        except Exception as e:
            if isinstance(e, WorkoutPersistenceError):
                raise
            raise WorkoutPersistenceError(f"Workout reconciliation failed: {e}") from e

        logger.info(
            f"Applied operations to workout {workout_id}: "
            f"{len(operations.exercise_ops.creating)} exercises created, "
            f"{len(operations.exercise_ops.removing_ids)} removed, "
            f"{len(operations.tag_ops.adding)} tags added, "
            f"{len(operations.tag_ops.removing)} removed"
        )
        return self.fetch_workout_with_children(workout_id, user_id)

    def create_workout_with_children(
        self,
        user_id: str,
        operations: WorkoutOperations,
    ) -> Optional[Workout]:
        """
        Insert the workout row, then apply its exercises and tags.

        Children go through the same stored procedure as updates. If that
        step fails the inserted row is deleted again before re-raising.

        Raises:
            WorkoutPersistenceError: If the insert or the child write fails
        """
        row = {**operations.model_dump(mode="json")["update"], "user_id": user_id}
        try:
            result = self._client.table("workouts").insert(row).execute()
        except Exception as e:
            raise WorkoutPersistenceError(f"Workout insert failed: {e}") from e

        if not result.data:
            raise WorkoutPersistenceError("Insert returned no data")

        workout_id = result.data[0]["id"]
        logger.info(f"Inserted workout {workout_id} for user {user_id}")

        if not operations.exercise_ops.creating and not operations.tag_ops.adding:
            return self.fetch_workout_with_children(workout_id, user_id)

        try:
            return self.apply_reconciled_operations(
                workout_id,
                user_id,
                operations.model_copy(update={"workout_id": workout_id}),
            )
        except WorkoutPersistenceError:
            self._discard_workout(workout_id, user_id)
            raise

    def _discard_workout(self, workout_id: str, user_id: str) -> None:
        try:
            self._client.table("workouts").delete().eq("id", workout_id).eq("user_id", user_id).execute()
            logger.warning(f"Discarded workout {workout_id} after its children failed to save")
        except Exception as e:
            logger.error(f"Failed to discard partially created workout {workout_id}: {e}")

    def list_workouts(self, user_id: str) -> List[Workout]:
        """Get all workouts of a user with children, newest date first."""
        try:
            result = (
                self._client.table("workouts")
                .select(WORKOUT_SELECT)
                .eq("user_id", user_id)
                .order("date", desc=True)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to get workouts for user {user_id}: {e}")
            return []

        return [_row_to_workout(row) for row in result.data or []]

    def remove_workouts(self, user_id: str, workout_ids: List[str]) -> int:
        """
        Delete workouts owned by user_id.

        Raises:
            WorkoutPersistenceError: If the delete fails
        """
        if not workout_ids:
            return 0

        try:
            result = (
                self._client.table("workouts")
                .delete()
                .in_("id", workout_ids)
                .eq("user_id", user_id)
                .execute()
            )
        except Exception as e:
            raise WorkoutPersistenceError(f"Workout delete failed: {e}") from e

        deleted = len(result.data) if result.data else 0
        if deleted < len(workout_ids):
            logger.warning(
                f"Deleted {deleted} of {len(workout_ids)} requested workouts for user {user_id}"
            )
        else:
            logger.info(f"Deleted {deleted} workouts for user {user_id}")
        return deleted
