"""
Fake Workout Repository for testing.

This module provides an in-memory implementation of WorkoutRepository
for fast, isolated testing without database dependencies. Reconciled
operations are applied the way the stored procedure applies them:
removals first, then updates and creates, then tag changes.
"""
from datetime import date
from typing import Dict, List, Optional
import uuid

from domain.models import Exercise, ExerciseEntry, Workout, WorkoutOperations
from domain.models.operations import CollectionOperations


def _apply_entries(exercise: Exercise, ops: CollectionOperations) -> Exercise:
    entries = {entry.id: entry for entry in exercise.entries}
    for entry_id in ops.removing_ids:
        entries.pop(entry_id, None)
    for update in ops.updating:
        entries[update.id] = entries[update.id].model_copy(update=update.data)
    for record in ops.creating:
        entry = ExerciseEntry(**{**record, "id": str(uuid.uuid4()), "exercise_id": exercise.id})
        entries[entry.id] = entry
    ordered = sorted(entries.values(), key=lambda e: e.entry_order)
    return exercise.model_copy(update={"entries": ordered})


class FakeWorkoutRepository:
    """
    In-memory fake implementation of WorkoutRepository for testing.

    Stores workouts in a dict keyed by workout ID. Supports seeding with
    test data, failure injection and resets between tests.

    Usage:
        repo = FakeWorkoutRepository()
        repo.seed([create_workout(user_id="...")])
        repo.fail_with = RuntimeError("db down")
    """

    def __init__(self):
        """Initialize with empty storage."""
        self._workouts: Dict[str, Workout] = {}
        self.applied: List[WorkoutOperations] = []
        self.fail_with: Optional[Exception] = None
        self.fetch_calls = 0

    def reset(self) -> None:
        """Clear all stored workouts and recorded calls."""
        self._workouts.clear()
        self.applied.clear()
        self.fail_with = None
        self.fetch_calls = 0

    def seed(self, workouts: List[Workout]) -> None:
        """
        Seed the repository with test data.

        Args:
            workouts: Workouts with ids and user ids set.
        """
        for workout in workouts:
            self._workouts[workout.id] = workout.model_copy(deep=True)

    def get_all(self) -> List[Workout]:
        """Get all stored workouts (test helper)."""
        return list(self._workouts.values())

    # =========================================================================
    # WorkoutRepository Protocol Methods
    # =========================================================================

    def fetch_workout_with_children(
        self,
        workout_id: str,
        user_id: str,
    ) -> Optional[Workout]:
        """Get a deep copy of a stored workout owned by user_id."""
        self.fetch_calls += 1
        workout = self._workouts.get(workout_id)
        if workout is None or workout.user_id != user_id:
            return None
        return workout.model_copy(deep=True)

    def apply_reconciled_operations(
        self,
        workout_id: str,
        user_id: str,
        operations: WorkoutOperations,
    ) -> Optional[Workout]:
        """Apply operations to the stored workout, or raise `fail_with`."""
        if self.fail_with is not None:
            raise self.fail_with

        workout = self.fetch_workout_with_children(workout_id, user_id)
        if workout is None:
            return None
        self.applied.append(operations)

        exercise_ops = operations.exercise_ops
        exercises = {exercise.id: exercise for exercise in workout.exercises}
        for exercise_id in exercise_ops.removing_ids:
            exercises.pop(exercise_id, None)

        for exercise_id, entry_ops in operations.entry_ops.items():
            if exercise_id in exercises:
                exercises[exercise_id] = _apply_entries(exercises[exercise_id], entry_ops)

        for update in exercise_ops.updating:
            exercises[update.id] = exercises[update.id].model_copy(update=update.data)

        for record in exercise_ops.creating:
            exercise_id = str(uuid.uuid4())
            entries = [
                ExerciseEntry(**{**entry, "id": str(uuid.uuid4()), "exercise_id": exercise_id})
                for entry in record.get("entries", [])
            ]
            fields = {k: v for k, v in record.items() if k != "entries"}
            exercises[exercise_id] = Exercise(
                **fields, id=exercise_id, workout_id=workout_id, entries=entries
            )

        tag_ops = operations.tag_ops
        tag_ids = [tag_id for tag_id in workout.tag_ids if tag_id not in tag_ops.removing]
        tag_ids.extend(tag_id for tag_id in tag_ops.adding if tag_id not in tag_ids)

        saved = workout.model_copy(
            update={
                **operations.update,
                "exercises": sorted(exercises.values(), key=lambda e: e.exercise_order),
                "tag_ids": tag_ids,
            }
        )
        self._workouts[workout_id] = saved
        return saved.model_copy(deep=True)

    def create_workout_with_children(
        self,
        user_id: str,
        operations: WorkoutOperations,
    ) -> Optional[Workout]:
        """Insert a workout under a generated id, then apply its children."""
        if self.fail_with is not None:
            raise self.fail_with

        workout_id = str(uuid.uuid4())
        self._workouts[workout_id] = Workout(id=workout_id, user_id=user_id, **operations.update)
        return self.apply_reconciled_operations(
            workout_id,
            user_id,
            operations.model_copy(update={"workout_id": workout_id}),
        )

    def list_workouts(self, user_id: str) -> List[Workout]:
        """Workouts owned by user_id, newest date first."""
        owned = [w for w in self._workouts.values() if w.user_id == user_id]
        owned.sort(key=lambda w: w.date or date.min, reverse=True)
        return [w.model_copy(deep=True) for w in owned]

    def remove_workouts(self, user_id: str, workout_ids: List[str]) -> int:
        """Delete owned workouts, or raise `fail_with`."""
        if self.fail_with is not None:
            raise self.fail_with

        deleted = 0
        for workout_id in dict.fromkeys(workout_ids):
            workout = self._workouts.get(workout_id)
            if workout is not None and workout.user_id == user_id:
                del self._workouts[workout_id]
                deleted += 1
        return deleted
