"""
Fake Repository Implementations for Testing.

This package provides in-memory fake implementations of repository interfaces
for fast, isolated testing. No database or external dependencies required.

Features:
- Fakes implement the same Protocol interfaces as real implementations
- Supports seeding with test data
- Supports reset() for test isolation
- Factory functions for common test scenarios

Usage:
    from tests.fakes import FakeWorkoutRepository, create_workout

    repo = FakeWorkoutRepository()
    repo.seed([create_workout(user_id=USER_ID)])
"""
from datetime import date
from typing import List, Optional, Sequence
import uuid

from domain.models import Exercise, ExerciseEntry, Workout

from tests.fakes.workout_repository import FakeWorkoutRepository


# =============================================================================
# Factory Functions
# =============================================================================


def create_workout(
    user_id: str,
    workout_id: Optional[str] = None,
    title: str = "Leg Day",
    exercises: Optional[Sequence[Sequence[dict]]] = None,
    names: Optional[Sequence[str]] = None,
    tag_ids: Optional[List[str]] = None,
) -> Workout:
    """
    Create a persisted-looking workout with uuid ids and contiguous orders.

    Args:
        user_id: Owner id
        workout_id: Workout id (generated if not provided)
        title: Workout title
        exercises: Entry content per exercise, e.g. [[{"weight": 100}], []]
        names: Exercise names (defaults to "Exercise 1", "Exercise 2", ...)
        tag_ids: Applied tag ids

    Returns:
        Workout with exercises and entries
    """
    workout_id = workout_id or str(uuid.uuid4())
    built = []
    for position, entries in enumerate(exercises or []):
        exercise_id = str(uuid.uuid4())
        name = names[position] if names else f"Exercise {position + 1}"
        built.append(
            Exercise(
                id=exercise_id,
                workout_id=workout_id,
                name=name,
                exercise_order=position,
                entries=[
                    ExerciseEntry(
                        **content,
                        id=str(uuid.uuid4()),
                        exercise_id=exercise_id,
                        entry_order=entry_position,
                    )
                    for entry_position, content in enumerate(entries)
                ],
            )
        )
    return Workout(
        id=workout_id,
        user_id=user_id,
        title=title,
        date=date.today(),
        description="",
        image="/workouts/legs.png",
        tag_ids=list(tag_ids or []),
        exercises=built,
    )


def create_workout_repo(user_id: str, workouts: Optional[List[Workout]] = None) -> FakeWorkoutRepository:
    """Create a FakeWorkoutRepository seeded with workouts (one by default)."""
    repo = FakeWorkoutRepository()
    repo.seed(workouts if workouts is not None else [create_workout(user_id=user_id)])
    return repo


__all__ = [
    "FakeWorkoutRepository",
    "create_workout",
    "create_workout_repo",
]
