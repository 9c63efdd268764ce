"""
Workout aggregate with ordered exercises and graded entries.

These models carry both persisted snapshots (the reconciliation baseline)
and the desired state submitted by a form. They are deliberately loose:
structural rules such as name length or non-negative weights are enforced
by domain.services.record_validation so that an invalid draft can still be
represented and reported field by field.

An empty `id` means the record has not been persisted yet.
"""

from datetime import date as Date
from typing import List, Optional

from pydantic import BaseModel, Field


class ExerciseEntry(BaseModel):
    """
    A single graded entry (set) of an exercise.

    Examples:
        >>> ExerciseEntry(weight=135, repetitions=8)
        >>> ExerciseEntry(minutes=20, text="Zone 2")
    """

    id: str = Field(default="", description="Entry UUID, empty when new")
    exercise_id: str = Field(default="", description="Owning exercise UUID")
    entry_order: int = Field(default=0, ge=0, description="Position within the exercise")

    hours: Optional[int] = None
    minutes: Optional[int] = None
    seconds: Optional[int] = None
    weight: Optional[float] = None
    repetitions: Optional[int] = None
    text: Optional[str] = None

    @property
    def is_new(self) -> bool:
        return not self.id.strip()


class Exercise(BaseModel):
    """An exercise within a workout, holding its entries in order."""

    id: str = Field(default="", description="Exercise UUID, empty when new")
    workout_id: str = Field(default="", description="Owning workout UUID")
    name: str = Field(default="", description="Exercise name")
    exercise_order: int = Field(default=0, ge=0, description="Position within the workout")
    entries: List[ExerciseEntry] = Field(default_factory=list)

    @property
    def is_new(self) -> bool:
        return not self.id.strip()


class Workout(BaseModel):
    """
    Aggregate root: a workout with its exercises and applied tag ids.

    When returned by the persistence layer, exercises are sorted by
    `exercise_order`, entries by `entry_order`, and `tag_ids` is unique.

    Examples:
        >>> workout = Workout(
        ...     id="5f0c...",
        ...     user_id="9a1b...",
        ...     title="Push Day",
        ...     tag_ids=["t1", "t2"],
        ...     exercises=[
        ...         Exercise(name="Bench Press", entries=[ExerciseEntry(weight=135, repetitions=8)]),
        ...     ],
        ... )
    """

    id: str = Field(default="", description="Workout UUID")
    user_id: str = Field(default="", description="Owner UUID")
    title: str = Field(default="", description="Workout title")
    date: Optional[Date] = Field(default=None, description="Day the workout was performed")
    description: str = Field(default="")
    image: str = Field(default="", description="Image URL or bundled image path")
    tag_ids: List[str] = Field(default_factory=list, description="Applied workout tag ids")
    exercises: List[Exercise] = Field(default_factory=list)

    @property
    def exercise_count(self) -> int:
        return len(self.exercises)

    @property
    def entry_count(self) -> int:
        return sum(len(exercise.entries) for exercise in self.exercises)

    def get_exercise(self, exercise_id: str) -> Optional[Exercise]:
        """Find an exercise by id."""
        for exercise in self.exercises:
            if exercise.id == exercise_id:
                return exercise
        return None

    def parent_fields(self) -> dict:
        """Workout columns without nested children or associations."""
        return self.model_dump(exclude={"id", "user_id", "exercises", "tag_ids"})
