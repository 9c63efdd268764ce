"""
Domain layer for the Vitality workout API.

This package contains pure domain models and services that are independent
of infrastructure concerns (database, API, external services):
- models: workout aggregate, form state, operation payloads, responses
- services: form reducer and the collection/association reconcilers
"""

from domain.models import (
    Exercise,
    ExerciseEntry,
    FieldState,
    FormState,
    Workout,
    WorkoutOperations,
)

__all__ = [
    "Exercise",
    "ExerciseEntry",
    "FieldState",
    "FormState",
    "Workout",
    "WorkoutOperations",
]
