"""
Domain models for the Vitality workout API.

This package contains pure domain models that are independent of
infrastructure concerns (database, API, external services):
- Workout: aggregate root with ordered exercises and applied tag ids
- Exercise / ExerciseEntry: ordered child records
- FieldState / FormState: immutable editable-form snapshots
- CollectionOperations / AssociationOperations / WorkoutOperations:
  reconciliation output handed to persistence
- ServiceResponse: Success / Error / Failure envelope

Usage:
    >>> from domain.models import Workout, Exercise, ExerciseEntry

    >>> workout = Workout(
    ...     title="Leg Day",
    ...     exercises=[
    ...         Exercise(
    ...             name="Squat",
    ...             entries=[ExerciseEntry(weight=225, repetitions=5)],
    ...         )
    ...     ],
    ... )
"""

from domain.models.form_state import (
    FieldData,
    FieldState,
    FieldUpdate,
    FormState,
    PlainFieldData,
    SelectableFieldData,
    VerifiableFieldData,
)
from domain.models.operations import (
    AssociationOperations,
    CollectionOperations,
    RecordUpdate,
    WorkoutOperations,
)
from domain.models.response import (
    GENERIC_FAILURE_MESSAGE,
    ResponseBody,
    ServiceResponse,
    send_error_message,
    send_failure_message,
    send_success_message,
)
from domain.models.workout import Exercise, ExerciseEntry, Workout

__all__ = [
    # Workout aggregate
    "Workout",
    "Exercise",
    "ExerciseEntry",
    # Form state
    "FieldState",
    "FieldUpdate",
    "FieldData",
    "FormState",
    "PlainFieldData",
    "VerifiableFieldData",
    "SelectableFieldData",
    # Reconciliation payloads
    "RecordUpdate",
    "CollectionOperations",
    "AssociationOperations",
    "WorkoutOperations",
    # Responses
    "ServiceResponse",
    "ResponseBody",
    "GENERIC_FAILURE_MESSAGE",
    "send_success_message",
    "send_error_message",
    "send_failure_message",
]
