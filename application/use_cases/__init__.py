"""
Application Use Cases for the Vitality workout API.

This package contains application-level use cases that orchestrate domain logic
and coordinate between ports/adapters. Use cases are the entry points for
business operations and contain the application's workflow logic.

Architecture follows Clean Architecture / Hexagonal pattern:
- Use cases orchestrate domain objects and repository ports
- Dependencies are injected via constructors for testability
- Use cases return result dataclasses, not API responses

Usage:
    from application.use_cases import (
        GetWorkoutUseCase,
        ReconcileWorkoutUseCase,
        ReorderExercisesUseCase,
    )

    # Save a workout from its desired state
    save_use_case = ReconcileWorkoutUseCase(workout_repo=workout_repo)
    result = await save_use_case.execute(
        workout_id="5f0c...",
        user_id="9a1b...",
        desired=workout,
    )

    # Reorder exercises
    reorder_use_case = ReorderExercisesUseCase(workout_repo=workout_repo)
    result = await reorder_use_case.execute(
        workout_id="5f0c...",
        user_id="9a1b...",
        exercise_ids=["e2...", "e1..."],
    )
"""

from application.use_cases.get_workout import GetWorkoutResult, GetWorkoutUseCase, ListWorkoutsResult
from application.use_cases.reconcile_workout import (
    PERSISTENCE_FAILED,
    RECONCILIATION_FAILED,
    WORKOUT_NOT_FOUND,
    ReconcileStage,
    ReconcileWorkoutResult,
    ReconcileWorkoutUseCase,
    ReorderExercisesUseCase,
    WorkoutReconciliation,
    reconcile_workout,
)
from application.use_cases.remove_workouts import RemoveWorkoutsResult, RemoveWorkoutsUseCase

__all__ = [
    # GetWorkout
    "GetWorkoutUseCase",
    "GetWorkoutResult",
    "ListWorkoutsResult",
    # ReconcileWorkout
    "ReconcileWorkoutUseCase",
    "ReconcileWorkoutResult",
    "ReconcileStage",
    "WorkoutReconciliation",
    "reconcile_workout",
    "WORKOUT_NOT_FOUND",
    "PERSISTENCE_FAILED",
    "RECONCILIATION_FAILED",
    # ReorderExercises
    "ReorderExercisesUseCase",
    # RemoveWorkouts
    "RemoveWorkoutsUseCase",
    "RemoveWorkoutsResult",
]
