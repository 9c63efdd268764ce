"""
Application services: stateful sessions that coordinate use cases.
"""

from application.services.workout_editor import SaveStatus, WorkoutEditor, workout_fields

__all__ = [
    "SaveStatus",
    "WorkoutEditor",
    "workout_fields",
]
