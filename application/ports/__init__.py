"""
Repository Interfaces (Ports) for the Vitality workout API.

This package defines abstract interfaces that decouple domain logic from
infrastructure (database, external services). Implementations are provided
in the infrastructure layer.

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the domain needs)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import WorkoutRepository

    class WorkoutService:
        def __init__(self, workout_repo: WorkoutRepository):
            self.workout_repo = workout_repo
"""

# Workout persistence
from application.ports.workout_repository import WorkoutRepository

__all__ = [
    "WorkoutRepository",
]
