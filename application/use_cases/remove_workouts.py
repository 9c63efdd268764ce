"""
Remove Workouts Use Case.

Bulk-deletes workouts owned by the current user. Exercises, entries and tag
associations are removed by the database cascade.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from starlette.concurrency import run_in_threadpool

from application.ports import WorkoutRepository
from domain.models import ServiceResponse, send_error_message, send_failure_message, send_success_message
from domain.services.record_validation import is_uuid

logger = logging.getLogger(__name__)


@dataclass
class RemoveWorkoutsResult:
    """Result of removing workouts."""
    success: bool
    deleted: int = 0
    error: Optional[str] = None
    failed: bool = False
    validation_errors: Dict[str, List[str]] = field(default_factory=dict)

    def to_response(self) -> ServiceResponse:
        if self.success:
            suffix = "" if self.deleted == 1 else "s"
            return send_success_message(f"Deleted {self.deleted} workout{suffix}", self.deleted)
        if self.failed:
            return send_failure_message(self.error)
        return send_error_message(self.error or "Invalid workout ids", self.validation_errors)


class RemoveWorkoutsUseCase:
    """Use case for deleting several workouts at once."""

    def __init__(self, workout_repo: WorkoutRepository):
        self._workout_repo = workout_repo

    async def execute(self, user_id: str, workout_ids: List[str]) -> RemoveWorkoutsResult:
        """
        Delete the given workouts; ids the user does not own are skipped.

        Args:
            user_id: Current user ID (for authorization)
            workout_ids: Workout UUIDs to delete

        Returns:
            RemoveWorkoutsResult with the number of deleted workouts
        """
        invalid = {
            f"workout_ids.{position}": ["ID for workout must be in UUID format"]
            for position, workout_id in enumerate(workout_ids)
            if not is_uuid(workout_id)
        }
        if invalid:
            return RemoveWorkoutsResult(
                success=False,
                error="Invalid workout ids",
                validation_errors=invalid,
            )

        unique_ids = list(dict.fromkeys(workout_ids))
        try:
            deleted = await run_in_threadpool(self._workout_repo.remove_workouts, user_id, unique_ids)
        except Exception as e:
            logger.exception(f"Error removing workouts for user {user_id}: {e}")
            return RemoveWorkoutsResult(success=False, error=str(e), failed=True)

        logger.info(f"Removed {deleted} workouts for user {user_id}")
        return RemoveWorkoutsResult(success=True, deleted=deleted)
