"""
ReconcileWorkout Use Case.

Orchestrates saving a workout from its full desired nested state:
the workout's own fields, its ordered exercises, each exercise's ordered
entries, and its tag ids.

Workflow:
1. Validate parent fields, collecting every field error
2. Load the baseline via repository (unless supplied)
3. Reconcile exercises, then entries per exercise, then tags
   (fail-fast on the first failure at any level)
4. Assemble one WorkoutOperations payload
5. Persist atomically (off the event loop)
6. Return ReconcileWorkoutResult

Stages: idle -> validating -> rejected | reconciled -> persisting ->
committed | failed.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from starlette.concurrency import run_in_threadpool

from application.ports import WorkoutRepository
from domain.models import (
    AssociationOperations,
    CollectionOperations,
    ServiceResponse,
    Workout,
    WorkoutOperations,
    send_error_message,
    send_failure_message,
    send_success_message,
)
from domain.services.association_reconciler import reconcile_associations
from domain.services.collection_reconciler import (
    INTEGRITY_CONFLICT,
    INVALID_FIELDS,
    CollectionReconciliation,
    reconcile_collection,
)
from domain.services.record_validation import (
    ENTRY_KIND,
    EXERCISE_KIND,
    validate_workout_fields,
)

logger = logging.getLogger(__name__)

WORKOUT_NOT_FOUND = "WORKOUT_NOT_FOUND"
PERSISTENCE_FAILED = "PERSISTENCE_FAILED"
RECONCILIATION_FAILED = "RECONCILIATION_FAILED"

UPDATE_FIELDS = {"title", "date", "description", "image"}


class ReconcileStage(str, Enum):
    """Lifecycle of one save attempt."""

    IDLE = "idle"
    VALIDATING = "validating"
    REJECTED = "rejected"
    RECONCILED = "reconciled"
    PERSISTING = "persisting"
    COMMITTED = "committed"
    FAILED = "failed"


@dataclass
class ReconcileWorkoutResult:
    """Result of the ReconcileWorkout use case execution."""

    success: bool
    stage: ReconcileStage
    workout: Optional[Workout] = None
    operations: Optional[WorkoutOperations] = None
    error: Optional[str] = None
    code: Optional[str] = None
    validation_errors: Dict[str, List[str]] = field(default_factory=dict)
    created: bool = False

    @property
    def not_found(self) -> bool:
        return self.code == WORKOUT_NOT_FOUND

    def to_response(self) -> ServiceResponse:
        """Convert to the Success / Error / Failure envelope."""
        if self.success:
            data = self.workout.model_dump(mode="json") if self.workout is not None else None
            message = "Added new workout" if self.created else "Successfully updated workout"
            return send_success_message(message, data)
        if self.stage == ReconcileStage.FAILED:
            return send_failure_message(self.error)
        return send_error_message(self.error or "Invalid workout fields", self.validation_errors)


@dataclass
class WorkoutReconciliation:
    """Pure reconciliation outcome, before persistence."""

    operations: Optional[WorkoutOperations] = None
    error: Optional[str] = None
    code: Optional[str] = None
    field_errors: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.error is None


def _prefixed_errors(prefix: str, result: CollectionReconciliation) -> Dict[str, List[str]]:
    """Attribute a collection failure to `prefix.<position>[.<field>]` keys."""
    record_key = f"{prefix}.{result.position}" if result.position is not None else prefix
    if result.field_errors:
        return {f"{record_key}.{name}": messages for name, messages in result.field_errors.items()}
    return {record_key: [result.error]}


def reconcile_workout(
    workout_id: str,
    desired: Workout,
    baseline: Workout,
    update: Optional[Dict[str, Any]] = None,
) -> WorkoutReconciliation:
    """
    Reconcile a desired workout against its persisted baseline.

    Pure and side-effect free, so it may be recomputed for live previews.

    Args:
        workout_id: Id of the workout being saved
        desired: Full desired nested state
        baseline: Last persisted state
        update: Validated workout columns to write

    Returns:
        WorkoutReconciliation with the combined payload or the first failure
    """
    # Exercises
    exercise_records = [
        {**exercise.model_dump(exclude={"entries"}), "workout_id": workout_id}
        for exercise in desired.exercises
    ]
    exercises = reconcile_collection(
        baseline.exercises, exercise_records, EXERCISE_KIND, workout_id
    )
    if not exercises.success:
        return WorkoutReconciliation(
            error=exercises.error,
            code=exercises.code,
            field_errors=_prefixed_errors("exercises", exercises),
        )

    # Entries, per desired exercise
    entry_ops: Dict[str, CollectionOperations] = {}
    new_exercise_entries: List[List[Dict[str, Any]]] = []
    for position, exercise in enumerate(desired.exercises):
        stored_exercise = None if exercise.is_new else baseline.get_exercise(exercise.id)
        stored_entries = stored_exercise.entries if stored_exercise is not None else []
        entry_records = [
            {**entry.model_dump(), "exercise_id": exercise.id} for entry in exercise.entries
        ]
        entries = reconcile_collection(stored_entries, entry_records, ENTRY_KIND, exercise.id)
        if not entries.success:
            return WorkoutReconciliation(
                error=entries.error,
                code=entries.code,
                field_errors=_prefixed_errors(f"exercises.{position}.entries", entries),
            )
        if exercise.is_new:
            new_exercise_entries.append(entries.operations.creating)
        else:
            entry_ops[exercise.id] = entries.operations

    # New exercises carry their entries; `creating` keeps desired order
    creating = [
        {**record, "entries": new_entries}
        for record, new_entries in zip(exercises.operations.creating, new_exercise_entries)
    ]
    exercise_ops = exercises.operations.model_copy(update={"creating": creating})

    # Tags
    tag_ops = reconcile_associations(baseline.tag_ids, desired.tag_ids)

    return WorkoutReconciliation(
        operations=WorkoutOperations(
            workout_id=workout_id,
            update=dict(update or {}),
            exercise_ops=exercise_ops,
            entry_ops=entry_ops,
            tag_ops=tag_ops,
        )
    )


class ReconcileWorkoutUseCase:
    """
    Use case for saving a workout from its full desired state.

    Dependencies are injected via constructor for testability.

    Usage:
        >>> use_case = ReconcileWorkoutUseCase(workout_repo=repo)
        >>> result = await use_case.execute(
        ...     workout_id="5f0c...",
        ...     user_id="9a1b...",
        ...     desired=Workout(title="Leg Day", ...),
        ... )
        >>> if result.success:
        ...     print(result.workout.exercise_count)
    """

    def __init__(
        self,
        workout_repo: WorkoutRepository,
        max_exercises: Optional[int] = None,
        max_entries: Optional[int] = None,
    ) -> None:
        """
        Initialize the use case with required dependencies.

        Args:
            workout_repo: Repository for workout persistence operations
            max_exercises: Optional limit on exercises per workout
            max_entries: Optional limit on entries per exercise
        """
        self._workout_repo = workout_repo
        self._max_exercises = max_exercises
        self._max_entries = max_entries

    def _validate(self, workout_id: str, user_id: str, desired: Workout):
        parent = {
            **desired.model_dump(exclude={"exercises"}),
            "id": workout_id,
            "user_id": user_id,
        }
        validated, errors = validate_workout_fields(parent, is_new=not workout_id)

        if self._max_exercises is not None and desired.exercise_count > self._max_exercises:
            errors.setdefault("exercises", []).append(
                f"A workout can have at most {self._max_exercises} exercises"
            )
        if self._max_entries is not None:
            for position, exercise in enumerate(desired.exercises):
                if len(exercise.entries) > self._max_entries:
                    errors.setdefault(f"exercises.{position}.entries", []).append(
                        f"An exercise can have at most {self._max_entries} entries"
                    )
        return validated, errors

    async def _load_baseline(self, workout_id: str, user_id: str) -> Optional[Workout]:
        return await run_in_threadpool(
            self._workout_repo.fetch_workout_with_children, workout_id, user_id
        )

    async def preview(
        self,
        workout_id: str,
        user_id: str,
        desired: Workout,
        baseline: Optional[Workout] = None,
    ) -> ReconcileWorkoutResult:
        """
        Validate and reconcile without persisting.

        Returns a `reconciled` result carrying the operation payload, or the
        same rejection a save would produce.
        """
        try:
            return await self._reconcile(workout_id, user_id, desired, baseline)
        except Exception as e:
            logger.exception(f"Error reconciling workout {workout_id}: {e}")
            return ReconcileWorkoutResult(
                success=False,
                stage=ReconcileStage.FAILED,
                error=str(e),
                code=RECONCILIATION_FAILED,
            )

    async def _reconcile(
        self,
        workout_id: str,
        user_id: str,
        desired: Workout,
        baseline: Optional[Workout],
    ) -> ReconcileWorkoutResult:
        # Step 1: Validate parent fields (collect all errors)
        validated, errors = self._validate(workout_id, user_id, desired)
        if errors:
            logger.warning(f"Rejected workout {workout_id}: invalid fields {sorted(errors)}")
            return ReconcileWorkoutResult(
                success=False,
                stage=ReconcileStage.REJECTED,
                error="Invalid workout fields",
                code=INVALID_FIELDS,
                validation_errors=errors,
            )

        # Step 2: Load baseline; a new workout is reconciled against an empty one
        if baseline is None:
            if workout_id:
                baseline = await self._load_baseline(workout_id, user_id)
            else:
                baseline = Workout(user_id=user_id)
        if baseline is None:
            return ReconcileWorkoutResult(
                success=False,
                stage=ReconcileStage.REJECTED,
                error="Workout not found or not owned by user",
                code=WORKOUT_NOT_FOUND,
            )

        # Step 3: Reconcile nested collections and tags
        reconciliation = reconcile_workout(
            workout_id,
            desired,
            baseline,
            update=validated.model_dump(include=UPDATE_FIELDS),
        )
        if not reconciliation.success:
            logger.warning(
                f"Rejected workout {workout_id} ({reconciliation.code}): {reconciliation.error}"
            )
            return ReconcileWorkoutResult(
                success=False,
                stage=ReconcileStage.REJECTED,
                error=reconciliation.error,
                code=reconciliation.code,
                validation_errors=reconciliation.field_errors,
            )

        return ReconcileWorkoutResult(
            success=True,
            stage=ReconcileStage.RECONCILED,
            operations=reconciliation.operations,
        )

    async def execute(
        self,
        workout_id: str,
        user_id: str,
        desired: Workout,
        baseline: Optional[Workout] = None,
    ) -> ReconcileWorkoutResult:
        """
        Execute the reconcile-and-save workflow.

        Args:
            workout_id: ID of the workout to save; empty inserts a new workout
            user_id: Owner ID for authorization
            desired: Full desired nested state
            baseline: Persisted state to diff against; loaded when omitted

        Returns:
            ReconcileWorkoutResult in the committed, rejected or failed stage
        """
        logger.info(f"Saving workout {workout_id or '(new)'} for user {user_id}")
        result = await self.preview(workout_id, user_id, desired, baseline)
        if result.stage != ReconcileStage.RECONCILED:
            return result
        return await persist_operations(self._workout_repo, workout_id, user_id, result.operations)

    async def create(self, user_id: str, desired: Workout) -> ReconcileWorkoutResult:
        """
        Insert a new workout with its exercises, entries and tags.

        Every record of `desired` must be new; the same validation and
        reconciliation as a save runs against an empty baseline.
        """
        return await self.execute("", user_id, desired)


async def persist_operations(
    workout_repo: WorkoutRepository,
    workout_id: str,
    user_id: str,
    operations: WorkoutOperations,
) -> ReconcileWorkoutResult:
    """
    Hand a reconciled payload to persistence; no rollback is attempted.

    An empty workout_id inserts a new workout.
    """
    created = not workout_id
    try:
        if created:
            saved = await run_in_threadpool(
                workout_repo.create_workout_with_children, user_id, operations
            )
        else:
            saved = await run_in_threadpool(
                workout_repo.apply_reconciled_operations, workout_id, user_id, operations
            )
    except Exception as e:
        logger.exception(f"Error persisting workout {workout_id}: {e}")
        return ReconcileWorkoutResult(
            success=False,
            stage=ReconcileStage.FAILED,
            operations=operations,
            error=str(e),
            code=PERSISTENCE_FAILED,
        )

    if saved is None:
        logger.error(f"Persisting workout {workout_id} returned no workout")
        return ReconcileWorkoutResult(
            success=False,
            stage=ReconcileStage.FAILED,
            operations=operations,
            error="Workout could not be saved",
            code=PERSISTENCE_FAILED,
        )

    logger.info(
        f"Committed workout {saved.id}: {saved.exercise_count} exercises, "
        f"{saved.entry_count} entries, {len(saved.tag_ids)} tags"
    )
    return ReconcileWorkoutResult(
        success=True,
        stage=ReconcileStage.COMMITTED,
        workout=saved,
        operations=operations,
        created=created,
    )


class ReorderExercisesUseCase:
    """
    Use case for reordering the exercises of a workout.

    Exercises missing from the requested order are removed and the rest are
    re-stamped by position. Ids the workout does not own, and new exercises,
    are integrity conflicts.
    """

    def __init__(self, workout_repo: WorkoutRepository) -> None:
        self._workout_repo = workout_repo

    async def execute(
        self,
        workout_id: str,
        user_id: str,
        exercise_ids: List[str],
    ) -> ReconcileWorkoutResult:
        try:
            baseline = await run_in_threadpool(
                self._workout_repo.fetch_workout_with_children, workout_id, user_id
            )
        except Exception as e:
            logger.exception(f"Error loading workout {workout_id} for reorder: {e}")
            return ReconcileWorkoutResult(
                success=False,
                stage=ReconcileStage.FAILED,
                error=str(e),
                code=RECONCILIATION_FAILED,
            )

        if baseline is None:
            return ReconcileWorkoutResult(
                success=False,
                stage=ReconcileStage.REJECTED,
                error="Workout not found or not owned by user",
                code=WORKOUT_NOT_FOUND,
            )

        desired = []
        for position, exercise_id in enumerate(exercise_ids):
            stored = baseline.get_exercise(exercise_id) if exercise_id else None
            if stored is None:
                message = f"The exercise {exercise_id!r} does not belong to this workout"
                logger.warning(f"Rejected reorder of workout {workout_id}: {message}")
                return ReconcileWorkoutResult(
                    success=False,
                    stage=ReconcileStage.REJECTED,
                    error=message,
                    code=INTEGRITY_CONFLICT,
                    validation_errors={f"exercises.{position}": [message]},
                )
            desired.append({**stored.model_dump(exclude={"entries"}), "workout_id": workout_id})

        exercises = reconcile_collection(
            baseline.exercises, desired, EXERCISE_KIND, workout_id, allow_create=False
        )
        if not exercises.success:
            logger.warning(f"Rejected reorder of workout {workout_id} ({exercises.code}): {exercises.error}")
            return ReconcileWorkoutResult(
                success=False,
                stage=ReconcileStage.REJECTED,
                error=exercises.error,
                code=exercises.code or INTEGRITY_CONFLICT,
                validation_errors=_prefixed_errors("exercises", exercises),
            )

        operations = WorkoutOperations(
            workout_id=workout_id,
            exercise_ops=exercises.operations,
            tag_ops=AssociationOperations(existing=baseline.tag_ids),
        )
        return await persist_operations(self._workout_repo, workout_id, user_id, operations)
