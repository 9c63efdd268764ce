"""
Workout editor session.

Owns the form store and the baseline snapshot for one workout being edited,
and drives saves through ReconcileWorkoutUseCase. Each save is stamped with
a generation number; a response whose generation has been superseded by a
later save is discarded instead of being merged into a form that has since
moved on.

A baseline without an id edits a new workout: its first save inserts it and
the committed workout becomes the baseline.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from application.use_cases.reconcile_workout import (
    ReconcileStage,
    ReconcileWorkoutResult,
    ReconcileWorkoutUseCase,
)
from domain.models import FieldState, SelectableFieldData, Workout
from domain.services.form_reducer import FormAction
from domain.services.form_store import FormStore, ResponseOutcome

logger = logging.getLogger(__name__)

WORKOUT_FIELDS = ("title", "date", "description", "image")


class SaveStatus(str, Enum):
    IDLE = "idle"
    SAVING = "saving"


def workout_fields(workout: Workout) -> List[FieldState]:
    """Build the editor's fields from a persisted workout."""
    fields = [FieldState(id=name, value=getattr(workout, name)) for name in WORKOUT_FIELDS]
    fields.append(
        FieldState(
            id="tag_ids",
            value=list(workout.tag_ids),
            data=SelectableFieldData(selected=list(workout.tag_ids)),
        )
    )
    fields.append(
        FieldState(
            id="exercises",
            value=[exercise.model_dump() for exercise in workout.exercises],
            handles_changes=True,
        )
    )
    return fields


def _collapse_child_errors(errors: Mapping[str, List[str]]) -> Dict[str, List[str]]:
    """Surface nested `exercises.<i>...` errors on the `exercises` field too."""
    collapsed = dict(errors)
    for key, messages in errors.items():
        if key.startswith("exercises.") and "exercises" not in collapsed:
            collapsed["exercises"] = list(messages)
    return collapsed


class WorkoutEditor:
    """
    Editing session for one workout.

    Usage:
        >>> editor = WorkoutEditor(workout, user_id, use_case)
        >>> editor.update("title", {"value": "Leg Day"})
        >>> outcome = await editor.save()
        >>> outcome.status
        'Success'
    """

    def __init__(
        self,
        baseline: Workout,
        user_id: str,
        use_case: ReconcileWorkoutUseCase,
    ) -> None:
        self._baseline = baseline
        self._user_id = user_id
        self._use_case = use_case
        self._store = FormStore(workout_fields(baseline))
        self._generation = 0
        self.status = SaveStatus.IDLE
        self.last_stage = ReconcileStage.IDLE

    @property
    def workout_id(self) -> str:
        return self._baseline.id

    @property
    def baseline(self) -> Workout:
        return self._baseline

    @property
    def store(self) -> FormStore:
        return self._store

    @property
    def generation(self) -> int:
        return self._generation

    def update(self, field_id: str, update: Any) -> None:
        self._store.dispatch(FormAction(type="update_field", field_id=field_id, value=update))

    def update_many(self, updates: Mapping[str, Any]) -> None:
        self._store.dispatch(FormAction(type="update_fields", value=dict(updates)))

    def reset(self, overrides: Optional[Mapping[str, Any]] = None) -> None:
        self._store.dispatch(FormAction(type="reset", value=overrides))

    def desired(self) -> Workout:
        """Assemble the desired workout from the current field values."""
        values = self._store.state.field_values()
        return Workout(
            id=self._baseline.id,
            user_id=self._user_id,
            title=values.get("title") or "",
            date=values.get("date"),
            description=values.get("description") or "",
            image=values.get("image") or "",
            tag_ids=list(values.get("tag_ids") or []),
            exercises=list(values.get("exercises") or []),
        )

    async def preview(self) -> ReconcileWorkoutResult:
        """Speculatively reconcile the current form against the baseline."""
        return await self._use_case.preview(
            self.workout_id, self._user_id, self.desired(), baseline=self._baseline
        )

    async def save(self) -> Optional[ResponseOutcome]:
        """
        Save the current form.

        Returns the outcome to present, or None when a later save superseded
        this one and its response was discarded.
        """
        self._generation += 1
        generation = self._generation
        self.status = SaveStatus.SAVING

        result = await self._use_case.execute(
            self.workout_id, self._user_id, self.desired(), baseline=self._baseline
        )

        if generation != self._generation:
            logger.debug(
                f"Discarding stale save {generation} for workout {self.workout_id} "
                f"(current {self._generation})"
            )
            return None

        self.status = SaveStatus.IDLE
        self.last_stage = result.stage
        response = result.to_response()
        if response.body.errors:
            body = response.body.model_copy(
                update={"errors": _collapse_child_errors(response.body.errors)}
            )
            response = response.model_copy(update={"body": body})

        def on_success() -> None:
            self._commit(result.workout)

        return self._store.process_response(response, on_success=on_success)

    def _commit(self, workout: Optional[Workout]) -> None:
        if workout is None:
            return
        self._baseline = workout
        fields = {field.id: field for field in workout_fields(workout)}
        self._store.rebase(fields)
        self._store.dispatch(FormAction(type="reset"))
        logger.info(f"Editor for workout {workout.id} rebased on committed save")


