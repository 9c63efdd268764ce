"""
Tests for application/services/workout_editor.py
"""

import asyncio
import uuid
from datetime import date

import pytest

from application.services.workout_editor import SaveStatus, WorkoutEditor
from application.use_cases.reconcile_workout import (
    ReconcileStage,
    ReconcileWorkoutResult,
    ReconcileWorkoutUseCase,
)
from domain.models import GENERIC_FAILURE_MESSAGE, Workout
from tests.fakes import FakeWorkoutRepository, create_workout

USER_ID = str(uuid.uuid4())


@pytest.fixture
def baseline():
    return create_workout(
        user_id=USER_ID,
        exercises=[[{"weight": 60, "repetitions": 10}]],
        names=["Bench"],
        tag_ids=["t1"],
    )


@pytest.fixture
def repo(baseline):
    repo = FakeWorkoutRepository()
    repo.seed([baseline])
    return repo


@pytest.fixture
def editor(repo, baseline):
    return WorkoutEditor(baseline, USER_ID, ReconcileWorkoutUseCase(workout_repo=repo))


class ControlledUseCase:
    """Use case stub whose executions finish only when released."""

    def __init__(self, results):
        self._results = results
        self.gates = []

    async def execute(self, workout_id, user_id, desired, baseline=None):
        index = len(self.gates)
        gate = asyncio.Event()
        self.gates.append(gate)
        await gate.wait()
        return self._results[index]


@pytest.mark.unit
class TestWorkoutEditor:

    def test_fields_built_from_baseline(self, editor, baseline):
        state = editor.store.state
        assert state["title"].value == baseline.title
        assert state["tag_ids"].data.selected == ["t1"]
        assert state["exercises"].handles_changes is True
        assert editor.desired().exercises == baseline.exercises

    @pytest.mark.asyncio
    async def test_successful_save_rebases(self, editor, repo, baseline):
        editor.update("title", {"value": "  Chest Day "})
        editor.update("tag_ids", {"value": ["t1", "t2"], "data": {"selected": ["t1", "t2"]}})

        outcome = await editor.save()

        assert outcome.status == "Success"
        assert editor.status == SaveStatus.IDLE
        assert editor.last_stage == ReconcileStage.COMMITTED
        assert editor.baseline.title == "Chest Day"
        assert editor.store.state["title"].value == "Chest Day"
        assert editor.store.state.baseline["tag_ids"].value == ["t1", "t2"]
        assert repo.get_all()[0].tag_ids == ["t1", "t2"]

    @pytest.mark.asyncio
    async def test_rejected_save_focuses_field(self, editor, baseline):
        editor.update("title", {"value": ""})

        outcome = await editor.save()

        assert outcome.status == "Error"
        assert outcome.focus_field == "title"
        assert editor.store.state["title"].error == "A title must be at least 1 character"
        assert editor.baseline is baseline
        assert editor.last_stage == ReconcileStage.REJECTED
        assert editor.status == SaveStatus.IDLE

    @pytest.mark.asyncio
    async def test_child_errors_land_on_exercises_field(self, editor):
        exercises = editor.store.state["exercises"].value
        exercises = [{**exercises[0], "entries": exercises[0]["entries"] + [{"id": "", "text": " "}]}]
        editor.update("exercises", {"value": exercises})

        outcome = await editor.save()

        assert outcome.focus_field == "exercises"
        assert editor.store.state["exercises"].error == "Cannot create an empty entry"

    @pytest.mark.asyncio
    async def test_failure_keeps_edits(self, editor, repo, baseline):
        repo.fail_with = RuntimeError("connection reset")
        editor.update("title", {"value": "Unsaved"})

        outcome = await editor.save()

        assert outcome.status == "Failure"
        assert outcome.notification == GENERIC_FAILURE_MESSAGE
        assert editor.store.state["title"].value == "Unsaved"
        assert editor.baseline is baseline
        assert editor.last_stage == ReconcileStage.FAILED

    @pytest.mark.asyncio
    async def test_later_edit_resets_error(self, editor):
        editor.update("title", {"value": ""})
        await editor.save()
        editor.update("title", {"value": "Fixed"})
        assert editor.store.state["title"].error is None

    @pytest.mark.asyncio
    async def test_preview(self, editor, repo):
        editor.update("tag_ids", {"value": []})

        result = await editor.preview()

        assert result.stage == ReconcileStage.RECONCILED
        assert result.operations.tag_ops.removing == ["t1"]
        assert repo.applied == []


@pytest.mark.unit
class TestStaleResponses:
    """Superseded saves are discarded."""

    @pytest.mark.asyncio
    async def test_stale_response_is_discarded(self, baseline):
        stale = ReconcileWorkoutResult(
            success=False,
            stage=ReconcileStage.REJECTED,
            error="Invalid workout fields",
            validation_errors={"title": ["stale error"]},
        )
        fresh = ReconcileWorkoutResult(success=True, stage=ReconcileStage.COMMITTED, workout=baseline)
        use_case = ControlledUseCase([stale, fresh])
        editor = WorkoutEditor(baseline, USER_ID, use_case)

        first = asyncio.create_task(editor.save())
        await asyncio.sleep(0)
        second = asyncio.create_task(editor.save())
        await asyncio.sleep(0)
        assert editor.generation == 2
        assert editor.status == SaveStatus.SAVING

        use_case.gates[1].set()
        assert (await second).status == "Success"
        use_case.gates[0].set()
        assert await first is None

        assert editor.store.state["title"].error is None
        assert editor.last_stage == ReconcileStage.COMMITTED


@pytest.mark.unit
class TestNewWorkoutEditor:

    @pytest.mark.asyncio
    async def test_first_save_creates_workout(self, repo):
        editor = WorkoutEditor(Workout(user_id=USER_ID), USER_ID, ReconcileWorkoutUseCase(workout_repo=repo))
        editor.update_many({
            "title": {"value": "Morning Run"},
            "date": {"value": date.today()},
            "exercises": {"value": [{"name": "Run", "entries": [{"minutes": 30}]}]},
        })

        outcome = await editor.save()

        assert outcome.status == "Success"
        assert editor.last_stage == ReconcileStage.COMMITTED
        assert editor.workout_id != ""
        assert editor.baseline.exercises[0].entries[0].minutes == 30
        assert repo.fetch_workout_with_children(editor.workout_id, USER_ID) == editor.baseline

    @pytest.mark.asyncio
    async def test_second_save_updates_created_workout(self, repo):
        editor = WorkoutEditor(Workout(user_id=USER_ID), USER_ID, ReconcileWorkoutUseCase(workout_repo=repo))
        editor.update_many({"title": {"value": "Swim"}, "date": {"value": date.today()}})
        await editor.save()
        created_id = editor.workout_id

        editor.update("title", {"value": "Long Swim"})
        outcome = await editor.save()

        assert outcome.status == "Success"
        assert editor.workout_id == created_id
        assert editor.baseline.title == "Long Swim"
        assert len(repo.get_all()) == 2
