"""
Workouts router for listing, creating, saving, reordering and removing workouts.

This router contains endpoints for:
- GET /workouts - List the user's workouts
- POST /workouts - Create a workout with exercises, entries and tags
- DELETE /workouts - Remove several workouts
- GET /workouts/{workout_id} - Workout with exercises, entries and tag ids
- PUT /workouts/{workout_id} - Reconcile the desired state and save it
- POST /workouts/{workout_id}/preview - Reconcile without saving
- PUT /workouts/{workout_id}/exercises/order - Reorder (and drop) exercises

Save responses use the Success / Error / Failure envelope:
200 on success (201 when a workout is created), 422 on validation errors,
404 for a missing workout, 500 when persistence fails.
"""

import logging
from datetime import date as Date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from api.deps import (
    get_current_user,
    get_get_workout_use_case,
    get_reconcile_workout_use_case,
    get_remove_workouts_use_case,
    get_reorder_exercises_use_case,
)
from application.use_cases import (
    GetWorkoutUseCase,
    ReconcileStage,
    ReconcileWorkoutResult,
    ReconcileWorkoutUseCase,
    RemoveWorkoutsUseCase,
    ReorderExercisesUseCase,
)
from domain.models import Exercise, Workout, send_success_message

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Workouts"],
)


# =============================================================================
# Request Models
# =============================================================================


class SaveWorkoutRequest(BaseModel):
    """Full desired state of a workout."""
    title: str = ""
    date: Optional[Date] = None
    description: str = ""
    image: str = ""
    tag_ids: List[str] = Field(default_factory=list)
    exercises: List[Exercise] = Field(default_factory=list)

    def to_workout(self, workout_id: str, user_id: str) -> Workout:
        return Workout(id=workout_id, user_id=user_id, **self.model_dump())


class ReorderExercisesRequest(BaseModel):
    """Exercise ids in their new order; omitted exercises are removed."""
    exercise_ids: List[str]


class RemoveWorkoutsRequest(BaseModel):
    workout_ids: List[str] = Field(..., min_length=1)


# =============================================================================
# Helpers
# =============================================================================


def _status_code(result: ReconcileWorkoutResult) -> int:
    if result.success:
        return 201 if result.created else 200
    if result.not_found:
        return 404
    if result.stage == ReconcileStage.FAILED:
        return 500
    return 422


def _envelope(result: ReconcileWorkoutResult) -> JSONResponse:
    return JSONResponse(
        status_code=_status_code(result),
        content=result.to_response().model_dump(mode="json"),
    )


# =============================================================================
# Workout Endpoints
# =============================================================================


@router.get("/workouts")
async def list_workouts_endpoint(
    user_id: str = Depends(get_current_user),
    use_case: GetWorkoutUseCase = Depends(get_get_workout_use_case),
):
    """List the authenticated user's workouts, newest date first."""
    result = await use_case.list_workouts(user_id)
    return {
        "success": True,
        "workouts": [workout.model_dump(mode="json") for workout in result.workouts],
        "count": result.count,
    }


@router.post("/workouts")
async def create_workout_endpoint(
    request: SaveWorkoutRequest,
    user_id: str = Depends(get_current_user),
    use_case: ReconcileWorkoutUseCase = Depends(get_reconcile_workout_use_case),
):
    """Create a workout; every exercise and entry in the request is new."""
    result = await use_case.create(user_id=user_id, desired=request.to_workout("", user_id))
    return _envelope(result)


@router.delete("/workouts")
async def remove_workouts_endpoint(
    request: RemoveWorkoutsRequest,
    user_id: str = Depends(get_current_user),
    use_case: RemoveWorkoutsUseCase = Depends(get_remove_workouts_use_case),
):
    """Delete several workouts; ids the user does not own are skipped."""
    result = await use_case.execute(user_id=user_id, workout_ids=request.workout_ids)
    if result.success:
        status_code = 200
    elif result.failed:
        status_code = 500
    else:
        status_code = 422
    return JSONResponse(status_code=status_code, content=result.to_response().model_dump(mode="json"))



@router.get("/workouts/{workout_id}")
async def get_workout_endpoint(
    workout_id: str,
    user_id: str = Depends(get_current_user),
    use_case: GetWorkoutUseCase = Depends(get_get_workout_use_case),
):
    """Get a workout with its exercises, entries and tag ids."""
    result = await use_case.get_workout(workout_id, user_id)
    if not result.success:
        raise HTTPException(status_code=404, detail=result.error)
    return {
        "success": True,
        "workout": result.workout.model_dump(mode="json"),
    }


@router.put("/workouts/{workout_id}")
async def save_workout_endpoint(
    workout_id: str,
    request: SaveWorkoutRequest,
    user_id: str = Depends(get_current_user),
    use_case: ReconcileWorkoutUseCase = Depends(get_reconcile_workout_use_case),
):
    """
    Save a workout from its full desired state.

    Delegates validation, reconciliation and persistence to
    ReconcileWorkoutUseCase.
    """
    result = await use_case.execute(
        workout_id=workout_id,
        user_id=user_id,
        desired=request.to_workout(workout_id, user_id),
    )
    return _envelope(result)


@router.post("/workouts/{workout_id}/preview")
async def preview_workout_endpoint(
    workout_id: str,
    request: SaveWorkoutRequest,
    user_id: str = Depends(get_current_user),
    use_case: ReconcileWorkoutUseCase = Depends(get_reconcile_workout_use_case),
):
    """Return the operations a save would apply, without saving."""
    result = await use_case.preview(
        workout_id=workout_id,
        user_id=user_id,
        desired=request.to_workout(workout_id, user_id),
    )
    if result.stage != ReconcileStage.RECONCILED:
        return _envelope(result)
    response = send_success_message(
        "Workout changes are valid",
        data=result.operations.model_dump(mode="json"),
    )
    return JSONResponse(status_code=200, content=response.model_dump(mode="json"))


@router.put("/workouts/{workout_id}/exercises/order")
async def reorder_exercises_endpoint(
    workout_id: str,
    request: ReorderExercisesRequest,
    user_id: str = Depends(get_current_user),
    use_case: ReorderExercisesUseCase = Depends(get_reorder_exercises_use_case),
):
    """Reorder exercises; exercises missing from the list are removed."""
    result = await use_case.execute(
        workout_id=workout_id,
        user_id=user_id,
        exercise_ids=request.exercise_ids,
    )
    return _envelope(result)
