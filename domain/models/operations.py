"""
Operation payload models produced by reconciliation.

A WorkoutOperations payload is handed to the persistence layer in one call.
The persistence layer applies `removing_ids` before `creating` and
`updating` within the same transaction.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class RecordUpdate(BaseModel):
    """Update for an existing child record, order always re-stamped."""

    id: str
    parent_id: str
    data: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}


class CollectionOperations(BaseModel):
    """Create/update/delete operations for one ordered child collection."""

    creating: List[Dict[str, Any]] = Field(default_factory=list)
    updating: List[RecordUpdate] = Field(default_factory=list)
    removing_ids: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        return not (self.creating or self.updating or self.removing_ids)

    @property
    def size(self) -> int:
        """Number of surviving records (created plus updated)."""
        return len(self.creating) + len(self.updating)


class AssociationOperations(BaseModel):
    """Added and removed association ids, plus the unchanged ones."""

    existing: List[str] = Field(default_factory=list)
    adding: List[str] = Field(default_factory=list)
    removing: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def has_changes(self) -> bool:
        return bool(self.adding or self.removing)


class WorkoutOperations(BaseModel):
    """
    Combined payload for saving a workout.

    - update: workout columns (title, date, description, image)
    - exercise_ops: exercises of the workout; created exercises carry their
      reconciled `entries` in their create record
    - entry_ops: entry operations keyed by existing exercise id
    - tag_ops: workout-to-tag association changes
    """

    workout_id: str
    update: Dict[str, Any] = Field(default_factory=dict)
    exercise_ops: CollectionOperations = Field(default_factory=CollectionOperations)
    entry_ops: Dict[str, CollectionOperations] = Field(default_factory=dict)
    tag_ops: AssociationOperations = Field(default_factory=AssociationOperations)

    model_config = {"frozen": True}
