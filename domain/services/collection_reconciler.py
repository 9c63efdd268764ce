"""
Ordered-collection reconciler.

Computes the create/update/delete operations that move a stored ordered
child collection (exercises of a workout, entries of an exercise) to a
desired list. Order is always derived from the record's position in the
desired list, never from a caller-supplied order value.

The reconciler is pure and fail-fast: the first invalid, empty or
conflicting record aborts the whole reconciliation and no partial
operations are returned.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel

from domain.models.operations import CollectionOperations, RecordUpdate
from domain.services.record_validation import RecordKind

logger = logging.getLogger(__name__)

Record = Union[BaseModel, Mapping[str, Any]]

# Failure codes
INVALID_FIELDS = "INVALID_FIELDS"
EMPTY_ON_CREATE = "EMPTY_ON_CREATE"
EMPTY_ON_UPDATE = "EMPTY_ON_UPDATE"
INTEGRITY_CONFLICT = "INTEGRITY_CONFLICT"


@dataclass
class CollectionReconciliation:
    """Result of reconciling one ordered collection."""

    operations: CollectionOperations = field(default_factory=CollectionOperations)
    error: Optional[str] = None
    code: Optional[str] = None
    field_errors: Dict[str, List[str]] = field(default_factory=dict)
    record_id: Optional[str] = None
    position: Optional[int] = None

    @property
    def success(self) -> bool:
        return self.error is None


def _as_dict(record: Record) -> Dict[str, Any]:
    if isinstance(record, BaseModel):
        return record.model_dump()
    return dict(record)


def _record_id(record: Mapping[str, Any]) -> str:
    raw = record.get("id")
    return raw.strip() if isinstance(raw, str) else ""


def _failure(
    code: str,
    message: str,
    record_id: str,
    position: int,
    field_errors: Optional[Dict[str, List[str]]] = None,
) -> CollectionReconciliation:
    logger.debug(f"Reconciliation rejected at position {position} ({code}): {message}")
    return CollectionReconciliation(
        error=message,
        code=code,
        field_errors=field_errors or {},
        record_id=record_id or None,
        position=position,
    )


def reconcile_collection(
    stored: Sequence[Record],
    desired: Sequence[Record],
    kind: RecordKind,
    parent_id: str,
    allow_create: bool = True,
) -> CollectionReconciliation:
    """
    Reconcile `desired` against `stored` for one parent.

    Args:
        stored: Persisted records of the parent (the baseline)
        desired: Records in their new order; `id == ""` marks a new record
        kind: Record kind (validation, emptiness, order/parent fields)
        parent_id: Id of the owning record, attached to every update
        allow_create: When False, new records are integrity conflicts
            (reorder-only mode)

    Returns:
        CollectionReconciliation with the operations, or the first failure

    Example:
        >>> result = reconcile_collection(stored_entries, desired_entries, ENTRY_KIND, exercise_id)
        >>> result.operations.removing_ids
        ['6c1f...']
    """
    stored_ids: List[str] = []
    for record in stored:
        record_id = _record_id(_as_dict(record))
        if record_id and record_id not in stored_ids:
            stored_ids.append(record_id)

    creating: List[Dict[str, Any]] = []
    updating: List[RecordUpdate] = []
    seen_ids: set = set()

    for position, raw in enumerate(desired):
        record = _as_dict(raw)
        record_id = _record_id(record)
        is_new = record_id == ""

        validated, errors = kind.validate(record, is_new)
        if validated is None:
            return _failure(
                INVALID_FIELDS,
                f"Invalid {kind.label} fields",
                record_id,
                position,
                errors,
            )

        if is_new and not allow_create:
            return _failure(
                INTEGRITY_CONFLICT,
                f"Cannot add a new {kind.label} while reordering",
                record_id,
                position,
            )

        if not is_new:
            if record_id in seen_ids:
                return _failure(
                    INTEGRITY_CONFLICT,
                    f"The {kind.label} {record_id} appears more than once",
                    record_id,
                    position,
                )
            if record_id not in stored_ids:
                return _failure(
                    INTEGRITY_CONFLICT,
                    f"The {kind.label} {record_id} does not belong to this record",
                    record_id,
                    position,
                )
            seen_ids.add(record_id)

        content = kind.content(validated)

        if kind.is_empty is not None and kind.is_empty(content):
            if is_new:
                return _failure(
                    EMPTY_ON_CREATE,
                    f"Cannot create an empty {kind.label}",
                    record_id,
                    position,
                )
            return _failure(
                EMPTY_ON_UPDATE,
                f"Cannot update {kind.label} to be empty",
                record_id,
                position,
            )

        content[kind.order_field] = position

        if is_new:
            creating.append(content)
        else:
            updating.append(RecordUpdate(id=record_id, parent_id=parent_id, data=content))

    removing_ids = [record_id for record_id in stored_ids if record_id not in seen_ids]

    return CollectionReconciliation(
        operations=CollectionOperations(
            creating=creating,
            updating=updating,
            removing_ids=removing_ids,
        )
    )
