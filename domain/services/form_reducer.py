"""
Field-state store: pure intents over immutable FormState snapshots.

Every intent is a function of (state, intent) -> new state. The input
snapshot is never modified; each intent builds a working copy and returns
it as a single new FormState, so multi-field intents are atomic from the
point of view of any reader.

Intents:
- update_field: merge a partial into one field (unknown ids are created)
- update_fields: apply several partial updates into one snapshot
- merge_server_errors: replace every field's error from a response
- reset_fields: restore baseline values, optionally with overrides

Malformed field ids (empty or non-string) are ignored rather than raised.
"""

import logging
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError

from domain.models.form_state import (
    FieldState,
    FieldUpdate,
    FormState,
    merge_field_data,
)

logger = logging.getLogger(__name__)

PartialField = Union[FieldUpdate, Mapping[str, Any]]


def _is_valid_id(field_id: Any) -> bool:
    return isinstance(field_id, str) and bool(field_id.strip())


def _coerce_update(update: PartialField) -> Optional[FieldUpdate]:
    if isinstance(update, FieldUpdate):
        return update
    try:
        return FieldUpdate.model_validate(dict(update))
    except (ValidationError, TypeError, ValueError) as e:
        logger.warning(f"Ignoring malformed field update {update!r}: {e}")
        return None


def _merge_field(field_id: str, current: Optional[FieldState], update: FieldUpdate) -> FieldState:
    """Merge one partial update into a field, creating it when missing."""
    changes = update.changes()

    if changes.get("handles_changes") is None:
        changes.pop("handles_changes", None)

    if "data" in changes:
        changes["data"] = merge_field_data(
            current.data if current is not None else None, changes["data"]
        )

    if current is None:
        return FieldState(id=field_id, **changes)

    # A local edit of the value invalidates any previous error
    if "value" in changes and "error" not in changes and changes["value"] != current.value:
        changes["error"] = None

    return current.model_copy(update=changes)


def _safe_merge(field_id: str, current: Optional[FieldState], update: FieldUpdate) -> Optional[FieldState]:
    try:
        return _merge_field(field_id, current, update)
    except (ValidationError, TypeError, ValueError) as e:
        logger.warning(f"Ignoring invalid update for field {field_id!r}: {e}")
        return None


def _apply(fields: Dict[str, FieldState], field_id: Any, update: PartialField) -> None:
    if not _is_valid_id(field_id):
        logger.debug(f"Ignoring update for malformed field id {field_id!r}")
        return
    coerced = _coerce_update(update)
    if coerced is None:
        return
    merged = _safe_merge(field_id, fields.get(field_id), coerced)
    if merged is not None:
        fields[field_id] = merged


# =============================================================================
# Intents
# =============================================================================


def update_field(state: FormState, field_id: str, update: PartialField) -> FormState:
    """
    Merge `update` into `state[field_id]`.

    When both the update and the current field carry `data`, the data is
    merged rather than replaced. Unknown ids are created.
    """
    fields = dict(state)
    _apply(fields, field_id, update)
    return state.replace(fields)


def update_fields(state: FormState, updates: Mapping[str, PartialField]) -> FormState:
    """Apply several partial updates, producing exactly one new snapshot."""
    fields = dict(state)
    for field_id, update in updates.items():
        _apply(fields, field_id, update)
    return state.replace(fields)


def merge_server_errors(
    state: FormState,
    errors_by_field: Optional[Mapping[str, Union[str, List[str], None]]],
) -> FormState:
    """
    Replace every field's error with the first server error for its key.

    Fields not mentioned in `errors_by_field` are cleared, so errors from a
    previous submission never survive a new outcome.
    """
    errors_by_field = errors_by_field or {}
    fields: Dict[str, FieldState] = {}
    for field_id, field in state.items():
        messages = errors_by_field.get(field_id)
        if isinstance(messages, str):
            messages = [messages]
        error = messages[0] if messages else None
        fields[field_id] = field if field.error == error else field.model_copy(update={"error": error})
    return state.replace(fields)


def reset_fields(
    state: FormState,
    overrides: Optional[Mapping[str, PartialField]] = None,
) -> FormState:
    """
    Restore every field to its baseline, merging any override on top.

    `reset_fields(state)` restores the baseline exactly;
    `reset_fields(state, {"title": {"value": "x"}})` restores every field and
    then sets `title` to "x". Override keys that are not fields are ignored.
    """
    overrides = overrides or {}
    baseline = state.baseline
    fields: Dict[str, FieldState] = {}
    for field_id, field in state.items():
        restored = baseline.get(field_id, FieldState(id=field_id))
        override = overrides.get(field_id)
        if override is not None:
            coerced = _coerce_update(override)
            merged = _safe_merge(field_id, restored, coerced) if coerced is not None else None
            if merged is not None:
                restored = merged
        fields[field_id] = restored
    return state.replace(fields)


# =============================================================================
# Action dispatch
# =============================================================================


class FormAction(BaseModel):
    """
    A declarative intent for form_reducer.

    Examples:
        >>> FormAction(type="update_field", field_id="title", value={"value": "Leg Day"})
        >>> FormAction(type="update_fields", value={"title": {"value": "A"}, "date": {"value": None}})
        >>> FormAction(type="merge_server_errors", value={"title": ["Required"]})
        >>> FormAction(type="reset")
    """

    type: Literal["update_field", "update_fields", "merge_server_errors", "reset"]
    field_id: Optional[str] = None
    value: Any = None


def form_reducer(state: FormState, action: FormAction) -> FormState:
    """Apply a FormAction and return the resulting snapshot."""
    if action.type == "update_field":
        return update_field(state, action.field_id, action.value or {})
    if action.type == "update_fields":
        return update_fields(state, action.value or {})
    if action.type == "merge_server_errors":
        return merge_server_errors(state, action.value)
    if action.type == "reset":
        return reset_fields(state, action.value)
    return state
