"""
Domain services: the state reconciliation engine.

- form_reducer / form_store: field-state store over immutable FormState
- collection_reconciler: ordered child collection diff
- association_reconciler: many-to-many association diff
- record_validation: schemas and record kinds used by the reconcilers
"""

from domain.services.association_reconciler import reconcile_associations
from domain.services.collection_reconciler import (
    EMPTY_ON_CREATE,
    EMPTY_ON_UPDATE,
    INTEGRITY_CONFLICT,
    INVALID_FIELDS,
    CollectionReconciliation,
    reconcile_collection,
)
from domain.services.form_reducer import (
    FormAction,
    form_reducer,
    merge_server_errors,
    reset_fields,
    update_field,
    update_fields,
)
from domain.services.form_store import FormStore, ResponseOutcome
from domain.services.record_validation import (
    ENTRY_KIND,
    EXERCISE_KIND,
    RecordKind,
    validate_workout_fields,
)

__all__ = [
    "reconcile_associations",
    "reconcile_collection",
    "CollectionReconciliation",
    "INVALID_FIELDS",
    "EMPTY_ON_CREATE",
    "EMPTY_ON_UPDATE",
    "INTEGRITY_CONFLICT",
    "FormAction",
    "form_reducer",
    "update_field",
    "update_fields",
    "merge_server_errors",
    "reset_fields",
    "FormStore",
    "ResponseOutcome",
    "RecordKind",
    "EXERCISE_KIND",
    "ENTRY_KIND",
    "validate_workout_fields",
]
