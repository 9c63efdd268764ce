"""
Field-state models for editable forms.

A form is a keyed map of FieldState objects. Snapshots are immutable: every
intent applied through domain.services.form_reducer produces a new FormState
and leaves the previous snapshot untouched, so a reader holding an older
snapshot (e.g. a save request still in flight) never observes a half-applied
change.

UI-only metadata lives in a typed `data` variant rather than an open bag:
- PlainFieldData: arbitrary attributes for simple inputs
- VerifiableFieldData: inputs with a verification status (email, phone)
- SelectableFieldData: selection inputs (tag pickers, image pickers)
"""

from typing import Annotated, Any, Dict, Iterator, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator


class PlainFieldData(BaseModel):
    """Open attribute bag for fields without a dedicated data variant."""

    kind: Literal["plain"] = "plain"
    attributes: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}

    def merged(self, partial: Mapping[str, Any]) -> "PlainFieldData":
        """Merge attributes instead of replacing them."""
        attributes = dict(self.attributes)
        attributes.update(partial.get("attributes", {}))
        attributes.update({k: v for k, v in partial.items() if k not in ("kind", "attributes")})
        return PlainFieldData(attributes=attributes)


class VerifiableFieldData(BaseModel):
    """Data for fields whose value may need verification (email, phone)."""

    kind: Literal["verifiable"] = "verifiable"
    valid: Optional[bool] = Field(
        default=None, description="Client-side validity; None until checked"
    )
    verified: bool = Field(
        default=False, description="Whether the stored value has been verified"
    )

    model_config = {"frozen": True}

    def merged(self, partial: Mapping[str, Any]) -> "VerifiableFieldData":
        return self.model_validate({**self.model_dump(), **partial, "kind": self.kind})


class SelectableFieldData(BaseModel):
    """Data for selection inputs such as the workout tag picker."""

    kind: Literal["selectable"] = "selectable"
    options: List[Any] = Field(default_factory=list)
    selected: List[Any] = Field(default_factory=list)
    valid: Optional[bool] = None

    model_config = {"frozen": True}

    def merged(self, partial: Mapping[str, Any]) -> "SelectableFieldData":
        return self.model_validate({**self.model_dump(), **partial, "kind": self.kind})


FieldData = Annotated[
    Union[PlainFieldData, VerifiableFieldData, SelectableFieldData],
    Field(discriminator="kind"),
]

_field_data_adapter: TypeAdapter = TypeAdapter(FieldData)


def parse_field_data(raw: Union[Mapping[str, Any], BaseModel]) -> Any:
    """
    Parse a raw mapping into a FieldData variant.

    Mappings without a `kind` key are treated as plain attributes.
    """
    if isinstance(raw, BaseModel):
        return raw
    if "kind" not in raw:
        return PlainFieldData(attributes=dict(raw))
    return _field_data_adapter.validate_python(dict(raw))


def merge_field_data(current: Any, partial: Optional[Mapping[str, Any]]) -> Any:
    """
    Merge a partial data update into the current FieldData.

    Same-kind updates are merged key by key; a different kind replaces the
    current variant.
    """
    if partial is None:
        return current
    if current is None:
        return parse_field_data(partial)
    if partial.get("kind", current.kind) == current.kind:
        return current.merged(partial)
    return parse_field_data(partial)


class FieldState(BaseModel):
    """
    State of a single form field.

    `error` is only set while the field fails validation or carries a
    server-reported error for its key.

    Examples:
        >>> FieldState(id="title", value="")
        >>> FieldState(
        ...     id="email",
        ...     value="a@b.co",
        ...     data=VerifiableFieldData(valid=True),
        ... )
    """

    id: str = Field(..., description="Field identifier, unique within the form")
    value: Any = Field(default=None, description="Current input value")
    error: Optional[str] = Field(default=None, description="First error message, if any")
    data: Optional[FieldData] = Field(default=None, description="Typed UI metadata")
    handles_changes: bool = Field(
        default=False, description="Whether the field manages its own change events"
    )

    model_config = {"frozen": True}


class FieldUpdate(BaseModel):
    """
    Partial FieldState used by store intents.

    Only explicitly provided attributes are applied, so
    `FieldUpdate(error=None)` clears an error while `FieldUpdate()` changes
    nothing.
    """

    value: Any = None
    error: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    handles_changes: Optional[bool] = None

    model_config = {"frozen": True}

    @field_validator("data", mode="before")
    @classmethod
    def dump_data_variant(cls, v: Any) -> Any:
        """Accept a FieldData variant as well as a raw mapping."""
        if isinstance(v, BaseModel):
            return v.model_dump()
        return v

    def changes(self) -> Dict[str, Any]:
        """Return only the attributes that were explicitly set."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class FormState(Mapping[str, FieldState]):
    """
    Immutable snapshot of a form's fields plus its static baseline.

    Behaves like a read-only mapping of field id to FieldState. New snapshots
    are produced with `replace()`; the receiver is never modified.
    """

    def __init__(
        self,
        fields: Mapping[str, FieldState],
        baseline: Optional[Mapping[str, FieldState]] = None,
    ) -> None:
        self._fields: Dict[str, FieldState] = dict(fields)
        self._baseline: Dict[str, FieldState] = dict(
            baseline if baseline is not None else fields
        )

    @classmethod
    def initial(cls, fields: Union[List[FieldState], Mapping[str, FieldState]]) -> "FormState":
        """Create a form whose baseline is its initial fields."""
        if isinstance(fields, Mapping):
            return cls(fields)
        return cls({field.id: field for field in fields})

    @property
    def baseline(self) -> Mapping[str, FieldState]:
        """The static per-form baseline used by reset."""
        return dict(self._baseline)

    def replace(self, fields: Mapping[str, FieldState]) -> "FormState":
        """Return a new snapshot with the given fields and the same baseline."""
        return FormState(fields, self._baseline)

    def with_baseline(self, baseline: Mapping[str, FieldState]) -> "FormState":
        """Return a new snapshot with the same fields and a new baseline."""
        return FormState(self._fields, baseline)

    def field_values(self) -> Dict[str, Any]:
        """Map of field id to current value."""
        return {key: field.value for key, field in self._fields.items()}

    def errors(self) -> Dict[str, str]:
        """Map of field id to error for every field currently in error."""
        return {key: field.error for key, field in self._fields.items() if field.error is not None}

    def __getitem__(self, key: str) -> FieldState:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"FormState({self._fields!r})"
