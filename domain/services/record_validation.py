"""
Structural validation for workouts and their child records.

Validation schemas are pydantic models separate from the loose domain
models so that an invalid draft can still be represented and reported
field by field. Errors are flattened into `{field: [message, ...]}`, the
shape the form store merges.

RecordKind bundles everything the ordered-collection reconciler needs to
know about one child record type: its schemas, parent/order fields,
content fields and emptiness predicate.
"""

import re
from dataclasses import dataclass
from datetime import date as Date, timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, Field, ValidationError, field_validator

# =============================================================================
# Constants for Input Validation
# =============================================================================

MAX_INTEGER = 2147483647
MAX_NAME_LENGTH = 50
MAX_TITLE_LENGTH = 50
MAX_MINUTES = 60
MAX_SECONDS = 60

UUID_REGEX = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")
IMAGE_URL_REGEX = re.compile(r"^(https?://.*\.(?:png|jpg|jpeg|gif|bmp|webp|svg))$", re.IGNORECASE)
WORKOUT_IMAGES_REGEX = re.compile(
    r"^/workouts/(bike|cardio|default|hike|legs|lift|machine|run|swim|weights)\.png$"
)
BASE64_IMAGE_REGEX = re.compile(r"^data:image/(jpeg|png|gif|bmp|webp);base64,[A-Za-z0-9+/=]+$")


def is_uuid(value: Any) -> bool:
    return isinstance(value, str) and bool(UUID_REGEX.match(value))


def verify_image_url(url: str) -> bool:
    """Empty, an image URL, a bundled workout image, or a base64 image."""
    return (
        len(url.strip()) == 0
        or bool(IMAGE_URL_REGEX.match(url))
        or bool(WORKOUT_IMAGES_REGEX.match(url))
        or bool(BASE64_IMAGE_REGEX.match(url))
    )


def _required_id(identifier: str, value: Any) -> str:
    if not is_uuid(value):
        raise ValueError(f"ID for {identifier} must be in UUID format")
    return value


def _new_id(identifier: str, value: Any) -> str:
    if value is not None and str(value).strip() != "":
        raise ValueError(f"ID for {identifier} must be empty or undefined")
    return ""


def _bounded(value: Optional[float], label: str, maximum: float, max_message: str) -> Optional[float]:
    if value is None:
        return value
    if value < 0:
        raise ValueError(f"{label} must be non-negative")
    if value > maximum:
        raise ValueError(max_message)
    return value


def field_errors(exc: ValidationError) -> Dict[str, List[str]]:
    """
    Flatten a pydantic ValidationError into `{field: [messages]}`.

    Errors raised by our own validators keep their message verbatim; model
    level errors are collected under `_record`.
    """
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        key = str(error["loc"][0]) if error.get("loc") else "_record"
        ctx_error = (error.get("ctx") or {}).get("error")
        message = str(ctx_error) if ctx_error is not None else error["msg"]
        errors.setdefault(key, []).append(message)
    return errors


# =============================================================================
# Entry schemas
# =============================================================================


class EntrySchema(BaseModel):
    """Validation rules for an existing exercise entry."""

    id: str
    exercise_id: str
    hours: Optional[int] = None
    minutes: Optional[int] = None
    seconds: Optional[int] = None
    weight: Optional[float] = None
    repetitions: Optional[int] = None
    text: Optional[str] = None

    model_config = {"extra": "ignore"}

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        return _required_id("entry", v)

    @field_validator("exercise_id", mode="before")
    @classmethod
    def validate_exercise_id(cls, v: Any) -> str:
        return _required_id("exercise", v)

    @field_validator("hours")
    @classmethod
    def validate_hours(cls, v: Optional[int]) -> Optional[int]:
        return _bounded(v, "Hours", MAX_INTEGER, "Value exceeds the maximum limit for a number")

    @field_validator("minutes")
    @classmethod
    def validate_minutes(cls, v: Optional[int]) -> Optional[int]:
        return _bounded(v, "Minutes", MAX_MINUTES, f"Minutes cannot exceed {MAX_MINUTES}")

    @field_validator("seconds")
    @classmethod
    def validate_seconds(cls, v: Optional[int]) -> Optional[int]:
        return _bounded(v, "Seconds", MAX_SECONDS, f"Seconds cannot exceed {MAX_SECONDS}")

    @field_validator("weight")
    @classmethod
    def validate_weight(cls, v: Optional[float]) -> Optional[float]:
        return _bounded(v, "Weight", MAX_INTEGER, "Value exceeds the maximum limit for a number")

    @field_validator("repetitions")
    @classmethod
    def validate_repetitions(cls, v: Optional[int]) -> Optional[int]:
        return _bounded(v, "Repetitions", MAX_INTEGER, "Value exceeds the maximum limit for a number")


class NewEntrySchema(EntrySchema):
    """A new entry has no id yet; its exercise link is supplied on insert."""

    exercise_id: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        return _new_id("entry", v)

    @field_validator("exercise_id", mode="before")
    @classmethod
    def validate_exercise_id(cls, v: Any) -> str:
        return "" if v is None else str(v)


def is_empty_entry(entry: Mapping[str, Any]) -> bool:
    """An entry with no weight, reps, duration or text carries no content."""
    numeric = ("weight", "repetitions", "hours", "minutes", "seconds")
    text = entry.get("text")
    return all(entry.get(name) is None for name in numeric) and (text is None or not str(text).strip())


# =============================================================================
# Exercise schemas
# =============================================================================


class ExerciseSchema(BaseModel):
    """Validation rules for an existing exercise."""

    id: str
    workout_id: str
    name: str

    model_config = {"extra": "ignore"}

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        return _required_id("exercise", v)

    @field_validator("workout_id", mode="before")
    @classmethod
    def validate_workout_id(cls, v: Any) -> str:
        return _required_id("workout", v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        name = v.strip()
        if len(name) < 1:
            raise ValueError("A name must be at least 1 character")
        if len(name) > MAX_NAME_LENGTH:
            raise ValueError(f"A name must be at most {MAX_NAME_LENGTH} characters")
        return name


class NewExerciseSchema(ExerciseSchema):
    workout_id: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        return _new_id("exercise", v)

    @field_validator("workout_id", mode="before")
    @classmethod
    def validate_workout_id(cls, v: Any) -> str:
        return "" if v is None else str(v)


# =============================================================================
# Workout schema (parent fields, errors collected rather than fail-fast)
# =============================================================================


class WorkoutSchema(BaseModel):
    id: str
    user_id: str
    title: str
    date: Optional[Date] = Field(default=None, validate_default=True)
    description: Optional[str] = ""
    image: Optional[str] = ""
    tag_ids: List[str] = []

    model_config = {"extra": "ignore"}

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        return _required_id("workout", v)

    @field_validator("user_id", mode="before")
    @classmethod
    def validate_user_id(cls, v: Any) -> str:
        return _required_id("user", v)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        title = v.strip()
        if len(title) < 1:
            raise ValueError("A title must be at least 1 character")
        if len(title) > MAX_TITLE_LENGTH:
            raise ValueError(f"A title must be at most {MAX_TITLE_LENGTH} characters")
        return title

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: Optional[Date]) -> Date:
        if v is None:
            raise ValueError("Date for workout is required")
        if v > Date.today() + timedelta(days=1):
            raise ValueError("A workout date must not be after today")
        return v

    @field_validator("image")
    @classmethod
    def validate_image(cls, v: Optional[str]) -> str:
        v = v or ""
        if not verify_image_url(v):
            raise ValueError("Invalid URL")
        return v


class NewWorkoutSchema(WorkoutSchema):
    """A workout that has not been inserted yet carries no id."""

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        return _new_id("workout", v)


def validate_workout_fields(
    workout: Mapping[str, Any],
    is_new: bool = False,
) -> Tuple[Optional[WorkoutSchema], Dict[str, List[str]]]:
    """Validate parent workout fields, collecting every field error."""
    schema = NewWorkoutSchema if is_new else WorkoutSchema
    try:
        return schema.model_validate(dict(workout)), {}
    except ValidationError as e:
        return None, field_errors(e)


# =============================================================================
# Record kinds
# =============================================================================


@dataclass(frozen=True)
class RecordKind:
    """
    Description of one ordered child record type.

    - label: human-readable name used in error messages
    - parent_field: link to the owning record, supplied by persistence on create
    - order_field: position column, always derived from list position
    - schema / new_schema: validation for existing / not yet persisted records
    - content_fields: columns copied into create and update payloads
    - is_empty: emptiness predicate, or None when the kind has none
    """

    label: str
    parent_field: str
    order_field: str
    schema: Type[BaseModel]
    new_schema: Type[BaseModel]
    content_fields: Tuple[str, ...]
    is_empty: Optional[Callable[[Mapping[str, Any]], bool]] = None

    def validate(self, record: Mapping[str, Any], is_new: bool) -> Tuple[Optional[BaseModel], Dict[str, List[str]]]:
        schema = self.new_schema if is_new else self.schema
        try:
            return schema.model_validate(dict(record)), {}
        except ValidationError as e:
            return None, field_errors(e)

    def content(self, validated: BaseModel) -> Dict[str, Any]:
        return validated.model_dump(include=set(self.content_fields))


EXERCISE_KIND = RecordKind(
    label="exercise",
    parent_field="workout_id",
    order_field="exercise_order",
    schema=ExerciseSchema,
    new_schema=NewExerciseSchema,
    content_fields=("name",),
)

ENTRY_KIND = RecordKind(
    label="entry",
    parent_field="exercise_id",
    order_field="entry_order",
    schema=EntrySchema,
    new_schema=NewEntrySchema,
    content_fields=("hours", "minutes", "seconds", "weight", "repetitions", "text"),
    is_empty=is_empty_entry,
)
