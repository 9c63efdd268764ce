"""
Response envelope shared by services and the form store.

Three outcomes:
- Success: operation applied, `data` carries the result
- Error: expected validation failure, `errors` maps field ids to messages
- Failure: unexpected error, surfaced as a single notification
"""

import logging
from typing import Any, Dict, Generic, List, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

T = TypeVar("T")

GENERIC_FAILURE_MESSAGE = "Something went wrong. Please try again."

ResponseStatus = Literal["Success", "Error", "Failure"]


class ResponseBody(BaseModel, Generic[T]):
    message: str = ""
    data: Optional[T] = None
    errors: Dict[str, List[str]] = Field(default_factory=dict)


class ServiceResponse(BaseModel, Generic[T]):
    """Status plus body, mirroring what the form store consumes."""

    status: ResponseStatus
    body: ResponseBody[T] = Field(default_factory=ResponseBody)

    @property
    def is_success(self) -> bool:
        return self.status == "Success"

    @property
    def has_field_errors(self) -> bool:
        return self.status == "Error" and bool(self.body.errors)


def send_success_message(message: str, data: Any = None) -> ServiceResponse:
    return ServiceResponse(
        status="Success",
        body=ResponseBody(message=message, data=data, errors={}),
    )


def send_error_message(
    message: str,
    errors: Optional[Dict[str, List[str]]] = None,
    data: Any = None,
) -> ServiceResponse:
    return ServiceResponse(
        status="Error",
        body=ResponseBody(message=message, data=data, errors=errors or {}),
    )


def send_failure_message(error: Optional[Union[BaseException, str]] = None) -> ServiceResponse:
    """
    Build a generic failure response.

    The underlying error is only attached under the `system` key; callers
    never show it per field.
    """
    errors: Dict[str, List[str]] = {}
    if error is not None:
        logger.debug(f"Failure response: {error}")
        errors["system"] = [str(error)]
    return ServiceResponse(
        status="Failure",
        body=ResponseBody(message=GENERIC_FAILURE_MESSAGE, data=None, errors=errors),
    )
