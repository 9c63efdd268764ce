"""
Caller-owned holder for a form's current FormState snapshot.

The store is created by whatever owns the form (an editor session, a
request handler) and discarded with it. It serializes intents: each
dispatch replaces the current snapshot with the reducer's output, and
snapshots handed out earlier stay valid and unchanged.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, Union

from domain.models.form_state import FieldState, FormState
from domain.models.response import ServiceResponse
from domain.services.form_reducer import FormAction, form_reducer

logger = logging.getLogger(__name__)


@dataclass
class ResponseOutcome:
    """What the UI should do after a response was processed."""

    status: str
    focus_field: Optional[str] = None
    notification: Optional[str] = None


class FormStore:
    """
    Mutable reference to an immutable FormState.

    Usage:
        >>> store = FormStore([FieldState(id="title", value="")])
        >>> store.dispatch(FormAction(type="update_field", field_id="title", value={"value": "Run"}))
        >>> store.state["title"].value
        'Run'
    """

    def __init__(self, fields: Union[List[FieldState], Mapping[str, FieldState], FormState]):
        if isinstance(fields, FormState):
            self._state = fields
        else:
            self._state = FormState.initial(fields)

    @property
    def state(self) -> FormState:
        """The current snapshot."""
        return self._state

    def dispatch(self, action: FormAction) -> FormState:
        """Apply an action and return the new snapshot."""
        self._state = form_reducer(self._state, action)
        return self._state

    def rebase(self, baseline: Mapping[str, FieldState]) -> FormState:
        """Replace the static baseline, e.g. after a committed save."""
        self._state = self._state.with_baseline(baseline)
        return self._state

    def first_error(self) -> Optional[str]:
        """Id of the first field currently carrying an error."""
        for field_id, field in self._state.items():
            if field.error is not None:
                return field_id
        return None

    def process_response(
        self,
        response: ServiceResponse,
        on_success: Optional[Callable[[], None]] = None,
    ) -> ResponseOutcome:
        """
        Route a service response into the store.

        - Success: invoke `on_success`
        - Error with field errors: merge them and report the first field in
          error so the UI can scroll to it
        - anything else: a single notification without field attribution
        """
        if response.is_success:
            if on_success is not None:
                on_success()
            return ResponseOutcome(status=response.status)

        if response.has_field_errors:
            self.dispatch(FormAction(type="merge_server_errors", value=response.body.errors))
            focus = self.first_error()
            if focus is None:
                # Errors belong to fields this form does not render
                return ResponseOutcome(status=response.status, notification=response.body.message)
            logger.debug(f"Merged server errors, focusing field {focus!r}")
            return ResponseOutcome(status=response.status, focus_field=focus)

        return ResponseOutcome(status=response.status, notification=response.body.message)
