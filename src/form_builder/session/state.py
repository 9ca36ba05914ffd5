"""Form Session State Machine.

One FormSession per rendered form. It owns the field values, touched flags,
per-field errors and the submission phase, and changes them only through its
transition methods (load_schema, change, blur, submit, reset,
dismiss_messages).

Phases::

    uninitialized -> ready -> validating -> submitting -> settled_success -> ready
                                        \\-> ready     \\-> settled_error   -> ready

Blur validation may suspend. Each field carries a monotonic version that
change/blur bump; a validation result is applied only if the version is
unchanged when it completes.
"""

import inspect
import logging
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Sequence, Union

from form_builder.gateways.protocol import SubmissionGateway
from form_builder.schemas.form_schema import FormSchema
from form_builder.validation.checks import Check
from form_builder.validation.compiler import FieldValidationResult, ValidationRuleset, compile_ruleset

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Form submitted successfully!"
SUBMIT_ERROR_MESSAGE = "Error submitting form. Please try again."


class FormPhase(str, Enum):
    """Lifecycle of a form session."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SETTLED_SUCCESS = "settled_success"
    SETTLED_ERROR = "settled_error"


class SubmitOutcome(str, Enum):
    """What a submit attempt did."""

    INVALID = "invalid"
    SUBMITTED = "submitted"
    FAILED = "failed"
    IGNORED = "ignored"


_TRANSITIONS = {
    FormPhase.UNINITIALIZED: {FormPhase.READY},
    FormPhase.READY: {FormPhase.VALIDATING},
    FormPhase.VALIDATING: {FormPhase.READY, FormPhase.SUBMITTING},
    FormPhase.SUBMITTING: {FormPhase.SETTLED_SUCCESS, FormPhase.SETTLED_ERROR},
    FormPhase.SETTLED_SUCCESS: {FormPhase.READY},
    FormPhase.SETTLED_ERROR: {FormPhase.READY},
}

SubmittedCallback = Callable[[], Union[None, Awaitable[None]]]


class FormSession:
    """Mutable per-render state for one form."""

    def __init__(
        self,
        submissions: SubmissionGateway,
        on_submitted: Optional[SubmittedCallback] = None,
        today: Callable[[], date] = date.today,
        extra_checks: Optional[Mapping[str, Sequence[Check]]] = None,
    ):
        """
        Args:
            submissions: Gateway used to persist a valid submission.
            on_submitted: Called after a successful submission (e.g. refresh
                the submissions list). May be a coroutine function.
            today: Clock for date bounds with the "today" sentinel.
            extra_checks: Additional per-field checks passed to the compiler.
        """
        self._submissions = submissions
        self._on_submitted = on_submitted
        self._today = today
        self._extra_checks = extra_checks

        self._schema: Optional[FormSchema] = None
        self._ruleset: Optional[ValidationRuleset] = None
        self._phase = FormPhase.UNINITIALIZED

        self._values: Dict[str, Any] = {}
        self._errors: Dict[str, str] = {}
        self._touched: Dict[str, bool] = {}
        self._versions: Dict[str, int] = {}
        self._schema_generation = 0
        self._reset_count = 0

        self.success_message: Optional[str] = None
        self.error_message: Optional[str] = None
        self.last_submission_error: Optional[Exception] = None

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    @property
    def phase(self) -> FormPhase:
        return self._phase

    @property
    def schema(self) -> Optional[FormSchema]:
        return self._schema

    @property
    def ruleset(self) -> Optional[ValidationRuleset]:
        return self._ruleset

    @property
    def values(self) -> Mapping[str, Any]:
        return MappingProxyType(self._values)

    @property
    def errors(self) -> Mapping[str, str]:
        return MappingProxyType(self._errors)

    @property
    def touched(self) -> Mapping[str, bool]:
        return MappingProxyType(self._touched)

    @property
    def is_submitting(self) -> bool:
        return self._phase in (FormPhase.VALIDATING, FormPhase.SUBMITTING)

    def error_for(self, name: str) -> str:
        return self._errors.get(name, "")

    def is_touched(self, name: str) -> bool:
        return self._touched.get(name, False)

    def snapshot(self) -> Dict[str, Any]:
        """Plain-dict copy of the session state."""
        return {
            "phase": self._phase.value,
            "values": dict(self._values),
            "errors": dict(self._errors),
            "touched": dict(self._touched),
            "success_message": self.success_message,
            "error_message": self.error_message,
        }

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def _transition(self, new_phase: FormPhase) -> None:
        if new_phase not in _TRANSITIONS[self._phase]:
            raise RuntimeError(f"Illegal form transition {self._phase.value} -> {new_phase.value}")
        logger.debug(f"Form session: {self._phase.value} -> {new_phase.value}")
        self._phase = new_phase

    def _clear_form(self) -> None:
        names = self._schema.field_names if self._schema else []
        self._values = {name: "" for name in names}
        self._errors = {}
        self._touched = {}
        for name in names:
            self._versions[name] = self._versions.get(name, 0) + 1

    def _require_field(self, name: str) -> None:
        if self._schema is None:
            raise RuntimeError("No form schema loaded")
        if name not in self._values:
            raise KeyError(f"Unknown field '{name}'")

    def _bump(self, name: str) -> int:
        self._versions[name] = self._versions.get(name, 0) + 1
        return self._versions[name]

    def load_schema(self, schema: FormSchema) -> None:
        """Compile the schema and (re)initialize the form."""
        self._ruleset = compile_ruleset(schema.fields, today=self._today, extra_checks=self._extra_checks)
        self._schema = schema
        self._schema_generation += 1
        self._clear_form()
        if self._phase != FormPhase.SUBMITTING:
            # an in-flight submission returns the session to ready itself
            logger.debug(f"Form session: {self._phase.value} -> {FormPhase.READY.value}")
            self._phase = FormPhase.READY
        for name, reason in self._ruleset.skipped_checks.items():
            logger.warning(f"Form '{schema.title}': custom check for '{name}' skipped ({reason})")

    def change(self, name: str, value: Any) -> bool:
        """Set a field value. Returns False when edits are not accepted."""
        self._require_field(name)
        if self._phase != FormPhase.READY:
            logger.debug(f"Ignoring change to '{name}' while {self._phase.value}")
            return False
        self._values[name] = value
        self._bump(name)
        if self._errors.get(name):
            # re-validated on blur, not on every keystroke
            self._errors[name] = ""
        return True

    async def blur(self, name: str) -> Optional[FieldValidationResult]:
        """Mark a field touched and validate it.

        Returns:
            The validation result, or None if it was discarded as stale or
            edits are not accepted.
        """
        self._require_field(name)
        if self._phase != FormPhase.READY:
            return None

        self._touched[name] = True
        version = self._bump(name)
        generation = self._schema_generation
        ruleset = self._ruleset

        result = await ruleset.validate_one(name, self._values[name], self._values)

        if self._schema_generation != generation or self._versions.get(name) != version:
            logger.debug(f"Discarding stale validation result for '{name}'")
            return None
        self._errors[name] = result.error or ""
        return result

    async def submit(self) -> SubmitOutcome:
        """Validate everything and, if valid, create a submission."""
        if self._schema is None:
            raise RuntimeError("No form schema loaded")
        if self._phase != FormPhase.READY:
            logger.debug(f"Ignoring submit while {self._phase.value}")
            return SubmitOutcome.IGNORED

        schema = self._schema
        generation = self._schema_generation
        resets = self._reset_count
        # the same snapshot is validated and submitted
        values = dict(self._values)
        self._transition(FormPhase.VALIDATING)
        try:
            result = await self._ruleset.validate_all(values)
        except BaseException:
            if self._phase == FormPhase.VALIDATING and self._reset_count == resets:
                self._transition(FormPhase.READY)
            raise

        if (
            self._schema_generation != generation
            or self._reset_count != resets
            or self._phase != FormPhase.VALIDATING
        ):
            logger.debug(f"Abandoning submit of '{schema.title}': form was reset or reloaded")
            return SubmitOutcome.IGNORED

        if not result.is_valid:
            self._errors = dict(result.errors)
            self._touched = {name: True for name in schema.field_names}
            self._transition(FormPhase.READY)
            return SubmitOutcome.INVALID

        self._transition(FormPhase.SUBMITTING)
        self.success_message = None
        self.error_message = None
        self.last_submission_error = None

        try:
            await self._submissions.create_submission(schema.title, values)
        except Exception as e:
            logger.error(f"Form submission failed for '{schema.title}': {e}", exc_info=True)
            self._transition(FormPhase.SETTLED_ERROR)
            self.error_message = SUBMIT_ERROR_MESSAGE
            self.last_submission_error = e
            self._transition(FormPhase.READY)
            return SubmitOutcome.FAILED
        except BaseException:
            # cancelled mid-request: the outcome is unknown, keep the values
            self._phase = FormPhase.READY
            raise

        self._transition(FormPhase.SETTLED_SUCCESS)
        self.success_message = SUCCESS_MESSAGE
        try:
            await self._notify_submitted(schema.title)
        finally:
            if self._schema_generation == generation:
                self._clear_form()
            self._transition(FormPhase.READY)
        return SubmitOutcome.SUBMITTED

    async def _notify_submitted(self, title: str) -> None:
        if self._on_submitted is None:
            return
        try:
            outcome = self._on_submitted()
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            logger.warning(f"Post-submit callback failed for '{title}': {e}", exc_info=True)

    def reset(self) -> None:
        """Clear values, errors and touched flags. Idempotent.

        A reset while the form is validating abandons that submit.
        """
        if self._schema is None:
            return
        self._clear_form()
        self._reset_count += 1
        if self._phase == FormPhase.VALIDATING:
            self._transition(FormPhase.READY)

    def dismiss_messages(self) -> None:
        self.success_message = None
        self.error_message = None
