"""Validation Rule Compiler.

Turns a list of FieldSpec into a ValidationRuleset: one composed rule per
field name. Compilation is pure and never fails on an unknown field type.
A malformed custom predicate is logged and dropped; the rest of that field's
rules still apply.

Checks within a field run in order and the first failure wins. Across
fields validation never short-circuits: validate_all reports every invalid
field.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from form_builder.errors import ExpressionError, FieldValidationError, FormValidationError
from form_builder.schemas.form_schema import TODAY_SENTINEL, FieldSpec, FieldType
from form_builder.validation.checks import (
    Check,
    date_check,
    email_check,
    equals_check,
    is_empty,
    max_length_check,
    min_length_check,
    number_check,
    options_check,
    phone_check,
    predicate_check,
    required_check,
    url_check,
)
from form_builder.validation.expressions import compile_expression

logger = logging.getLogger(__name__)

CONFIRM_REQUIRED_MESSAGE = "Confirm password is required"
PASSWORDS_MISMATCH_MESSAGE = "Passwords must match"

_STRING_LIKE = {None, FieldType.TEXT, FieldType.PASSWORD, FieldType.EMAIL, FieldType.PHONE, FieldType.URL, FieldType.SELECT}


@dataclass(frozen=True)
class FieldValidationResult:
    is_valid: bool
    error: Optional[str] = None

    def raise_if_invalid(self, name: str) -> None:
        if not self.is_valid:
            raise FieldValidationError(name, self.error or "")


@dataclass(frozen=True)
class FormValidationResult:
    is_valid: bool
    errors: Dict[str, str] = field(default_factory=dict)

    def raise_if_invalid(self) -> None:
        if not self.is_valid:
            raise FormValidationError(self.errors)


@dataclass(frozen=True)
class FieldRule:
    """Composed rule for one field."""

    name: str
    label: str
    checks: Tuple[Check, ...]

    async def validate(self, value: Any, values: Mapping[str, Any]) -> Optional[str]:
        """Return the first failing check's message, or None."""
        empty = is_empty(value)
        for check in self.checks:
            if empty and check.skip_empty:
                continue
            try:
                message = await check.run(value, values)
            except Exception:
                logger.exception(f"Check '{check.code}' raised for field '{self.name}'")
                return f"Unable to validate {self.label}"
            if message:
                return message
        return None


class ValidationRuleset:
    """Compiled, read-only validation rules keyed by field name."""

    def __init__(self, rules: Iterable[FieldRule], skipped: Optional[Mapping[str, str]] = None):
        self._rules = MappingProxyType({rule.name: rule for rule in rules})
        self._skipped = MappingProxyType(dict(skipped or {}))

    @property
    def rules(self) -> Mapping[str, FieldRule]:
        return self._rules

    @property
    def skipped_checks(self) -> Mapping[str, str]:
        """Field name -> reason, for custom predicates that failed to compile."""
        return self._skipped

    @property
    def field_names(self) -> List[str]:
        return list(self._rules)

    async def validate_one(
        self, name: str, value: Any, all_values: Optional[Mapping[str, Any]] = None
    ) -> FieldValidationResult:
        """Validate one field; other values feed cross-field checks."""
        rule = self._rules.get(name)
        if rule is None:
            return FieldValidationResult(is_valid=True)

        values = dict(all_values or {})
        values[name] = value
        error = await rule.validate(value, values)
        return FieldValidationResult(is_valid=error is None, error=error)

    async def validate_all(self, values: Mapping[str, Any]) -> FormValidationResult:
        """Validate every field and collect all errors."""
        snapshot = dict(values)
        names = list(self._rules)
        messages = await asyncio.gather(
            *(self._rules[name].validate(snapshot.get(name), snapshot) for name in names)
        )
        errors = {name: message for name, message in zip(names, messages) if message}
        return FormValidationResult(is_valid=not errors, errors=errors)


def _base_checks(spec: FieldSpec, today: Callable[[], date]) -> List[Check]:
    """Type-derived checks. Unknown types get the plain string checker."""
    kind = spec.field_type

    if kind == FieldType.NUMBER:
        return [number_check(spec.min, spec.max)]
    if kind == FieldType.DATE:
        return [
            date_check(
                min_date=spec.min_date,
                max_date=spec.max_date,
                max_date_today=spec.max_date_hint == TODAY_SENTINEL,
                today=today,
            )
        ]
    if kind == FieldType.EMAIL:
        return [email_check()]
    if kind == FieldType.PHONE:
        return [phone_check()]
    if kind == FieldType.URL:
        return [url_check()]
    if kind == FieldType.SELECT:
        return [options_check(spec.options or [])]
    # text, password and anything not yet known
    return []


def _length_checks(spec: FieldSpec) -> List[Check]:
    if spec.field_type not in _STRING_LIKE:
        return []
    checks = []
    if spec.min_length:
        checks.append(min_length_check(spec.min_length))
    if spec.max_length is not None:
        checks.append(max_length_check(spec.max_length))
    return checks


def _custom_check(spec: FieldSpec, skipped: Dict[str, str]) -> List[Check]:
    source = spec.custom_validation_function_string
    if not source:
        return []
    try:
        predicate = compile_expression(source)
    except ExpressionError as e:
        logger.warning(f"Skipping custom validation for field '{spec.name}': {e.reason}")
        skipped[spec.name] = e.reason
        return []
    message = spec.custom_validation_message or f"{spec.label} is invalid"
    return [predicate_check(predicate, message)]


def compile_field(
    spec: FieldSpec,
    today: Callable[[], date] = date.today,
    skipped: Optional[Dict[str, str]] = None,
) -> FieldRule:
    """Build the rule for a single field (without the confirm-password pass)."""
    skipped = skipped if skipped is not None else {}
    checks: List[Check] = []
    if spec.required:
        checks.append(required_check(f"{spec.label} is required"))
    checks.extend(_base_checks(spec, today))
    checks.extend(_length_checks(spec))
    checks.extend(_custom_check(spec, skipped))
    return FieldRule(name=spec.name, label=spec.label, checks=tuple(checks))


def compile_ruleset(
    fields: Sequence[FieldSpec],
    *,
    today: Callable[[], date] = date.today,
    extra_checks: Optional[Mapping[str, Sequence[Check]]] = None,
) -> ValidationRuleset:
    """Compile a field list into a ValidationRuleset.

    Args:
        fields: Field declarations, in form order.
        today: Clock used to resolve ``maxDateHint: "today"`` at validation time.
        extra_checks: Additional checks (sync or async) appended per field
            name, e.g. a server-side uniqueness check.

    Returns:
        ValidationRuleset with one rule per field.
    """
    skipped: Dict[str, str] = {}
    rules: Dict[str, FieldRule] = {}

    for spec in fields:
        rules[spec.name] = compile_field(spec, today=today, skipped=skipped)

    # Confirm-password fields drop every other rule.
    for spec in fields:
        if spec.confirm_password:
            rules[spec.name] = FieldRule(
                name=spec.name,
                label=spec.label,
                checks=(
                    required_check(CONFIRM_REQUIRED_MESSAGE),
                    equals_check(spec.confirm_password, PASSWORDS_MISMATCH_MESSAGE),
                ),
            )

    for name, checks in (extra_checks or {}).items():
        rule = rules.get(name)
        if rule is None:
            logger.warning(f"Extra checks given for unknown field '{name}'")
            continue
        rules[name] = FieldRule(name=rule.name, label=rule.label, checks=rule.checks + tuple(checks))

    logger.debug(f"Compiled validation rules for {len(rules)} field(s)")
    return ValidationRuleset(rules.values(), skipped=skipped)
