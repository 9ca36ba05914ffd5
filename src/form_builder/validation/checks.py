"""Primitive field checks used by the rule compiler.

A check takes the field value plus the full value map and returns an error
message, or None when the value passes. Checks may be coroutines; the
compiled rule awaits them.

Messages are literal; the UI shows them as-is.
"""

import inspect
import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence, Union

from pydantic import HttpUrl, TypeAdapter, ValidationError

CheckResult = Optional[str]
CheckFunc = Callable[[Any, Mapping[str, Any]], Union[CheckResult, Awaitable[CheckResult]]]

PHONE_PATTERN = re.compile(r"^[+]?[(]?\d{3}[)]?[-\s]?\d{3}[-\s]?\d{4,6}$")
EMAIL_PATTERN = re.compile(
    r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@"
    r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)+$"
)
_NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
# ISO: 2026-01-23 (optionally followed by T or space + time)
_ISO_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:[T\s].*)?$")

_url_adapter = TypeAdapter(HttpUrl)


@dataclass(frozen=True)
class Check:
    """A named check. ``skip_empty`` checks do not run on empty values."""

    code: str
    func: CheckFunc
    skip_empty: bool = True

    async def run(self, value: Any, values: Mapping[str, Any]) -> CheckResult:
        result = self.func(value, values)
        if inspect.isawaitable(result):
            result = await result
        return result


def is_empty(value: Any) -> bool:
    """None, blank strings and empty collections count as empty."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def format_number(value: Union[int, float]) -> str:
    """Render 5.0 as "5" and 2.5 as "2.5"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def coerce_number(value: Any) -> Optional[float]:
    """Convert a form value to float, or None when it is not a number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and _NUMBER_PATTERN.match(value.strip()):
        number = float(value.strip())
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def coerce_date(value: Any) -> Optional[date]:
    """Convert a form value (ISO string, date or datetime) to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    match = _ISO_DATE_PATTERN.match(value.strip())
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


# =============================================================================
# CHECK FACTORIES
# =============================================================================


def required_check(message: str) -> Check:
    def _check(value: Any, values: Mapping[str, Any]) -> CheckResult:
        return message if is_empty(value) else None

    return Check("required", _check, skip_empty=False)


def min_length_check(limit: int) -> Check:
    def _check(value: Any, values: Mapping[str, Any]) -> CheckResult:
        if len(str(value)) < limit:
            return f"Minimum {limit} characters required"
        return None

    return Check("min_length", _check)


def max_length_check(limit: int) -> Check:
    def _check(value: Any, values: Mapping[str, Any]) -> CheckResult:
        if len(str(value)) > limit:
            return f"Maximum {limit} characters allowed"
        return None

    return Check("max_length", _check)


def pattern_check(code: str, pattern: re.Pattern, message: str) -> Check:
    def _check(value: Any, values: Mapping[str, Any]) -> CheckResult:
        return None if pattern.match(str(value).strip()) else message

    return Check(code, _check)


def email_check() -> Check:
    return pattern_check("email", EMAIL_PATTERN, "Invalid email format")


def phone_check() -> Check:
    return pattern_check("phone", PHONE_PATTERN, "Invalid phone number")


def url_check() -> Check:
    def _check(value: Any, values: Mapping[str, Any]) -> CheckResult:
        try:
            _url_adapter.validate_python(str(value).strip())
        except ValidationError:
            return "Invalid URL"
        return None

    return Check("url", _check)


def number_check(minimum: Optional[float] = None, maximum: Optional[float] = None) -> Check:
    def _check(value: Any, values: Mapping[str, Any]) -> CheckResult:
        number = coerce_number(value)
        if number is None:
            return "Must be a number"
        if minimum is not None and number < minimum:
            return f"Minimum value is {format_number(minimum)}"
        if maximum is not None and number > maximum:
            return f"Maximum value is {format_number(maximum)}"
        return None

    return Check("number", _check)


def date_check(
    min_date: Optional[date] = None,
    max_date: Optional[date] = None,
    max_date_today: bool = False,
    today: Callable[[], date] = date.today,
) -> Check:
    """Date parsing plus bounds.

    When ``max_date_today`` is set the upper bound is ``today()`` evaluated on
    every run, not when the check is built.
    """

    def _check(value: Any, values: Mapping[str, Any]) -> CheckResult:
        parsed = coerce_date(value)
        if parsed is None:
            return "Please enter a valid date"
        if min_date is not None and parsed < min_date:
            return f"Date must be after {min_date.isoformat()}"
        upper = today() if max_date_today else max_date
        if upper is not None and parsed > upper:
            return f"Date must be before {upper.isoformat()}"
        return None

    return Check("date", _check)


def options_check(options: Sequence[str]) -> Check:
    allowed = tuple(options)

    def _check(value: Any, values: Mapping[str, Any]) -> CheckResult:
        return None if value in allowed else "Please select a valid option"

    return Check("options", _check)


def equals_check(other_field: str, message: str) -> Check:
    def _check(value: Any, values: Mapping[str, Any]) -> CheckResult:
        return None if values.get(other_field) == value else message

    return Check("equals", _check)


def predicate_check(predicate: Callable[[Any], bool], message: str) -> Check:
    def _check(value: Any, values: Mapping[str, Any]) -> CheckResult:
        return None if predicate(value) else message

    return Check("custom", _check)
