"""
Widget Factory - renderer dispatch for schema-driven forms.

Every field maps to exactly one strategy:
- select -> enumerated choice (st.selectbox) over ``options``
- anything else -> free input, with the declared type as the input hint:
    password -> masked st.text_input
    date     -> st.date_input (calendar)
    number   -> st.number_input
    other    -> st.text_input

Dispatch produces a plain WidgetSpec first so it can be tested without a UI;
render_widget() draws a WidgetSpec with Streamlit. The widgets hold no
validation logic: they report edits through the session's change/blur
handlers, and show the session's error once the field is touched.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Callable, Optional, Tuple

import streamlit as st

from form_builder.schemas.form_schema import FieldSpec, FieldType
from form_builder.validation.checks import coerce_date, coerce_number

ChangeHandler = Callable[[str, Any], Any]
BlurHandler = Callable[[str], Any]

EMPTY_OPTION = ""


class WidgetStrategy(str, Enum):
    ENUMERATED_CHOICE = "enumerated_choice"
    FREE_INPUT = "free_input"


@dataclass(frozen=True)
class WidgetSpec:
    """Everything needed to draw one field."""

    name: str
    label: str
    strategy: WidgetStrategy
    input_type: str
    value: Any = ""
    error: str = ""
    required: bool = False
    options: Tuple[str, ...] = ()
    placeholder: Optional[str] = None
    help_text: Optional[str] = None
    masked: bool = False
    min_date: Optional[date] = None
    max_date: Optional[date] = None

    @property
    def display_label(self) -> str:
        return f"{self.label} *" if self.required else self.label

    @property
    def widget_key(self) -> str:
        return f"field__{self.name}"


class WidgetFactory:
    """Builds WidgetSpecs from field declarations and session state."""

    @staticmethod
    def build(
        field: FieldSpec,
        value: Any = "",
        error: str = "",
        touched: bool = False,
        today: Callable[[], date] = date.today,
    ) -> WidgetSpec:
        """
        Select the widget strategy for a field.

        Args:
            field: Field declaration
            value: Current session value
            error: Current session error for the field
            touched: Whether the field was touched; errors show only then
            today: Clock for ``maxDateHint: "today"``

        Returns:
            WidgetSpec describing the widget to draw
        """
        kind = field.field_type
        shown_error = error if touched else ""

        if kind == FieldType.SELECT:
            current = value if value in (field.options or []) else EMPTY_OPTION
            return WidgetSpec(
                name=field.name,
                label=field.label,
                strategy=WidgetStrategy.ENUMERATED_CHOICE,
                input_type=field.type,
                value=current,
                error=shown_error,
                required=field.required,
                options=(EMPTY_OPTION, *(field.options or [])),
                help_text=field.helper_text,
            )

        max_date = field.max_date
        if kind == FieldType.DATE and field.max_date_hint:
            max_date = today()

        return WidgetSpec(
            name=field.name,
            label=field.label,
            strategy=WidgetStrategy.FREE_INPUT,
            input_type=field.type,
            value=value if value is not None else "",
            error=shown_error,
            required=field.required,
            placeholder=field.placeholder,
            help_text=field.helper_text,
            masked=kind == FieldType.PASSWORD,
            min_date=field.min_date if kind == FieldType.DATE else None,
            max_date=max_date if kind == FieldType.DATE else None,
        )


def _normalize_number(value: Optional[float]) -> Any:
    if value is None:
        return ""
    if float(value).is_integer():
        return int(value)
    return value


def _normalize_date(value: Any) -> str:
    if isinstance(value, date):
        return value.isoformat()
    return ""


def render_widget(spec: WidgetSpec, on_change: ChangeHandler, on_blur: BlurHandler, disabled: bool = False) -> None:
    """
    Draw one WidgetSpec with Streamlit.

    Streamlit reports a value when the input is committed (enter or focus
    loss), so a commit calls on_change followed by on_blur.
    """
    key = spec.widget_key

    def commit(convert: Callable[[Any], Any]) -> Callable[[], None]:
        def callback() -> None:
            on_change(spec.name, convert(st.session_state[key]))
            on_blur(spec.name)
        return callback

    if spec.strategy == WidgetStrategy.ENUMERATED_CHOICE:
        st.selectbox(
            spec.display_label,
            options=list(spec.options),
            index=spec.options.index(spec.value) if spec.value in spec.options else 0,
            key=key,
            help=spec.help_text,
            format_func=lambda x: "Select..." if x == EMPTY_OPTION else x,
            on_change=commit(lambda v: v or EMPTY_OPTION),
            disabled=disabled,
        )

    elif spec.input_type == FieldType.DATE.value:
        st.date_input(
            spec.display_label,
            value=coerce_date(spec.value),
            min_value=spec.min_date,
            max_value=spec.max_date,
            format="YYYY-MM-DD",
            key=key,
            help=spec.help_text,
            on_change=commit(_normalize_date),
            disabled=disabled,
        )

    elif spec.input_type == FieldType.NUMBER.value:
        st.number_input(
            spec.display_label,
            value=coerce_number(spec.value),
            step=1.0,
            key=key,
            help=spec.help_text,
            placeholder=spec.placeholder,
            on_change=commit(_normalize_number),
            disabled=disabled,
        )

    else:
        st.text_input(
            spec.display_label,
            value=str(spec.value or ""),
            type="password" if spec.masked else "default",
            placeholder=spec.placeholder,
            key=key,
            help=spec.help_text,
            on_change=commit(lambda v: v or ""),
            disabled=disabled,
        )

    if spec.error:
        st.error(spec.error)
