"""Validation rule compiler and the checks it composes."""

from form_builder.validation.checks import Check
from form_builder.validation.compiler import (
    FieldRule,
    FieldValidationResult,
    FormValidationResult,
    ValidationRuleset,
    compile_field,
    compile_ruleset,
)
from form_builder.validation.expressions import SafeExpression, compile_expression

__all__ = [
    "Check",
    "FieldRule",
    "FieldValidationResult",
    "FormValidationResult",
    "SafeExpression",
    "ValidationRuleset",
    "compile_expression",
    "compile_field",
    "compile_ruleset",
]
