"""Unit tests for the custom predicate interpreter."""

import time
from unittest.mock import patch

import pytest

from form_builder.errors import ExpressionError
from form_builder.validation.expressions import (
    MATCH_TIMEOUT,
    MAX_SOURCE_LENGTH,
    compile_expression,
    normalize_source,
)


class TestNormalizeSource:
    """Tests for JS-flavoured source rewriting."""

    def test_strips_arrow_prefix(self):
        assert normalize_source("value => value.length > 2") == "value.length > 2"
        assert normalize_source("(value) => true") == "true"

    def test_strips_lambda_prefix(self):
        assert normalize_source("lambda value: len(value) > 2") == "len(value) > 2"

    def test_unwraps_block_body(self):
        assert normalize_source("value => { return value.length > 2; }") == "value.length > 2"

    def test_rewrites_operators_outside_strings(self):
        normalized = normalize_source("value === 'a&&b' && !value.includes('!')")
        assert "'a&&b'" in normalized
        assert "'!'" in normalized
        assert " and " in normalized
        assert " not " in normalized
        assert "===" not in normalized


class TestCompileExpression:
    """Tests for compiling and evaluating predicates."""

    def test_js_arrow_predicate(self):
        predicate = compile_expression('value => value.length >= 3 && !value.includes(" ")')
        assert predicate("alice")
        assert not predicate("al")
        assert not predicate("al ice")

    def test_python_lambda_predicate(self):
        predicate = compile_expression('lambda value: matches("^[A-Z]", value)')
        assert predicate("Alice")
        assert not predicate("alice")

    def test_bare_expression(self):
        predicate = compile_expression("len(value) % 2 == 0")
        assert predicate("ab")
        assert not predicate("abc")

    def test_string_methods(self):
        predicate = compile_expression("value.toLowerCase().startsWith('admin') === false")
        assert predicate("bob")
        assert not predicate("ADMINISTRATOR")

    def test_number_helper(self):
        predicate = compile_expression("number(value) > 10")
        assert predicate("11")
        assert not predicate("9")

    def test_membership_and_conditional(self):
        predicate = compile_expression("value in ['a', 'b'] if value else true")
        assert predicate("a")
        assert predicate("")
        assert not predicate("c")

    def test_runtime_failure_is_false(self):
        predicate = compile_expression("number(value) > 10")
        assert predicate("ten") is False

    @pytest.mark.parametrize(
        "source",
        [
            "__import__('os').system('ls')",
            "value.__class__",
            "open('/etc/passwd')",
            "[x for x in value]",
            "value[0]",
            "other == 1",
            "value ** 2",
            "len(value=1)",
            "value.split(',')",
        ],
    )
    def test_rejects_syntax_outside_grammar(self, source):
        with pytest.raises(ExpressionError):
            compile_expression(source)

    def test_rejects_syntax_errors(self):
        with pytest.raises(ExpressionError) as exc_info:
            compile_expression("value =>")
        assert "syntax error" in exc_info.value.reason

    def test_rejects_empty_source(self):
        with pytest.raises(ExpressionError):
            compile_expression("   ")

    def test_rejects_long_source(self):
        with pytest.raises(ExpressionError):
            compile_expression("value == '" + "a" * MAX_SOURCE_LENGTH + "'")

    def test_repetition_is_bounded(self):
        predicate = compile_expression("len(value * 100000) > 0")
        assert predicate("abc") is False

    def test_catastrophic_pattern_is_bounded(self):
        predicate = compile_expression('value => matches("^(a+)+$", value)')

        started = time.monotonic()
        assert predicate("a" * 40 + "!") is False
        assert time.monotonic() - started < MATCH_TIMEOUT + 2

    def test_match_timeout_is_a_failed_predicate(self):
        predicate = compile_expression('matches("^[a-z]+$", value)')
        assert predicate("abc") is True

        with patch("form_builder.validation.expressions.regex.search", side_effect=TimeoutError("regex timed out")):
            assert predicate("abc") is False

    def test_invalid_pattern_is_a_failed_predicate(self):
        assert compile_expression('matches("(", value)')("(") is False
