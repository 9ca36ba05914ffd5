"""Safe interpreter for operator-supplied custom validation predicates.

Schemas may carry a ``customValidationFunctionString`` such as::

    value => value.length >= 3 && !value.includes(" ")
    lambda value: matches("^[A-Z]", value)
    len(value) % 2 == 0

The source is never executed. It is parsed with ``ast`` into a closed
expression grammar and interpreted node by node:

- literals (str, int, float, bool, None, ``true``/``false``/``null``) and
  list/tuple literals
- the single name ``value``
- comparisons, ``in`` / ``not in``, ``and`` / ``or`` / ``not``
- arithmetic ``+ - * / %`` and unary ``+ -``
- ``x if cond else y``
- helper calls: len, lower, upper, strip, number, matches, startswith,
  endswith, contains (``matches`` stops after ``MATCH_TIMEOUT`` seconds and
  counts as a failure)
- ``.length`` and the string methods listed in ``_METHODS``

JS-flavoured spellings (arrow prefix, block body with ``return``, ``&&``,
``||``, ``!``, ``===``, ``!==``) are rewritten before parsing.
"""

import ast
import logging
import operator
import re
from typing import Any, Callable, Dict

import regex

from form_builder.errors import ExpressionError

logger = logging.getLogger(__name__)

MAX_SOURCE_LENGTH = 500
MAX_PATTERN_LENGTH = 200
# seconds a single matches() call may spend backtracking
MATCH_TIMEOUT = 0.1

_ARROW_PREFIX = re.compile(r"^\s*(?:\(\s*value\s*\)|value)\s*=>\s*")
_LAMBDA_PREFIX = re.compile(r"^\s*lambda\s+value\s*:\s*")
_BLOCK_BODY = re.compile(r"^\{\s*(?:return\s+)?(.*?);?\s*\}$", re.DOTALL)

_JS_OPERATORS = (
    ("===", " == "),
    ("!==", " != "),
    ("&&", " and "),
    ("||", " or "),
)

_CONSTANT_NAMES = {"true": True, "false": False, "null": None, "True": True, "False": False, "None": None}


def _matches(pattern: Any, text: Any) -> bool:
    pattern = str(pattern)
    if len(pattern) > MAX_PATTERN_LENGTH:
        raise ValueError("pattern too long")
    return regex.search(pattern, str(text), timeout=MATCH_TIMEOUT) is not None


def _safe_mul(left: Any, right: Any) -> Any:
    if isinstance(left, (str, list, tuple)) or isinstance(right, (str, list, tuple)):
        seq, times = (left, right) if isinstance(left, (str, list, tuple)) else (right, left)
        if isinstance(times, int) and len(seq) * times > MAX_SOURCE_LENGTH * 10:
            raise ValueError("sequence repetition too large")
    return operator.mul(left, right)


def _number(text: Any) -> float:
    if isinstance(text, bool):
        raise ValueError("not a number")
    return float(str(text).strip())


_FUNCTIONS: Dict[str, Callable[..., Any]] = {
    "len": lambda x: len(str(x)) if not isinstance(x, (list, tuple)) else len(x),
    "lower": lambda x: str(x).lower(),
    "upper": lambda x: str(x).upper(),
    "strip": lambda x: str(x).strip(),
    "number": _number,
    "matches": _matches,
    "startswith": lambda x, prefix: str(x).startswith(str(prefix)),
    "endswith": lambda x, suffix: str(x).endswith(str(suffix)),
    "contains": lambda x, part: str(part) in str(x),
}

# method name -> (helper name, arity excluding the receiver)
_METHODS = {
    "startsWith": ("startswith", 1),
    "startswith": ("startswith", 1),
    "endsWith": ("endswith", 1),
    "endswith": ("endswith", 1),
    "includes": ("contains", 1),
    "toLowerCase": ("lower", 0),
    "lower": ("lower", 0),
    "toUpperCase": ("upper", 0),
    "upper": ("upper", 0),
    "trim": ("strip", 0),
    "strip": ("strip", 0),
}

_BOOL_OPS = {ast.And, ast.Or}
_UNARY_OPS = {ast.Not: operator.not_, ast.USub: operator.neg, ast.UAdd: operator.pos}
_BIN_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: _safe_mul,
    ast.Div: operator.truediv,
    ast.Mod: operator.mod,
}
_COMPARE_OPS = {
    ast.Eq: operator.eq,
    ast.NotEq: operator.ne,
    ast.Lt: operator.lt,
    ast.LtE: operator.le,
    ast.Gt: operator.gt,
    ast.GtE: operator.ge,
    ast.In: lambda a, b: a in b,
    ast.NotIn: lambda a, b: a not in b,
}


def _rewrite_js_operators(source: str) -> str:
    """Rewrite JS boolean/equality operators outside string literals."""
    out = []
    i = 0
    quote = None
    while i < len(source):
        ch = source[i]
        if quote:
            out.append(ch)
            if ch == "\\" and i + 1 < len(source):
                out.append(source[i + 1])
                i += 2
                continue
            if ch == quote:
                quote = None
            i += 1
            continue
        if ch in ("'", '"'):
            quote = ch
            out.append(ch)
            i += 1
            continue
        for token, replacement in _JS_OPERATORS:
            if source.startswith(token, i):
                out.append(replacement)
                i += len(token)
                break
        else:
            if ch == "!" and not source.startswith("!=", i):
                out.append(" not ")
            else:
                out.append(ch)
            i += 1
    return "".join(out)


def normalize_source(source: str) -> str:
    """Strip arrow/lambda wrappers and rewrite JS operators."""
    text = source.strip()
    text = _ARROW_PREFIX.sub("", text, count=1)
    text = _LAMBDA_PREFIX.sub("", text, count=1)
    block = _BLOCK_BODY.match(text.strip())
    if block:
        text = block.group(1)
    return _rewrite_js_operators(text).strip()


class _GrammarChecker(ast.NodeVisitor):
    """Rejects every node outside the grammar."""

    def __init__(self, source: str):
        self.source = source

    def fail(self, reason: str):
        raise ExpressionError(self.source, reason)

    def generic_visit(self, node: ast.AST):
        self.fail(f"unsupported syntax '{type(node).__name__}'")

    def visit_Expression(self, node: ast.Expression):
        self.visit(node.body)

    def visit_Constant(self, node: ast.Constant):
        if not isinstance(node.value, (str, int, float, bool, type(None))):
            self.fail("unsupported literal")

    def visit_Name(self, node: ast.Name):
        if node.id != "value" and node.id not in _CONSTANT_NAMES:
            self.fail(f"unknown name '{node.id}'")

    def visit_List(self, node: ast.List):
        for elt in node.elts:
            self.visit(elt)

    visit_Tuple = visit_List

    def visit_BoolOp(self, node: ast.BoolOp):
        for v in node.values:
            self.visit(v)

    def visit_UnaryOp(self, node: ast.UnaryOp):
        if type(node.op) not in _UNARY_OPS:
            self.fail("unsupported unary operator")
        self.visit(node.operand)

    def visit_BinOp(self, node: ast.BinOp):
        if type(node.op) not in _BIN_OPS:
            self.fail("unsupported operator")
        self.visit(node.left)
        self.visit(node.right)

    def visit_Compare(self, node: ast.Compare):
        for op in node.ops:
            if type(op) not in _COMPARE_OPS:
                self.fail("unsupported comparison")
        self.visit(node.left)
        for comparator in node.comparators:
            self.visit(comparator)

    def visit_IfExp(self, node: ast.IfExp):
        self.visit(node.test)
        self.visit(node.body)
        self.visit(node.orelse)

    def visit_Attribute(self, node: ast.Attribute):
        if node.attr != "length":
            self.fail(f"unsupported attribute '{node.attr}'")
        self.visit(node.value)

    def visit_Call(self, node: ast.Call):
        if node.keywords:
            self.fail("keyword arguments are not supported")
        if isinstance(node.func, ast.Name):
            if node.func.id not in _FUNCTIONS:
                self.fail(f"unknown function '{node.func.id}'")
        elif isinstance(node.func, ast.Attribute):
            method = _METHODS.get(node.func.attr)
            if method is None:
                self.fail(f"unknown method '{node.func.attr}'")
            if len(node.args) != method[1]:
                self.fail(f"'{node.func.attr}' takes {method[1]} argument(s)")
            self.visit(node.func.value)
        else:
            self.fail("unsupported call")
        for arg in node.args:
            if isinstance(arg, ast.Starred):
                self.fail("starred arguments are not supported")
            self.visit(arg)


def _evaluate(node: ast.AST, value: Any) -> Any:
    if isinstance(node, ast.Expression):
        return _evaluate(node.body, value)
    if isinstance(node, ast.Constant):
        return node.value
    if isinstance(node, ast.Name):
        if node.id == "value":
            return value
        return _CONSTANT_NAMES[node.id]
    if isinstance(node, ast.List):
        return [_evaluate(e, value) for e in node.elts]
    if isinstance(node, ast.Tuple):
        return tuple(_evaluate(e, value) for e in node.elts)
    if isinstance(node, ast.BoolOp):
        if isinstance(node.op, ast.And):
            result = True
            for v in node.values:
                result = _evaluate(v, value)
                if not result:
                    return result
            return result
        result = False
        for v in node.values:
            result = _evaluate(v, value)
            if result:
                return result
        return result
    if isinstance(node, ast.UnaryOp):
        return _UNARY_OPS[type(node.op)](_evaluate(node.operand, value))
    if isinstance(node, ast.BinOp):
        return _BIN_OPS[type(node.op)](_evaluate(node.left, value), _evaluate(node.right, value))
    if isinstance(node, ast.Compare):
        left = _evaluate(node.left, value)
        for op, comparator in zip(node.ops, node.comparators):
            right = _evaluate(comparator, value)
            if not _COMPARE_OPS[type(op)](left, right):
                return False
            left = right
        return True
    if isinstance(node, ast.IfExp):
        if _evaluate(node.test, value):
            return _evaluate(node.body, value)
        return _evaluate(node.orelse, value)
    if isinstance(node, ast.Attribute):
        return _FUNCTIONS["len"](_evaluate(node.value, value))
    if isinstance(node, ast.Call):
        args = [_evaluate(a, value) for a in node.args]
        if isinstance(node.func, ast.Name):
            return _FUNCTIONS[node.func.id](*args)
        helper, _ = _METHODS[node.func.attr]
        return _FUNCTIONS[helper](_evaluate(node.func.value, value), *args)
    raise TypeError(f"unexpected node {type(node).__name__}")


class SafeExpression:
    """A compiled predicate over ``value``. Calling it never raises."""

    def __init__(self, source: str, tree: ast.Expression):
        self.source = source
        self._tree = tree

    def __call__(self, value: Any) -> bool:
        try:
            return bool(_evaluate(self._tree, value))
        except (TypeError, ValueError, ZeroDivisionError, regex.error, TimeoutError, KeyError) as e:
            logger.debug(f"Custom predicate {self.source!r} failed on {value!r}: {e}")
            return False

    def __repr__(self) -> str:
        return f"SafeExpression({self.source!r})"


def compile_expression(source: str) -> SafeExpression:
    """Parse a predicate into a SafeExpression.

    Raises:
        ExpressionError: If the source is empty, too long, does not parse, or
            uses anything outside the grammar.
    """
    if not source or not source.strip():
        raise ExpressionError(source or "", "empty expression")
    if len(source) > MAX_SOURCE_LENGTH:
        raise ExpressionError(source[:40] + "...", f"longer than {MAX_SOURCE_LENGTH} characters")

    normalized = normalize_source(source)
    try:
        tree = ast.parse(normalized, mode="eval")
    except SyntaxError as e:
        raise ExpressionError(source, f"syntax error: {e.msg}")

    _GrammarChecker(source).visit(tree)
    return SafeExpression(source, tree)
