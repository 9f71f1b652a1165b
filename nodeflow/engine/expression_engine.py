"""
Expression engine for resolving {{ }} template placeholders.

Uses simpleeval for safe expression evaluation (no eval() or exec()).
Placeholders are evaluated against the execution context, so
`{{ webhook.payload.email }}` reads nested keys of earlier node outputs.
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from simpleeval import (
    DEFAULT_FUNCTIONS,
    DEFAULT_OPERATORS,
    AttributeDoesNotExist,
    NameNotDefined,
    SimpleEval,
)

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{\{\{?(.+?)\}?\}\}", re.DOTALL)

# Handlebars helper call form: {{json path}} -> json(path)
_HELPER_CALL = re.compile(r"^(json)\s+([^\s()]+)$")


class _Unresolved(Exception):
    """Raised internally when a placeholder references a missing value."""


class _ContextEval(SimpleEval):
    """SimpleEval that prefers mapping keys over attributes for dotted paths."""

    def _eval_attribute(self, node: Any) -> Any:
        value = self._eval(node.value)
        if isinstance(value, Mapping):
            if node.attr in value:
                return value[node.attr]
            raise AttributeDoesNotExist(node.attr, self.expr)
        if value is None:
            raise AttributeDoesNotExist(node.attr, self.expr)
        return super()._eval_attribute(node)


def _to_json(value: Any) -> str:
    return json.dumps(value, indent=2, default=str)


class ExpressionEngine:
    """
    Safe template renderer that doesn't use eval() or exec().

    Uses simpleeval library with a whitelist of allowed functions.
    """

    def __init__(self) -> None:
        self._setup_evaluator()

    def _setup_evaluator(self) -> None:
        """Set up the safe evaluator with allowed functions."""
        self.evaluator = _ContextEval()
        self.evaluator.operators = DEFAULT_OPERATORS.copy()

        self.evaluator.functions = {
            **DEFAULT_FUNCTIONS,
            # Type conversion
            "str": str,
            "int": int,
            "float": float,
            "bool": bool,
            # String functions
            "lower": lambda s: str(s).lower(),
            "upper": lambda s: str(s).upper(),
            "trim": lambda s: str(s).strip(),
            "split": lambda s, sep=" ": str(s).split(sep),
            "join": lambda arr, sep="": sep.join(str(x) for x in arr),
            "replace": lambda s, old, new: str(s).replace(old, new),
            "length": lambda x: len(x),
            # Array functions
            "first": lambda arr: arr[0] if arr else None,
            "last": lambda arr: arr[-1] if arr else None,
            # Math functions
            "abs": abs,
            "min": min,
            "max": max,
            "round": round,
            "floor": math.floor,
            "ceil": math.ceil,
            # Date functions
            "now": lambda: int(datetime.now().timestamp() * 1000),
            "date_now": lambda: datetime.now().isoformat(),
            # JSON functions
            "json": _to_json,
            "json_parse": lambda s: json.loads(s) if s else None,
            # Object functions
            "keys": lambda d: list(d.keys()) if isinstance(d, Mapping) else [],
            "get": lambda d, key, default=None: d.get(key, default) if isinstance(d, Mapping) else default,
        }

    def render(self, template: str, context: Mapping[str, Any]) -> str:
        """Render every {{ }} placeholder in a string to text."""
        if not isinstance(template, str):
            return self._stringify(template)
        if "{{" not in template:
            return template
        return self._replace_expressions(template, context)

    def resolve(self, value: Any, context: Mapping[str, Any]) -> Any:
        """
        Resolve all {{ }} expressions in a value.

        Handles strings, objects, and arrays recursively. A string that is
        exactly one placeholder keeps the typed value it evaluates to.
        """
        if isinstance(value, str):
            return self._resolve_string(value, context)

        if isinstance(value, list):
            return [self.resolve(item, context) for item in value]

        if isinstance(value, dict):
            return {key: self.resolve(val, context) for key, val in value.items()}

        return value

    def lookup(self, path: str, context: Mapping[str, Any]) -> Any:
        """Evaluate a bare expression (no braces); None when it does not resolve."""
        try:
            return self._evaluate(path, context)
        except _Unresolved:
            return None

    def _resolve_string(self, string: str, context: Mapping[str, Any]) -> Any:
        trimmed = string.strip()

        match = _PLACEHOLDER.fullmatch(trimmed)
        if match and "{{" not in match.group(1):
            try:
                return self._evaluate(match.group(1), context)
            except _Unresolved:
                return None

        return self._replace_expressions(string, context)

    def _replace_expressions(self, string: str, context: Mapping[str, Any]) -> str:
        """Replace all {{ }} expressions in a string with evaluated values."""

        def replacer(match: re.Match[str]) -> str:
            try:
                result = self._evaluate(match.group(1), context)
            except _Unresolved:
                return ""
            return self._stringify(result)

        return _PLACEHOLDER.sub(replacer, string)

    def _evaluate(self, expression: str, context: Mapping[str, Any]) -> Any:
        """Evaluate a single expression safely using simpleeval."""
        transformed = self._transform_expression(expression)
        try:
            self.evaluator.names = dict(context)
            return self.evaluator.eval(transformed)
        except (NameNotDefined, AttributeDoesNotExist, KeyError, IndexError) as e:
            logger.debug("Unresolved placeholder %r: %s", expression, e)
            raise _Unresolved(expression) from e
        except Exception as e:
            logger.warning("Expression evaluation failed: %s (expression: %s)", e, expression)
            return f"[Expression Error: {e}]"

    def _transform_expression(self, expression: str) -> str:
        """Transform Handlebars-style expressions to Python-compatible syntax."""
        result = expression.strip()

        helper = _HELPER_CALL.match(result)
        if helper:
            result = f"{helper.group(1)}({helper.group(2)})"

        # {{this.field}} refers to the root context
        result = re.sub(r"\bthis\.", "", result)

        return result

    def _stringify(self, value: Any) -> str:
        """Convert value to string for interpolation."""
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (dict, list)):
            return json.dumps(value, default=str)
        return str(value)


# Singleton instance
expression_engine = ExpressionEngine()


def render(template: str, context: Mapping[str, Any]) -> str:
    """Render a template string against an execution context."""
    return expression_engine.render(template, context)
