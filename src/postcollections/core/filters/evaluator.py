"""Evaluator for filter expressions."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import TypeAdapter, ValidationError

from .ast import BinaryOp, ListLiteral, Literal, Negation, Node, TextMatch, TextMode, Variable
from .exceptions import FilterEvaluationError

_datetime_adapter = TypeAdapter(datetime)


class Evaluator:
    """Evaluates an AST against a post's attributes."""

    def __init__(self, context: Any):
        """Initialize the evaluator.

        Args:
            context: The post attributes, as a mapping or an object.
        """
        self.context = context

    def evaluate(self, node: Node) -> Any:
        """Evaluate a node."""
        if isinstance(node, Literal):
            return node.value

        if isinstance(node, Variable):
            return self._resolve_variable(node.name)

        if isinstance(node, BinaryOp):
            return self._evaluate_binary(node)

        if isinstance(node, Negation):
            return not bool(self.evaluate(node.operand))

        if isinstance(node, TextMatch):
            return self._evaluate_text_match(node)

        if isinstance(node, ListLiteral):
            return [self.evaluate(item) for item in node.items]

        raise FilterEvaluationError(f"Unknown node type: {type(node).__name__}")

    def _resolve_variable(self, name: str) -> Any:
        """Resolve a dotted path from the context.

        Crossing a list collects the path from every element, so
        ``tags.slug`` on a post with several tags yields a list of slugs.
        """
        value = self.context
        for part in name.split("."):
            value = self._step(value, part)
        return value

    def _step(self, value: Any, part: str) -> Any:
        if value is None:
            return None

        if isinstance(value, (list, tuple)):
            collected: list[Any] = []
            for item in value:
                resolved = self._step(item, part)
                if isinstance(resolved, list):
                    collected.extend(resolved)
                elif resolved is not None:
                    collected.append(resolved)
            return collected

        if isinstance(value, Mapping):
            return value.get(part)

        return getattr(value, part, None)

    def _evaluate_binary(self, node: BinaryOp) -> bool:
        """Evaluate binary operations."""
        # Short-circuit logic for AND/OR
        if node.operator == "and":
            if not bool(self.evaluate(node.left)):
                return False
            return bool(self.evaluate(node.right))

        if node.operator == "or":
            if bool(self.evaluate(node.left)):
                return True
            return bool(self.evaluate(node.right))

        left = self.evaluate(node.left)
        right = self.evaluate(node.right)

        # A list-valued attribute matches when any of its elements does
        if isinstance(left, list):
            return any(self._compare(node.operator, item, right) for item in left)

        return self._compare(node.operator, left, right)

    def _compare(self, op: str, left: Any, right: Any) -> bool:
        """Apply a comparison operator to two resolved values."""
        if op == "in":
            if right is None:
                return False
            return any(self._compare("==", left, candidate) for candidate in right)

        left, right = self._coerce(left, right)

        if op == "==":
            return left == right
        if op == "!=":
            return left != right

        # Comparison operators require comparable types
        try:
            if op == "<":
                return left < right
            if op == ">":
                return left > right
            if op == "<=":
                return left <= right
            if op == ">=":
                return left >= right
        except TypeError:
            # If types are incompatible (e.g. None < 5), return False
            return False

        raise FilterEvaluationError(f"Unknown binary operator: {op}")

    def _coerce(self, left: Any, right: Any) -> tuple[Any, Any]:
        """Parse string literals compared against datetime attributes."""
        if isinstance(left, datetime) and isinstance(right, str):
            try:
                right = _datetime_adapter.validate_python(right)
            except ValidationError:
                return left, right
            if left.tzinfo is None and right.tzinfo is not None:
                right = right.replace(tzinfo=None)
            elif left.tzinfo is not None and right.tzinfo is None:
                right = right.replace(tzinfo=left.tzinfo)
        return left, right

    def _evaluate_text_match(self, node: TextMatch) -> bool:
        """Match text case-insensitively; list attributes match on any element."""
        subject = self.evaluate(node.field)
        needle = node.value.value

        if isinstance(subject, list):
            return any(self._match_text(node.mode, item, needle) for item in subject)
        return self._match_text(node.mode, subject, needle)

    def _match_text(self, mode: TextMode, subject: Any, needle: Any) -> bool:
        if not isinstance(subject, str) or needle is None:
            return False
        needle = str(needle).lower()
        subject = subject.lower()

        if mode is TextMode.CONTAINS:
            return needle in subject
        if mode is TextMode.STARTS_WITH:
            return subject.startswith(needle)
        if mode is TextMode.ENDS_WITH:
            return subject.endswith(needle)

        raise FilterEvaluationError(f"Unknown text match: {mode}")
