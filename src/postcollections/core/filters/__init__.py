"""Filter expression API.

Filters select posts for automatic collections, e.g.
``featured:true+tags.slug:[news,tech]``.
"""

from functools import lru_cache
from typing import Any

from .ast import Node
from .evaluator import Evaluator
from .exceptions import FilterError, FilterEvaluationError, FilterSyntaxError
from .lexer import Lexer
from .parser import Parser

def parse_filter(expression: str) -> Node:
    """Parse a filter expression string into an AST."""
    lexer = Lexer(expression)
    parser = Parser(lexer)
    return parser.parse()

def evaluate_filter(node: Node, attributes: Any) -> bool:
    """Evaluate a parsed filter AST against a post's attributes."""
    evaluator = Evaluator(attributes)
    return bool(evaluator.evaluate(node))


class FilterExpressionEvaluator:
    """Default filter evaluator for automatic collections.

    Parsed expressions are cached per instance since the same collection
    filter is evaluated against many posts.
    """

    def __init__(self, cache_size: int = 256) -> None:
        self._parse = lru_cache(maxsize=cache_size)(parse_filter)

    def validate(self, expression: str) -> None:
        """Raise FilterSyntaxError if the expression cannot be parsed."""
        self._parse(expression)

    def matches(self, expression: str, attributes: Any) -> bool:
        """Check whether a post's attributes satisfy the filter expression."""
        return evaluate_filter(self._parse(expression), attributes)


__all__ = [
    "parse_filter",
    "evaluate_filter",
    "FilterExpressionEvaluator",
    "Node",
    "FilterError",
    "FilterSyntaxError",
    "FilterEvaluationError",
]
