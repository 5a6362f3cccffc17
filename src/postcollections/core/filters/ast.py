"""Syntax tree for filter expressions.

Nodes are frozen so that a parsed filter can be shared between every post
it is evaluated against.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Node:
    """Base class for filter nodes."""

    __slots__ = ()


@dataclass(frozen=True)
class Literal(Node):
    """A string, number, boolean or null value."""

    value: Any


@dataclass(frozen=True)
class ListLiteral(Node):
    """Values of a bracketed list, e.g. ``[news,tech]``."""

    items: tuple[Literal, ...]


@dataclass(frozen=True)
class Variable(Node):
    """Dotted path to a post attribute, e.g. ``tags.slug``."""

    name: str


@dataclass(frozen=True)
class BinaryOp(Node):
    """Comparison (``==``, ``<``, ``in``...) or logical ``and``/``or``."""

    left: Node
    operator: str
    right: Node


@dataclass(frozen=True)
class Negation(Node):
    """A predicate prefixed with ``-``."""

    operand: Node


class TextMode(str, Enum):
    """Case-insensitive text match selected by ``~``, ``~^`` or ``~$``."""

    CONTAINS = "contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"


@dataclass(frozen=True)
class TextMatch(Node):
    """Text match of an attribute against a literal."""

    field: Variable
    mode: TextMode
    value: Literal
