"""Tests for the filter expression parser."""

import pytest

from postcollections.core.filters import parse_filter
from postcollections.core.filters.ast import (
    BinaryOp,
    ListLiteral,
    Literal,
    Negation,
    TextMatch,
    TextMode,
    Variable,
)
from postcollections.core.filters.exceptions import FilterSyntaxError


def test_parse_equality():
    """Test that a plain predicate becomes an equality check."""
    node = parse_filter("featured:true")

    assert node == BinaryOp(Variable("featured"), "==", Literal(True))


def test_parse_bare_word_is_string():
    """Test that bare words are string values."""
    node = parse_filter("status:published")

    assert node == BinaryOp(Variable("status"), "==", Literal("published"))


def test_parse_comparisons():
    """Test comparison operators."""
    assert parse_filter("reading_time:>5") == BinaryOp(Variable("reading_time"), ">", Literal(5))
    assert parse_filter("reading_time:<=2.5") == BinaryOp(
        Variable("reading_time"), "<=", Literal(2.5)
    )
    assert parse_filter("published_at:>=2024-01-01") == BinaryOp(
        Variable("published_at"), ">=", Literal("2024-01-01")
    )


def test_parse_negative_number():
    """Test negative numbers after an operator."""
    assert parse_filter("score:>-3") == BinaryOp(Variable("score"), ">", Literal(-3))


def test_parse_list():
    """Test bracketed lists become membership checks."""
    node = parse_filter("tags.slug:[news,tech,'long reads']")

    assert node == BinaryOp(
        Variable("tags.slug"),
        "in",
        ListLiteral((Literal("news"), Literal("tech"), Literal("long reads"))),
    )


def test_parse_text_matches():
    """Test the text matching operators."""
    assert parse_filter("title:~python") == TextMatch(
        Variable("title"), TextMode.CONTAINS, Literal("python")
    )
    assert parse_filter("title:~^how") == TextMatch(
        Variable("title"), TextMode.STARTS_WITH, Literal("how")
    )
    assert parse_filter("title:~$'guide'") == TextMatch(
        Variable("title"), TextMode.ENDS_WITH, Literal("guide")
    )


def test_parse_negation():
    """Test that a leading minus negates the predicate."""
    assert parse_filter("status:-draft") == Negation(
        BinaryOp(Variable("status"), "==", Literal("draft"))
    )
    assert parse_filter("tag:-[a,b]") == Negation(
        BinaryOp(Variable("tag"), "in", ListLiteral((Literal("a"), Literal("b"))))
    )


def test_parse_precedence():
    """Test that AND binds tighter than OR."""
    node = parse_filter("featured:true,tag:news+status:published")

    assert isinstance(node, BinaryOp)
    assert node.operator == "or"
    assert node.left == BinaryOp(Variable("featured"), "==", Literal(True))
    assert isinstance(node.right, BinaryOp)
    assert node.right.operator == "and"


def test_parse_grouping():
    """Test parentheses override precedence."""
    node = parse_filter("(featured:true,tag:news)+status:published")

    assert node.operator == "and"
    assert node.left.operator == "or"
    assert node.right == BinaryOp(Variable("status"), "==", Literal("published"))


@pytest.mark.parametrize(
    "expression,message",
    [
        ("", "Empty filter expression"),
        ("   ", "Empty filter expression"),
        ("featured", "Expected COLON"),
        ("featured:", "Expected value"),
        (":true", "Expected field name"),
        ("featured:true)", "Unexpected token"),
        ("(featured:true", "Expected RPAREN"),
        ("tag:[news,", "Expected value"),
        ("score:>-abc", "Only numbers can be negative"),
        ("title:~~x", "Expected value"),
    ],
)
def test_parse_errors(expression, message):
    """Test malformed expressions raise syntax errors."""
    with pytest.raises(FilterSyntaxError, match=message):
        parse_filter(expression)


def test_syntax_error_details():
    """Test that syntax errors keep the reason and position apart."""
    with pytest.raises(FilterSyntaxError) as exc_info:
        parse_filter("featured:true)")

    error = exc_info.value
    assert isinstance(error, ValueError)
    assert error.reason == "Unexpected token after expression"
    assert error.position == 13
    assert str(error) == "Unexpected token after expression at position 13"
