"""Unit tests for the filter evaluator."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

import pytest

from postcollections.core.filters import FilterExpressionEvaluator, evaluate_filter, parse_filter
from postcollections.core.filters.ast import Node
from postcollections.core.filters.evaluator import Evaluator
from postcollections.core.filters.exceptions import FilterEvaluationError, FilterSyntaxError


@dataclass
class Tag:
    slug: str
    name: str


@dataclass
class Post:
    id: str
    title: str
    featured: bool = False
    status: str = "published"
    reading_time: Optional[int] = None
    published_at: Optional[datetime] = None
    tags: List[Tag] = field(default_factory=list)


def matches(expression, post):
    return evaluate_filter(parse_filter(expression), post)


def test_evaluator_equality_dict():
    """Test equality against a dictionary post."""
    post = {"id": "1", "featured": True, "status": "published"}

    assert matches("featured:true", post) is True
    assert matches("featured:false", post) is False
    assert matches("status:published", post) is True
    assert matches("status:draft", post) is False


def test_evaluator_equality_object():
    """Test equality against an object post."""
    post = Post(id="1", title="Hello", featured=True)

    assert matches("featured:true", post) is True
    assert matches("status:published", post) is True


def test_evaluator_missing_attribute():
    """Test that missing attributes never match values."""
    assert matches("featured:true", {"id": "1"}) is False
    assert matches("author.name:joe", {"id": "1", "author": None}) is False
    assert matches("featured:null", {"id": "1"}) is True


def test_evaluator_dotted_paths():
    """Test resolving nested attributes."""
    post = {"id": "1", "author": {"slug": "joe", "profile": {"location": "Berlin"}}}

    assert matches("author.slug:joe", post) is True
    assert matches("author.profile.location:Berlin", post) is True
    assert Evaluator(post).evaluate(parse_filter("author.slug:joe").left) == "joe"


def test_evaluator_list_attributes():
    """Test that list attributes match when any element does."""
    post = Post(
        id="1",
        title="Hello",
        tags=[Tag(slug="news", name="News"), Tag(slug="tech", name="Tech")],
    )

    assert matches("tags.slug:tech", post) is True
    assert matches("tags.slug:sports", post) is False
    assert matches("tags.slug:[sports,news]", post) is True
    assert matches("tags.slug:[sports,travel]", post) is False
    assert matches("tags.name:~tec", post) is True


def test_evaluator_membership():
    """Test bracketed membership lists."""
    post = {"id": "1", "status": "scheduled"}

    assert matches("status:[published,scheduled]", post) is True
    assert matches("status:-[published,scheduled]", post) is False
    assert matches("status:[draft]", post) is False


def test_evaluator_comparisons():
    """Test numeric comparisons."""
    post = {"id": "1", "reading_time": 7}

    assert matches("reading_time:>5", post) is True
    assert matches("reading_time:>=7", post) is True
    assert matches("reading_time:<7", post) is False
    assert matches("reading_time:<=10", post) is True


def test_evaluator_incomparable_types():
    """Test that incompatible comparisons are simply false."""
    assert matches("reading_time:>5", {"id": "1", "reading_time": None}) is False
    assert matches("reading_time:>5", {"id": "1", "reading_time": "long"}) is False


def test_evaluator_dates():
    """Test comparing datetime attributes with date strings."""
    aware = Post(
        id="1",
        title="Hello",
        published_at=datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc),
    )
    naive = Post(id="2", title="Hello", published_at=datetime(2024, 6, 1, 12, 0))

    assert matches("published_at:>2024-01-01", aware) is True
    assert matches("published_at:<2024-01-01", aware) is False
    assert matches("published_at:>'2024-06-01T13:00:00+00:00'", aware) is False
    assert matches("published_at:>'2024-06-01T11:00:00+00:00'", naive) is True
    assert matches("published_at:>not-a-date", aware) is False


def test_evaluator_text_matching():
    """Test contains, starts-with and ends-with ignore case."""
    post = {"id": "1", "title": "Getting Started with Python"}

    assert matches("title:~python", post) is True
    assert matches("title:~^GETTING", post) is True
    assert matches("title:~$'with python'", post) is True
    assert matches("title:~java", post) is False
    assert matches("title:~^started", post) is False
    assert matches("missing:~python", post) is False


def test_evaluator_negation():
    """Test negated predicates."""
    post = {"id": "1", "status": "draft", "title": "Notes"}

    assert matches("status:-published", post) is True
    assert matches("status:-draft", post) is False
    assert matches("title:-~note", post) is False


def test_evaluator_logical_operators():
    """Test AND, OR and grouping."""
    post = {"id": "1", "featured": True, "status": "draft", "tag": "news"}

    assert matches("featured:true+status:draft", post) is True
    assert matches("featured:true+status:published", post) is False
    assert matches("featured:false,tag:news", post) is True
    assert matches("featured:false,tag:sports", post) is False
    assert matches("(featured:false,tag:news)+status:draft", post) is True
    assert matches("featured:false,tag:news+status:published", post) is False


def test_evaluator_unknown_node():
    """Test evaluating an unknown node type."""
    with pytest.raises(FilterEvaluationError, match="Unknown node type"):
        Evaluator({}).evaluate(Node())


class TestFilterExpressionEvaluator:
    """Test the cached evaluator used by collections."""

    def test_matches(self):
        """Test matching posts through the evaluator."""
        evaluator = FilterExpressionEvaluator()

        assert evaluator.matches("featured:true", {"id": "1", "featured": True}) is True
        assert evaluator.matches("featured:true", {"id": "2", "featured": False}) is False

    def test_validate(self):
        """Test validating expressions without evaluating them."""
        evaluator = FilterExpressionEvaluator()

        evaluator.validate("tag:[news,tech]+featured:true")
        with pytest.raises(FilterSyntaxError):
            evaluator.validate("tag:[news,tech")

    def test_parse_is_cached(self):
        """Test that each expression is parsed once per evaluator."""
        evaluator = FilterExpressionEvaluator(cache_size=8)

        for index in range(5):
            evaluator.matches("featured:true", {"id": str(index), "featured": True})

        info = evaluator._parse.cache_info()
        assert info.misses == 1
        assert info.hits == 4
