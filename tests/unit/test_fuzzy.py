from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import pytest

from javadoc_mcp.indexer import FuzzyIndex
from javadoc_mcp.indexer.fuzzy import field_norm, missing_characters


class Color(str, Enum):
    RED = "red"


@dataclass
class Item:
    name: str
    description: Optional[str] = None
    color: Optional[Color] = None


def _names(matches):
    return [match.item.name for match in matches]


def test_earlier_match_ranks_first() -> None:
    index = FuzzyIndex([Item("ReadAdaptation"), Item("Adaptation"), Item("Repository")], {"name": 1.0})

    matches = index.search("adaptation")

    assert _names(matches) == ["Adaptation", "ReadAdaptation"]
    assert matches[1].score == pytest.approx(0.04)


def test_tolerates_typos() -> None:
    index = FuzzyIndex([Item("Adaptation"), Item("AdaptationTable"), Item("Repository")], {"name": 1.0})

    assert _names(index.search("adaptaton")) == ["Adaptation", "AdaptationTable"]


def test_case_insensitive() -> None:
    index = FuzzyIndex([Item("Widget")], {"name": 1.0})

    assert index.search("WIDGET")[0].score == pytest.approx(0.0, abs=1e-9)


def test_short_query_matches_nothing() -> None:
    index = FuzzyIndex([Item("A"), Item("Ab")], {"name": 1.0})

    assert index.search("a") == []
    assert index.search("   ") == []


def test_limit_and_insertion_order_ties() -> None:
    items = [Item(f"widget{i}") for i in range(5)]
    index = FuzzyIndex(items, {"name": 1.0})

    matches = index.search("widget", limit=3)

    assert _names(matches) == ["widget0", "widget1", "widget2"]


def test_unmatched_fields_are_ignored() -> None:
    index = FuzzyIndex(
        [Item("Panel", description="container for widgets"), Item("Checker")],
        {"name": 2.0, "description": 1.0},
    )

    assert _names(index.search("widgets")) == ["Panel"]


def test_enum_fields_use_their_value() -> None:
    index = FuzzyIndex([Item("Widget", color=Color.RED)], {"color": 1.0})

    assert _names(index.search("red")) == ["Widget"]


def test_field_score() -> None:
    index = FuzzyIndex([], {"name": 1.0})

    assert index.field_score("widget", "widget") == 0.0
    assert index.field_score("widget", "com.acme.ui.widget") == pytest.approx(0.12)
    assert index.field_score("xyz", "abcdef") is None


def test_field_norm() -> None:
    assert field_norm("widget") == 1.0
    assert field_norm("a visual widget rendered") == 0.5


def test_requires_keys() -> None:
    with pytest.raises(ValueError):
        FuzzyIndex([], {})


def test_missing_characters_counts_multiplicity() -> None:
    pattern = list(Counter("gettable").items())

    assert missing_characters(pattern, Counter("gettable0")) == 0
    assert missing_characters(pattern, Counter("settable")) == 1
    assert missing_characters(pattern, Counter("setwidth")) == 5


def test_characters_absent_from_field_do_not_match() -> None:
    index = FuzzyIndex([Item("setWidth"), Item("getTabel")], {"name": 1.0})

    assert _names(index.search("getTable")) == ["getTabel"]
