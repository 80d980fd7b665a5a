from datetime import datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.services.listing import (
    paginate,
    parse_price,
    search_categories,
    search_products,
    sort_products,
)

T0 = datetime(2024, 5, 1, 12, 0, 0)


def _product(id, title, *, price="$10.00", score=50, rank=None, positive=0, age=0, description="Plain description"):
    return SimpleNamespace(
        id=id,
        product_title=title,
        product_description=description,
        product_price=price,
        product_score=score,
        product_rank=rank,
        positive_review_percentage=positive,
        created_at=T0 - timedelta(days=age),
    )


@pytest.fixture
def products():
    return [
        _product(1, "Zebra Speaker", price="$89.00", score=70, rank=4, positive=40, age=3),
        _product(2, "alpha Earbuds", price="25", score=90, positive=80, age=1),
        _product(3, "Mid Headphones", price="call us", score=70, rank=9, positive=60, age=2),
        _product(4, "Budget Earbuds", price="$9.99", score=40, rank=1, positive=80, age=0,
                 description="Cheap wireless earbuds"),
    ]


@pytest.mark.parametrize(
    "raw, expected",
    [("$349.99", Decimal("349.99")), ("45", Decimal("45")), ("", None), (None, None), ("call us", None)],
)
def test_parse_price(raw, expected):
    assert parse_price(raw) == expected


def test_newest_first_by_default(products):
    assert [p.id for p in sort_products(products)] == [4, 2, 3, 1]


def test_same_timestamp_falls_back_to_id():
    a = _product(1, "A")
    b = _product(2, "B")
    assert [p.id for p in sort_products([a, b])] == [2, 1]


def test_sort_by_score_keeps_newest_first_for_ties(products):
    assert [p.id for p in sort_products(products, "score")] == [2, 3, 1, 4]


def test_sort_by_title_ignores_case(products):
    titles = [p.product_title for p in sort_products(products, "title")]
    assert titles == ["alpha Earbuds", "Budget Earbuds", "Mid Headphones", "Zebra Speaker"]


def test_sort_by_rank_unranked_last(products):
    assert [p.id for p in sort_products(products, "rank")] == [3, 1, 4, 2]


def test_sort_by_price_unparseable_last(products):
    assert [p.id for p in sort_products(products, "price")] == [4, 2, 1, 3]


def test_sort_by_positive_percentage(products):
    assert [p.id for p in sort_products(products, "positive")] == [4, 2, 3, 1]


def test_search_matches_title_and_description(products):
    assert {p.id for p in search_products(products, "EARBUDS")} == {2, 4}
    assert [p.id for p in search_products(products, "wireless")] == [4]
    assert len(search_products(products, "  ")) == 4
    assert search_products(products, "turntable") == []


def test_search_categories():
    categories = [SimpleNamespace(name="Keyboards"), SimpleNamespace(name="Mouse Pads")]
    assert [c.name for c in search_categories(categories, "PAD")] == ["Mouse Pads"]
    assert search_categories(categories, None) == categories


def test_paginate():
    items = list(range(1, 26))
    assert paginate(items, None, 10) == items
    assert paginate(items, 1, 10) == list(range(1, 11))
    assert paginate(items, 3, 10) == [21, 22, 23, 24, 25]
    assert paginate(items, 4, 10) == []
