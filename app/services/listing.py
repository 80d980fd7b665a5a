# app/services/listing.py

"""Filtering, sorting and slicing for the product and category listings.

The site's listing pages show derived views of the full collections
(search box, sort dropdown, "ranked" category pages, paginated grids);
these helpers produce the same views server-side.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Callable, Dict, List, Literal, Optional, Sequence, TypeVar

from app.models.category import Category
from app.models.product import Product

T = TypeVar("T")

ProductSort = Literal["newest", "score", "title", "rank", "price", "positive"]

_PRICE_CLEAN = re.compile(r"[^\d.]")


def parse_price(price: Optional[str]) -> Optional[Decimal]:
    if not price:
        return None
    try:
        return Decimal(_PRICE_CLEAN.sub("", price))
    except InvalidOperation:
        return None


def search_products(products: Sequence[Product], term: Optional[str]) -> List[Product]:
    if not term or not term.strip():
        return list(products)
    needle = term.strip().lower()
    return [
        p for p in products
        if needle in (p.product_title or "").lower() or needle in (p.product_description or "").lower()
    ]


def search_categories(categories: Sequence[Category], term: Optional[str]) -> List[Category]:
    if not term or not term.strip():
        return list(categories)
    needle = term.strip().lower()
    return [c for c in categories if needle in c.name.lower()]


def _newest(products: List[Product]) -> List[Product]:
    return sorted(products, key=lambda p: (p.created_at, p.id), reverse=True)


def _by_price(products: List[Product]) -> List[Product]:
    priced = [(parse_price(p.product_price), p) for p in products]
    # unparseable prices go last
    priced.sort(key=lambda item: (item[0] is None, item[0] or Decimal(0)))
    return [p for _, p in priced]


_SORTERS: Dict[str, Callable[[List[Product]], List[Product]]] = {
    "newest": _newest,
    "score": lambda items: sorted(items, key=lambda p: p.product_score or 0, reverse=True),
    "title": lambda items: sorted(items, key=lambda p: (p.product_title or "").casefold()),
    "rank": lambda items: sorted(items, key=lambda p: p.product_rank or 0, reverse=True),
    "price": _by_price,
    "positive": lambda items: sorted(items, key=lambda p: p.positive_review_percentage or 0, reverse=True),
}


def sort_products(products: Sequence[Product], sort_by: ProductSort = "newest") -> List[Product]:
    # Stable sorts: ties keep the newest-first order
    return _SORTERS[sort_by](_newest(list(products)))


def paginate(items: Sequence[T], page: Optional[int], per_page: int) -> List[T]:
    if page is None:
        return list(items)
    start = (page - 1) * per_page
    return list(items[start:start + per_page])
