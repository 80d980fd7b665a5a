# app/services/slugs.py

import re

_INVALID_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_DASHES = re.compile(r"-+")


def create_slug(text: str) -> str:
    """URL slug used for both products and categories.

    >>> create_slug("Sony WH-1000XM5  Headphones!")
    'sony-wh-1000xm5-headphones'
    """
    slug = text.lower()
    slug = _INVALID_CHARS.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    slug = _DASHES.sub("-", slug)
    return slug.strip()


def normalize_slug(slug: str) -> str:
    return slug.lower().strip()
