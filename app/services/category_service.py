"""Category service — pure helpers for live category lists."""
from __future__ import annotations

from functools import lru_cache

from pyuca import Collator

from app.models.xtream import Category

UNKNOWN_CATEGORY = "Unknown"


@lru_cache(maxsize=1)
def _collator() -> Collator:
    # Loads the DUCET table once per process
    return Collator()


def collation_key(name: str) -> tuple:
    """Unicode Collation Algorithm sort key for *name*.

    Punctuation and symbols sort before digits, digits before letters;
    accents then case only break ties (lowercase first).
    """
    return _collator().sort_key(name)


def visible_categories(categories: list[Category]) -> list[Category]:
    """Drop categories with a blank name and sort the rest by name."""
    named = [cat for cat in categories if cat.category_name.strip()]
    return sorted(named, key=lambda cat: collation_key(cat.category_name))


def build_category_map(categories: list[Category]) -> dict[str, str]:
    """Build category_id -> category_name; later duplicates win."""
    return {cat.category_id: cat.category_name for cat in categories}
