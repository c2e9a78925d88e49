"""Keyword rules that assign a spending category to each transaction."""

from __future__ import annotations

from typing import Iterable

from models import Transaction

DEFAULT_CATEGORY = "Other"

# Evaluated top-down; the first category with a matching keyword wins.
CATEGORY_RULES: list[tuple[str, tuple[str, ...]]] = [
    ("Food & Dining", ("restaurant", "food", "starbucks", "mcdonald", "pizza", "cafe")),
    ("Gas & Transportation", ("gas", "fuel", "shell", "chevron", "exxon", "uber", "lyft")),
    ("Shopping", ("amazon", "target", "walmart", "store")),
    ("Entertainment", ("netflix", "spotify", "movie", "entertainment")),
    ("Healthcare", ("pharmacy", "medical", "doctor", "health")),
]

CATEGORIES = [category for category, _ in CATEGORY_RULES] + [DEFAULT_CATEGORY]


def categorize_description(description: str) -> str:
    """Return the category for a free-text description."""
    text = str(description or "").lower()
    for category, keywords in CATEGORY_RULES:
        if any(keyword in text for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def categorize_transactions(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Attach a category to every transaction in place and return them."""
    out = list(transactions)
    for tx in out:
        tx.category = categorize_description(tx.description)
    return out

