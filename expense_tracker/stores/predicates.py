"""Filter predicates shared by every expense store.

A predicate names a column, a comparison and a value already in the
store's text representation. Stores only need to know how to render the
three operators below.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .rows import format_timestamp

EQ = "eq"
GTE = "gte"
LTE = "lte"


@dataclass(frozen=True)
class Predicate:
    column: str
    operator: str
    value: Any


def category_equals(category: str) -> Predicate:
    return Predicate("category", EQ, category)


def transaction_date_from(start: datetime) -> Predicate:
    """Inclusive lower bound on the transaction date."""
    return Predicate("transaction_date", GTE, format_timestamp(start))


def transaction_date_until(end: datetime) -> Predicate:
    """Inclusive upper bound on the transaction date."""
    return Predicate("transaction_date", LTE, format_timestamp(end))
