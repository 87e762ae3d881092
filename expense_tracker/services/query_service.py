"""Read side: filtered listing and lookup of stored expenses."""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from ..config import DEFAULT_LIST_LIMIT
from ..errors import InvalidIdFormat, NotFound
from ..models.expense_models import ExpenseRecord, to_naive_utc
from ..stores.base import ExpenseStore
from ..stores.predicates import (
    Predicate,
    category_equals,
    transaction_date_from,
    transaction_date_until,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExpenseFilter:
    category: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    limit: int = DEFAULT_LIST_LIMIT

    def predicates(self) -> List[Predicate]:
        predicates = []
        if self.category:
            predicates.append(category_equals(self.category))
        if self.start_date is not None:
            predicates.append(transaction_date_from(self.start_date))
        if self.end_date is not None:
            predicates.append(transaction_date_until(self.end_date))
        return predicates


@dataclass(frozen=True)
class ExpenseList:
    count: int
    expenses: List[ExpenseRecord]


# US-style forms accepted besides ISO-8601
DATE_FORMATS = ("%m/%d/%Y", "%m/%d/%Y %H:%M", "%m/%d/%Y %H:%M:%S")


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Lenient date parsing; anything unparseable means "no bound"."""
    if not value or not value.strip():
        return None
    text = value.strip()
    try:
        return to_naive_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except (ValueError, OverflowError):
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def parse_limit(value: Optional[str], default: int = DEFAULT_LIST_LIMIT) -> int:
    """Positive integer limit, or ``default`` for anything else."""
    if value is None:
        return default
    try:
        limit = int(str(value).strip())
    except ValueError:
        return default
    return limit if limit > 0 else default


def parse_expense_id(expense_id: str) -> str:
    """Canonical string form of a UUID expense id."""
    try:
        return str(uuid.UUID(expense_id.strip()))
    except (ValueError, AttributeError) as e:
        raise InvalidIdFormat(expense_id) from e


class QueryService:
    def __init__(self, store: ExpenseStore, default_limit: int = DEFAULT_LIST_LIMIT):
        self.store = store
        self.default_limit = default_limit

    def parse_filter(
        self,
        category: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        limit: Optional[str] = None,
    ) -> ExpenseFilter:
        """Build a filter from raw query-string values without rejecting any."""
        return ExpenseFilter(
            category=category or None,
            start_date=parse_date(start_date),
            end_date=parse_date(end_date),
            limit=parse_limit(limit, self.default_limit),
        )

    def list_expenses(self, expense_filter: ExpenseFilter) -> ExpenseList:
        """Expenses matching the filter, most recent transaction first."""
        records = self.store.query(expense_filter.predicates(), expense_filter.limit)
        logger.info("Retrieved %d expenses", len(records))
        return ExpenseList(count=len(records), expenses=records)

    def get_expense_by_id(self, expense_id: str) -> ExpenseRecord:
        canonical_id = parse_expense_id(expense_id)
        record = self.store.get_by_id(canonical_id)
        if record is None:
            raise NotFound(canonical_id)
        return record
