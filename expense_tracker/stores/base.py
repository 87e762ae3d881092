from typing import List, Optional, Protocol, Sequence

from ..models.expense_models import ExpenseRecord
from .predicates import Predicate


class ExpenseStore(Protocol):
    """Durable home of expense records.

    Implementations must enforce uniqueness of ``transaction_id`` themselves:
    ``insert`` raises ``ConstraintViolation`` when another record already
    holds the id, even if a prior ``find_by_transaction_id`` saw nothing.
    Any other failure surfaces as ``StoreError``.
    """

    def find_by_transaction_id(self, transaction_id: str) -> Optional[ExpenseRecord]:
        ...

    def insert(self, record: ExpenseRecord) -> ExpenseRecord:
        ...

    def get_by_id(self, expense_id: str) -> Optional[ExpenseRecord]:
        ...

    def query(self, predicates: Sequence[Predicate], limit: int) -> List[ExpenseRecord]:
        """Matching records, newest ``transaction_date`` first, at most ``limit``."""
        ...
