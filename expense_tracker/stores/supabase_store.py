from typing import List, Optional, Sequence

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from ..errors import ConstraintViolation, StoreError
from ..models.expense_models import ExpenseRecord
from .predicates import EQ, GTE, LTE, Predicate
from .rows import record_to_row, row_to_record


TABLE = "expenses"
UNIQUE_VIOLATION = "23505"


def apply_predicates(request, predicates: Sequence[Predicate]):
    """Chain PostgREST filters onto a select request."""
    for predicate in predicates:
        if predicate.operator == EQ:
            request = request.eq(predicate.column, predicate.value)
        elif predicate.operator == GTE:
            request = request.gte(predicate.column, predicate.value)
        elif predicate.operator == LTE:
            request = request.lte(predicate.column, predicate.value)
        else:
            raise StoreError(f"Unsupported predicate: {predicate}")
    return request


class SupabaseExpenseStore:
    """Expense store on a Supabase (PostgREST) table.

    The table is expected to carry a unique index on ``transaction_id``;
    PostgreSQL reports violations with SQLSTATE 23505.
    """

    def __init__(self, client: Client):
        self.client = client

    def find_by_transaction_id(self, transaction_id: str) -> Optional[ExpenseRecord]:
        return self._first(
            self.client.table(TABLE).select("*").eq("transaction_id", transaction_id).limit(1)
        )

    def get_by_id(self, expense_id: str) -> Optional[ExpenseRecord]:
        return self._first(self.client.table(TABLE).select("*").eq("id", expense_id).limit(1))

    def insert(self, record: ExpenseRecord) -> ExpenseRecord:
        try:
            self.client.table(TABLE).insert(record_to_row(record)).execute()
        except APIError as e:
            if str(e.code) == UNIQUE_VIOLATION:
                raise ConstraintViolation(record.transaction_id) from e
            raise StoreError(f"Supabase insert failed: {e.message}") from e
        except httpx.HTTPError as e:
            raise StoreError(f"Supabase insert failed: {e}") from e
        return record

    def query(self, predicates: Sequence[Predicate], limit: int) -> List[ExpenseRecord]:
        request = apply_predicates(self.client.table(TABLE).select("*"), predicates)
        request = request.order("transaction_date", desc=True).limit(limit)
        return [row_to_record(row) for row in self._execute(request)]

    def _first(self, request) -> Optional[ExpenseRecord]:
        rows = self._execute(request)
        return row_to_record(rows[0]) if rows else None

    def _execute(self, request) -> list:
        try:
            result = request.execute()
        except APIError as e:
            raise StoreError(f"Supabase query failed: {e.message}") from e
        except httpx.HTTPError as e:
            raise StoreError(f"Supabase query failed: {e}") from e
        return result.data or []
