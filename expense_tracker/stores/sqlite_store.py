import sqlite3
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from ..db import connection, init_db
from ..errors import ConstraintViolation, StoreError
from ..models.expense_models import ExpenseRecord
from .predicates import EQ, GTE, LTE, Predicate
from .rows import COLUMNS, record_to_row, row_to_record


_SQL_OPERATORS = {EQ: "=", GTE: ">=", LTE: "<="}
_SELECT = f"SELECT {', '.join(COLUMNS)} FROM expenses"


def compile_predicates(predicates: Sequence[Predicate]) -> Tuple[str, list]:
    """Render predicates as a WHERE clause joined with AND."""
    if not predicates:
        return "", []
    clauses = []
    params = []
    for predicate in predicates:
        if predicate.column not in COLUMNS or predicate.operator not in _SQL_OPERATORS:
            raise StoreError(f"Unsupported predicate: {predicate}")
        clauses.append(f"{predicate.column} {_SQL_OPERATORS[predicate.operator]} ?")
        params.append(predicate.value)
    return " WHERE " + " AND ".join(clauses), params


class SQLiteExpenseStore:
    """Expense store on a local SQLite file, one connection per operation."""

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = db_path

    def init_schema(self) -> None:
        try:
            init_db(self.db_path)
        except sqlite3.Error as e:
            raise StoreError(f"Could not initialise expense schema: {e}") from e

    def find_by_transaction_id(self, transaction_id: str) -> Optional[ExpenseRecord]:
        return self._fetch_one(f"{_SELECT} WHERE transaction_id = ? LIMIT 1", (transaction_id,))

    def get_by_id(self, expense_id: str) -> Optional[ExpenseRecord]:
        return self._fetch_one(f"{_SELECT} WHERE id = ?", (expense_id,))

    def insert(self, record: ExpenseRecord) -> ExpenseRecord:
        row = record_to_row(record)
        placeholders = ", ".join(f":{column}" for column in COLUMNS)
        try:
            with connection(self.db_path) as conn:
                conn.execute(
                    f"INSERT INTO expenses ({', '.join(COLUMNS)}) VALUES ({placeholders})",
                    row,
                )
                conn.commit()
        except sqlite3.IntegrityError as e:
            if "transaction_id" in str(e):
                raise ConstraintViolation(record.transaction_id) from e
            raise StoreError(f"Expense insert rejected: {e}") from e
        except sqlite3.Error as e:
            raise StoreError(f"Expense insert failed: {e}") from e
        return record

    def query(self, predicates: Sequence[Predicate], limit: int) -> List[ExpenseRecord]:
        where, params = compile_predicates(predicates)
        sql = f"{_SELECT}{where} ORDER BY transaction_date DESC, created_at DESC LIMIT ?"
        try:
            with connection(self.db_path) as conn:
                rows = conn.execute(sql, (*params, limit)).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Expense query failed: {e}") from e
        return [row_to_record(row) for row in rows]

    def _fetch_one(self, sql: str, params: tuple) -> Optional[ExpenseRecord]:
        try:
            with connection(self.db_path) as conn:
                row = conn.execute(sql, params).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Expense lookup failed: {e}") from e
        return row_to_record(row) if row is not None else None
