from .base import ExpenseStore
from .predicates import (
    Predicate,
    category_equals,
    transaction_date_from,
    transaction_date_until,
)
from .sqlite_store import SQLiteExpenseStore
