import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union


def get_connection(db_path: Union[str, Path]) -> sqlite3.Connection:
    """Open a SQLite connection with name-addressable rows."""
    conn = sqlite3.connect(str(db_path), timeout=10.0)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def connection(db_path: Union[str, Path]) -> Iterator[sqlite3.Connection]:
    """Connection scoped to a single store operation."""
    conn = get_connection(db_path)
    try:
        yield conn
    finally:
        conn.close()


def init_db(db_path: Union[str, Path]) -> None:
    with connection(db_path) as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS expenses (
                id TEXT PRIMARY KEY,
                transaction_id TEXT NOT NULL,
                payment_method TEXT NOT NULL DEFAULT 'UPI',
                upi_id TEXT NOT NULL,
                merchant_name TEXT NOT NULL,
                amount TEXT NOT NULL,
                currency TEXT NOT NULL DEFAULT 'INR',
                description TEXT,
                category TEXT NOT NULL DEFAULT 'Others',
                transaction_date TEXT NOT NULL,
                created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                updated_at TEXT,
                status TEXT NOT NULL DEFAULT 'Success',
                raw_payload TEXT
            )
            """
        )
        conn.execute(
            "CREATE UNIQUE INDEX IF NOT EXISTS ix_expenses_transaction_id "
            "ON expenses(transaction_id)"
        )
        conn.execute(
            "CREATE INDEX IF NOT EXISTS ix_expenses_transaction_date "
            "ON expenses(transaction_date)"
        )
        conn.execute("CREATE INDEX IF NOT EXISTS ix_expenses_category ON expenses(category)")
        conn.commit()
