from datetime import datetime

import pytest

from ..errors import InvalidIdFormat, NotFound
from ..services.query_service import ExpenseFilter, QueryService, parse_date, parse_limit
from ..stores.predicates import EQ, GTE, LTE, Predicate
from ..stores.sqlite_store import compile_predicates
from .factories import body


def test_parse_filter_is_tolerant(queries):
    expense_filter = queries.parse_filter(
        category="", start_date="not a date", end_date="2024-13-45", limit="ten"
    )
    assert expense_filter == ExpenseFilter(limit=100)
    assert expense_filter.predicates() == []


def test_parse_date_accepts_iso_forms():
    assert parse_date("2024-01-10") == datetime(2024, 1, 10)
    assert parse_date("2024-01-10T08:00:00Z") == datetime(2024, 1, 10, 8, 0)
    assert parse_date("2024-01-10T08:00:00+05:30") == datetime(2024, 1, 10, 2, 30)
    assert parse_date("  ") is None


@pytest.mark.parametrize(
    "raw, expected", [(None, 100), ("25", 25), ("0", 100), ("-1", 100), ("2.5", 100)]
)
def test_parse_limit(raw, expected):
    assert parse_limit(raw) == expected


def test_filter_composes_predicates():
    expense_filter = ExpenseFilter(
        category="Food", start_date=datetime(2024, 1, 1), end_date=datetime(2024, 1, 31)
    )
    assert expense_filter.predicates() == [
        Predicate("category", EQ, "Food"),
        Predicate("transaction_date", GTE, "2024-01-01T00:00:00.000000"),
        Predicate("transaction_date", LTE, "2024-01-31T00:00:00.000000"),
    ]


def test_compile_predicates_to_sql():
    where, params = compile_predicates(
        [Predicate("category", EQ, "Food"), Predicate("transaction_date", GTE, "2024")]
    )
    assert where == " WHERE category = ? AND transaction_date >= ?"
    assert params == ["Food", "2024"]
    assert compile_predicates([]) == ("", [])


def test_list_respects_default_limit_from_settings(store, ingestion):
    for n in range(5):
        ingestion.ingest(body(transactionId=f"TX{n}", transactionDate=f"2024-01-0{n + 1}"))

    queries = QueryService(store, default_limit=3)
    result = queries.list_expenses(queries.parse_filter())

    assert result.count == 3
    assert [r.transaction_id for r in result.expenses] == ["TX4", "TX3", "TX2"]


def test_get_expense_by_id_accepts_uppercase_uuid(queries, ingestion):
    record = ingestion.ingest(body()).record

    assert queries.get_expense_by_id(record.id.upper()) == record


def test_get_expense_by_id_errors(queries):
    with pytest.raises(InvalidIdFormat):
        queries.get_expense_by_id("1234")

    with pytest.raises(NotFound):
        queries.get_expense_by_id("3f2504e0-4f89-41d3-9a0c-0305e82c3301")


def test_parse_date_accepts_us_forms_and_ignores_overflow():
    assert parse_date("01/15/2024") == datetime(2024, 1, 15)
    assert parse_date("01/15/2024 18:30") == datetime(2024, 1, 15, 18, 30)
    assert parse_date("0001-01-01T00:00:00+05:30") is None
