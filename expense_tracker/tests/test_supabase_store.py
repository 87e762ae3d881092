from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock

import httpx
import pytest
from postgrest.exceptions import APIError

from ..errors import ConstraintViolation, StoreError
from ..models.expense_models import ExpenseRecord
from ..stores.predicates import category_equals, transaction_date_from
from ..stores.supabase_store import SupabaseExpenseStore


def make_record(**overrides):
    values = dict(
        id="3f2504e0-4f89-41d3-9a0c-0305e82c3301",
        transaction_id="TX1",
        upi_id="a@bank",
        merchant_name="Shop",
        amount=Decimal("100.50"),
        transaction_date=datetime(2024, 1, 1),
        created_at=datetime(2024, 1, 2, 3, 4, 5),
        raw_payload="{}",
    )
    values.update(overrides)
    return ExpenseRecord(**values)


def supabase_row():
    return {
        "id": "3f2504e0-4f89-41d3-9a0c-0305e82c3301",
        "transaction_id": "TX1",
        "payment_method": "UPI",
        "upi_id": "a@bank",
        "merchant_name": "Shop",
        "amount": 100.5,
        "currency": "INR",
        "description": None,
        "category": "Others",
        "transaction_date": "2024-01-01T00:00:00+00:00",
        "created_at": "2024-01-02T03:04:05+00:00",
        "updated_at": None,
        "status": "Success",
        "raw_payload": "{}",
    }


def test_insert_sends_flat_row():
    client = MagicMock()
    store = SupabaseExpenseStore(client)

    store.insert(make_record())

    client.table.assert_called_with("expenses")
    row = client.table.return_value.insert.call_args.args[0]
    assert row["amount"] == "100.50"
    assert row["transaction_date"] == "2024-01-01T00:00:00.000000"


def test_unique_violation_becomes_constraint_violation():
    client = MagicMock()
    client.table.return_value.insert.return_value.execute.side_effect = APIError(
        {"message": "duplicate key value", "code": "23505", "hint": None, "details": None}
    )

    with pytest.raises(ConstraintViolation):
        SupabaseExpenseStore(client).insert(make_record())


def test_other_api_errors_become_store_errors():
    client = MagicMock()
    client.table.return_value.insert.return_value.execute.side_effect = APIError(
        {"message": "permission denied", "code": "42501", "hint": None, "details": None}
    )

    with pytest.raises(StoreError) as excinfo:
        SupabaseExpenseStore(client).insert(make_record())
    assert not isinstance(excinfo.value, ConstraintViolation)


def test_network_errors_become_store_errors():
    client = MagicMock()
    request = client.table.return_value.select.return_value
    request.order.return_value = request
    request.limit.return_value = request
    request.execute.side_effect = httpx.ConnectError("connection refused")

    with pytest.raises(StoreError):
        SupabaseExpenseStore(client).query([], limit=10)


def test_query_chains_filters_order_and_limit():
    client = MagicMock()
    request = client.table.return_value.select.return_value
    request.eq.return_value = request
    request.gte.return_value = request
    request.order.return_value = request
    request.limit.return_value = request
    request.execute.return_value = MagicMock(data=[supabase_row()])

    records = SupabaseExpenseStore(client).query(
        [category_equals("Others"), transaction_date_from(datetime(2023, 12, 1))], limit=5
    )

    request.eq.assert_called_once_with("category", "Others")
    request.gte.assert_called_once_with("transaction_date", "2023-12-01T00:00:00.000000")
    request.order.assert_called_once_with("transaction_date", desc=True)
    request.limit.assert_called_once_with(5)
    assert records == [make_record(description=None)]


def test_find_by_transaction_id_missing():
    client = MagicMock()
    request = client.table.return_value.select.return_value.eq.return_value.limit.return_value
    request.execute.return_value = MagicMock(data=[])

    assert SupabaseExpenseStore(client).find_by_transaction_id("nope") is None


def test_rows_with_trimmed_fractional_seconds():
    row = supabase_row()
    row["created_at"] = "2024-01-02T03:04:05.12345"
    client = MagicMock()
    request = client.table.return_value.select.return_value.eq.return_value.limit.return_value
    request.execute.return_value = MagicMock(data=[row])

    record = SupabaseExpenseStore(client).get_by_id(row["id"])

    assert record.created_at == datetime(2024, 1, 2, 3, 4, 5, 123450)
