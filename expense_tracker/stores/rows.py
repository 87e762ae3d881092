"""Conversion between ExpenseRecord and flat store rows."""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from pydantic import TypeAdapter

from ..models.expense_models import AMOUNT_QUANTUM, ExpenseRecord, to_naive_utc

_TIMESTAMP = TypeAdapter(datetime)

COLUMNS = (
    "id",
    "transaction_id",
    "payment_method",
    "upi_id",
    "merchant_name",
    "amount",
    "currency",
    "description",
    "category",
    "transaction_date",
    "created_at",
    "updated_at",
    "status",
    "raw_payload",
)


def format_timestamp(value: datetime) -> str:
    # Fixed width so that string order matches time order.
    return to_naive_utc(value).isoformat(timespec="microseconds")


def parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return to_naive_utc(value) if value is not None else None
    # PostgREST trims trailing zeros from fractional seconds.
    return to_naive_utc(_TIMESTAMP.validate_python(str(value)))


def record_to_row(record: ExpenseRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "transaction_id": record.transaction_id,
        "payment_method": record.payment_method,
        "upi_id": record.upi_id,
        "merchant_name": record.merchant_name,
        "amount": str(record.amount.quantize(AMOUNT_QUANTUM)),
        "currency": record.currency,
        "description": record.description,
        "category": record.category,
        "transaction_date": format_timestamp(record.transaction_date),
        "created_at": format_timestamp(record.created_at),
        "updated_at": format_timestamp(record.updated_at) if record.updated_at else None,
        "status": record.status,
        "raw_payload": record.raw_payload,
    }


def row_to_record(row: Mapping[str, Any]) -> ExpenseRecord:
    return ExpenseRecord(
        id=str(row["id"]),
        transaction_id=row["transaction_id"],
        payment_method=row["payment_method"],
        upi_id=row["upi_id"],
        merchant_name=row["merchant_name"],
        amount=Decimal(str(row["amount"])).quantize(AMOUNT_QUANTUM),
        currency=row["currency"],
        description=row["description"],
        category=row["category"],
        transaction_date=parse_timestamp(row["transaction_date"]),
        created_at=parse_timestamp(row["created_at"]),
        updated_at=parse_timestamp(row["updated_at"]),
        status=row["status"],
        raw_payload=row["raw_payload"],
    )
