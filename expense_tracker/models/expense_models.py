from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

AMOUNT_QUANTUM = Decimal("0.01")
# NUMERIC(18,2): at most 16 digits before the decimal point
AMOUNT_MAX_INTEGER_DIGITS = 16


def to_naive_utc(value: datetime) -> datetime:
    """Drop tzinfo after converting to UTC; naive values are taken as UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class UpiPaymentNotification(BaseModel):
    """Inbound UPI payment notification (HTTP body or queue message)."""
    transaction_id: str = Field(..., alias="transactionId", max_length=200)
    upi_id: str = Field(..., alias="upiId", max_length=200)
    merchant_name: str = Field(..., alias="merchantName", max_length=200)
    amount: Decimal = Field(..., allow_inf_nan=False)
    currency: str = Field(default="INR", max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)
    category: str = Field(default="Others", max_length=100)
    transaction_date: datetime = Field(..., alias="transactionDate")
    status: str = Field(default="Success", max_length=50)

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "transactionId": "UPI2024010112345",
                "upiId": "merchant@okbank",
                "merchantName": "Chai Point",
                "amount": 120.50,
                "currency": "INR",
                "description": "Evening tea",
                "category": "Food",
                "transactionDate": "2024-01-01T18:30:00",
                "status": "Success",
            }
        },
    )

    @field_validator("currency", "category", "status", mode="before")
    @classmethod
    def null_means_default(cls, v, info):
        if v is None:
            return cls.model_fields[info.field_name].default
        return v

    @field_validator("transaction_id", "upi_id", "merchant_name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("amount")
    @classmethod
    def positive_two_places(cls, v: Decimal) -> Decimal:
        if v.adjusted() >= AMOUNT_MAX_INTEGER_DIGITS:
            raise ValueError("Amount is too large")
        try:
            v = v.quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            raise ValueError("Amount is not a valid decimal")
        if v <= 0:
            raise ValueError("Amount must be greater than 0")
        return v

    @field_validator("transaction_date")
    @classmethod
    def normalize_date(cls, v: datetime) -> datetime:
        try:
            return to_naive_utc(v)
        except OverflowError:
            raise ValueError("transactionDate out of range")


class ExpenseRecord(BaseModel):
    """Persisted expense, as owned by the record store."""
    id: str
    transaction_id: str
    payment_method: str = "UPI"
    upi_id: str
    merchant_name: str
    amount: Decimal
    currency: str = "INR"
    description: Optional[str] = None
    category: str = "Others"
    transaction_date: datetime
    created_at: datetime
    updated_at: Optional[datetime] = None
    status: str = "Success"
    raw_payload: Optional[str] = None


class ExpenseResponse(BaseModel):
    """Public shape of an expense; omits raw payload and update time."""
    id: str
    transaction_id: str = Field(..., alias="transactionId")
    payment_method: str = Field(..., alias="paymentMethod")
    upi_id: str = Field(..., alias="upiId")
    merchant_name: str = Field(..., alias="merchantName")
    amount: Decimal
    currency: str
    description: Optional[str] = None
    category: str
    transaction_date: datetime = Field(..., alias="transactionDate")
    created_at: datetime = Field(..., alias="createdAt")
    status: str

    model_config = ConfigDict(populate_by_name=True)

    @field_serializer("amount")
    def amount_as_number(self, v: Decimal) -> float:
        return float(v)

    @classmethod
    def from_record(cls, record: ExpenseRecord) -> "ExpenseResponse":
        return cls(
            id=record.id,
            transaction_id=record.transaction_id,
            payment_method=record.payment_method,
            upi_id=record.upi_id,
            merchant_name=record.merchant_name,
            amount=record.amount,
            currency=record.currency,
            description=record.description,
            category=record.category,
            transaction_date=record.transaction_date,
            created_at=record.created_at,
            status=record.status,
        )


class ExpenseListResponse(BaseModel):
    count: int
    expenses: List[ExpenseResponse]
