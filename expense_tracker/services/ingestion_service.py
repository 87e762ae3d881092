"""Ingestion of UPI payment notifications into expense records.

Shared by the HTTP trigger and the queue worker so both paths validate,
deduplicate and persist the same way.
"""
import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, Union

from pydantic import ValidationError as PydanticValidationError

from ..errors import (
    ConstraintViolation,
    EmptyPayloadError,
    MalformedPayloadError,
    StoreError,
    ValidationError,
)
from ..models.expense_models import ExpenseRecord, UpiPaymentNotification
from ..stores.base import ExpenseStore

logger = logging.getLogger(__name__)

PAYMENT_METHOD_UPI = "UPI"


@dataclass(frozen=True)
class Created:
    record: ExpenseRecord


@dataclass(frozen=True)
class Duplicate:
    transaction_id: str


IngestResult = Union[Created, Duplicate]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _key_lookup() -> Dict[str, str]:
    """Lower-cased alias or field name -> alias, for case-insensitive keys."""
    lookup = {}
    for name, info in UpiPaymentNotification.model_fields.items():
        alias = info.alias or name
        lookup[alias.lower()] = alias
        lookup[name.lower()] = alias
    return lookup


_KEYS = _key_lookup()


def decode_body(raw_body: Union[str, bytes, None]) -> str:
    if raw_body is None:
        raise EmptyPayloadError("Request body is empty")
    if isinstance(raw_body, bytes):
        try:
            raw_body = raw_body.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise MalformedPayloadError("Payload is not valid UTF-8") from e
    if not raw_body.strip():
        raise EmptyPayloadError("Request body is empty")
    return raw_body


def parse_notification(body: str) -> UpiPaymentNotification:
    """Decode and validate a notification body.

    Raises:
        MalformedPayloadError: Body is not a JSON object
        ValidationError: Body is a JSON object with missing or invalid fields
    """
    try:
        payload = json.loads(body, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise MalformedPayloadError(f"Invalid JSON format: {e.msg}") from e

    if not isinstance(payload, dict):
        raise MalformedPayloadError("Payment notification must be a JSON object")

    normalized: Dict[str, Any] = {}
    for key, value in payload.items():
        normalized[_KEYS.get(str(key).lower(), key)] = value

    try:
        return UpiPaymentNotification.model_validate(normalized)
    except PydanticValidationError as e:
        fields = [
            {
                "field": ".".join(str(part) for part in err["loc"]) or "payload",
                "message": err["msg"],
            }
            for err in e.errors()
        ]
        raise ValidationError(fields) from e


class IngestionService:
    """Validate, deduplicate and persist payment notifications."""

    def __init__(
        self,
        store: ExpenseStore,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self.store = store
        self.clock = clock
        self.id_factory = id_factory

    def build_record(self, notification: UpiPaymentNotification, raw_payload: str) -> ExpenseRecord:
        return ExpenseRecord(
            id=self.id_factory(),
            transaction_id=notification.transaction_id,
            payment_method=PAYMENT_METHOD_UPI,
            upi_id=notification.upi_id,
            merchant_name=notification.merchant_name,
            amount=notification.amount,
            currency=notification.currency,
            description=notification.description,
            category=notification.category,
            transaction_date=notification.transaction_date,
            created_at=self.clock(),
            updated_at=None,
            status=notification.status,
            raw_payload=raw_payload,
        )

    def ingest(self, raw_body: Union[str, bytes, None]) -> IngestResult:
        """Record one notification.

        Returns ``Created`` for a new record and ``Duplicate`` when the
        transaction id is already stored, including when a concurrent
        ingestion wins the insert. Bad input raises ``MalformedPayloadError``
        or ``ValidationError``; other persistence failures raise
        ``StoreError``.
        """
        body = decode_body(raw_body)
        logger.debug("Ingesting payment notification: %s", body)
        notification = parse_notification(body)
        transaction_id = notification.transaction_id

        if self.store.find_by_transaction_id(transaction_id) is not None:
            logger.warning("Duplicate transaction detected: %s", transaction_id)
            return Duplicate(transaction_id)

        record = self.build_record(notification, body)
        try:
            self.store.insert(record)
        except ConstraintViolation:
            logger.warning("Duplicate transaction detected on insert: %s", transaction_id)
            return Duplicate(transaction_id)
        except StoreError:
            logger.exception("Failed to persist transaction %s", transaction_id)
            raise

        logger.info(
            "Expense created. Transaction ID: %s, Amount: %s %s",
            record.transaction_id,
            record.amount,
            record.currency,
        )
        return Created(record)
