"""Exceptions raised by the expense ingestion and query pipeline."""
from typing import Dict, List, Optional


class ExpenseTrackerError(Exception):
    """Base exception for expense tracker errors"""
    pass


class ConfigurationError(ExpenseTrackerError):
    """Invalid or missing configuration"""
    pass


class MalformedPayloadError(ExpenseTrackerError):
    """Inbound payload could not be decoded into a notification at all."""
    pass


class EmptyPayloadError(MalformedPayloadError):
    """Inbound payload was empty or whitespace only."""
    pass


class ValidationError(ExpenseTrackerError):
    """Payload decoded, but one or more fields are invalid.

    ``fields`` is a list of ``{"field": ..., "message": ...}`` dicts, one per
    offending field, using the camelCase names of the wire format.
    """

    def __init__(self, fields: List[Dict[str, str]], message: Optional[str] = None):
        self.fields = fields
        names = ", ".join(f["field"] for f in fields) or "payload"
        super().__init__(message or f"Invalid fields: {names}")


class InvalidIdFormat(ExpenseTrackerError):
    """Expense identifier is not a well-formed UUID."""

    def __init__(self, expense_id: str):
        self.expense_id = expense_id
        super().__init__(f"Invalid expense ID format: {expense_id!r}")


class NotFound(ExpenseTrackerError):
    """No expense exists for a well-formed identifier."""

    def __init__(self, expense_id: str):
        self.expense_id = expense_id
        super().__init__(f"Expense not found: {expense_id}")


class StoreError(ExpenseTrackerError):
    """Persistence failure unrelated to uniqueness."""
    pass


class ConstraintViolation(StoreError):
    """The store rejected a row because its transaction id already exists."""

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction id already stored: {transaction_id}")
