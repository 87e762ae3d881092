from .expense_models import (
    ExpenseListResponse,
    ExpenseRecord,
    ExpenseResponse,
    UpiPaymentNotification,
)
