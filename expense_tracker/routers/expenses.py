import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..dependencies import get_query_service
from ..errors import InvalidIdFormat, NotFound, StoreError
from ..models import ExpenseListResponse, ExpenseResponse
from ..services.query_service import QueryService
from .upi_payments import error_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/expenses", response_model=ExpenseListResponse, responses={500: {}})
def list_expenses(
    category: Optional[str] = None,
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
    limit: Optional[str] = None,
    service: QueryService = Depends(get_query_service),
):
    """List stored expenses, most recent transaction first.

    Unparseable ``startDate``/``endDate`` values are ignored, and a missing,
    unparseable or non-positive ``limit`` falls back to the default.
    """
    expense_filter = service.parse_filter(category, start_date, end_date, limit)
    try:
        result = service.list_expenses(expense_filter)
    except StoreError:
        logger.exception("Error retrieving expenses")
        return error_response(500, "Internal server error")

    return ExpenseListResponse(
        count=result.count,
        expenses=[ExpenseResponse.from_record(record) for record in result.expenses],
    )


@router.get(
    "/expenses/{expense_id}",
    response_model=ExpenseResponse,
    responses={400: {}, 404: {}, 500: {}},
)
def get_expense(expense_id: str, service: QueryService = Depends(get_query_service)):
    logger.info("Get expense by ID: %s", expense_id)
    try:
        record = service.get_expense_by_id(expense_id)
    except InvalidIdFormat:
        return error_response(400, "Invalid expense ID format")
    except NotFound:
        return error_response(404, "Expense not found")
    except StoreError:
        logger.exception("Error retrieving expense with ID: %s", expense_id)
        return error_response(500, "Internal server error")

    return ExpenseResponse.from_record(record)
