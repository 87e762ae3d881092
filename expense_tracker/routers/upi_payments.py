import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from fastapi.concurrency import run_in_threadpool

from ..dependencies import get_ingestion_service
from ..errors import EmptyPayloadError, MalformedPayloadError, StoreError, ValidationError
from ..models import ExpenseResponse
from ..services.ingestion_service import Duplicate, IngestionService

logger = logging.getLogger(__name__)

router = APIRouter()


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


@router.post(
    "/upi/payment",
    status_code=201,
    response_model=ExpenseResponse,
    responses={400: {}, 409: {}, 500: {}},
)
async def receive_upi_payment(
    request: Request,
    service: IngestionService = Depends(get_ingestion_service),
):
    """Record a UPI payment notification posted as JSON.

    201 with the stored expense, 409 when the transaction id was already
    recorded, 400 for an empty, non-JSON or invalid body.
    """
    logger.info("UPI payment trigger processing a request.")
    body = await request.body()

    try:
        result = await run_in_threadpool(service.ingest, body)
    except EmptyPayloadError:
        return error_response(400, "Request body is empty")
    except MalformedPayloadError as e:
        logger.warning("Rejected malformed payment payload: %s", e)
        return error_response(400, "Invalid JSON format")
    except ValidationError as e:
        logger.warning("Rejected invalid payment payload: %s", e)
        return error_response(400, "Invalid payment data", details=e.fields)
    except StoreError:
        logger.exception("Error processing UPI payment")
        return error_response(500, "Internal server error")

    if isinstance(result, Duplicate):
        return error_response(
            409, "Transaction already exists", transactionId=result.transaction_id
        )

    return ExpenseResponse.from_record(result.record)
