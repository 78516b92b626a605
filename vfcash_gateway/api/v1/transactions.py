"""Transaction ingestion endpoints: list, single/batch upload, bulk upload, SMS upload, clear"""

import logging

from fastapi import APIRouter, Depends, Request

from vfcash_gateway.api.dependencies import get_request_id, get_transaction_store
from vfcash_gateway.api.errors import error_response
from vfcash_gateway.api.v1.schemas import (
    BulkIngestResponse,
    BulkSummary,
    ClearResponse,
    ErrorResponse,
    IngestResponse,
    SmsIngestResponse,
    SmsRequest,
    TransactionListResponse,
    TransactionSchema,
)
from vfcash_gateway.domain.exceptions import BatchValidationError, InvalidTransactionDataError, SmsParseError
from vfcash_gateway.domain.models import UpsertSummary
from vfcash_gateway.domain.sms_parser import parse_sms
from vfcash_gateway.domain.validation import validate_batch, validate_transaction
from vfcash_gateway.infrastructure.observability.logging import log_ingestion
from vfcash_gateway.infrastructure.observability.metrics import (
    record_ingestion,
    transaction_store_size_gauge,
    validation_failure_counter,
)
from vfcash_gateway.infrastructure.storage.base import TransactionStore
from vfcash_gateway.utils.date_utils import utc_now

router = APIRouter()

ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def _single_summary(store: TransactionStore, added: bool) -> UpsertSummary:
    return UpsertSummary(added=int(added), updated=int(not added), total=store.count())


@router.get("/transactions", response_model=TransactionListResponse, response_model_exclude_none=True)
def list_transactions(
    request: Request,
    store: TransactionStore = Depends(get_transaction_store),
):
    """Return every stored transaction, newest first."""
    try:
        transactions = store.list()
        return TransactionListResponse(
            transactions=[TransactionSchema.model_validate(t.to_dict()) for t in transactions],
            count=len(transactions),
        )
    except Exception as e:
        logging.error(f"Error fetching transactions: {e}", extra={"request_id": get_request_id(request)})
        return error_response(500, "Failed to fetch transactions")


@router.post("/transactions", response_model=IngestResponse, responses=ERROR_RESPONSES)
async def create_transactions(
    request: Request,
    store: TransactionStore = Depends(get_transaction_store),
):
    """
    Accept a single transaction object or an array of them.

    Every record is validated before the store is touched, so a rejected
    array leaves the store unchanged.
    """
    request_id = get_request_id(request)

    try:
        body = await request.json()

        if isinstance(body, list):
            transactions = validate_batch(body)
            summary = store.upsert_many(transactions)
            mode = "batch"
            message = f"Successfully processed {len(transactions)} transactions"
        elif isinstance(body, dict):
            transaction = validate_transaction(body)
            summary = _single_summary(store, store.upsert_one(transaction))
            mode = "single"
            message = "Transaction received successfully"
        else:
            raise InvalidTransactionDataError("Invalid request body")

        record_ingestion(summary)
        log_ingestion(request_id, mode, summary.added + summary.updated, summary.added, summary.updated, summary.total)

        return IngestResponse(message=message, transaction_count=summary.total)

    except BatchValidationError as e:
        validation_failure_counter.labels(kind="transaction").inc()
        logging.warning(f"Batch rejected: {e.details}", extra={"request_id": request_id})
        return error_response(400, e.first_error, details=e.details)

    except InvalidTransactionDataError as e:
        validation_failure_counter.labels(kind="transaction").inc()
        logging.warning(f"Transaction rejected: {e}", extra={"request_id": request_id})
        return error_response(400, str(e))

    except Exception as e:
        logging.error(f"Error processing transaction: {e}", extra={"request_id": request_id})
        return error_response(500, "Failed to process transaction")


@router.post("/transactions/bulk", response_model=BulkIngestResponse, responses=ERROR_RESPONSES)
async def bulk_upload_transactions(
    request: Request,
    store: TransactionStore = Depends(get_transaction_store),
):
    """
    Apply a non-empty array of transactions as one unit.

    Failures are reported per batch index and nothing is written.
    """
    request_id = get_request_id(request)

    try:
        body = await request.json()

        if not isinstance(body, list):
            return error_response(400, "Bulk upload requires an array of transactions")
        if not body:
            return error_response(400, "No transactions provided")

        transactions = validate_batch(body)
        summary = store.upsert_many(transactions)

        record_ingestion(summary)
        log_ingestion(request_id, "bulk", len(body), summary.added, summary.updated, summary.total)

        return BulkIngestResponse(
            message="Bulk upload completed successfully",
            summary=BulkSummary(
                total_processed=len(body),
                added=summary.added,
                updated=summary.updated,
                total_transactions=summary.total,
            ),
        )

    except BatchValidationError as e:
        validation_failure_counter.labels(kind="transaction").inc()
        logging.warning(f"Bulk upload rejected: {e.details}", extra={"request_id": request_id})
        return error_response(400, "Validation failed", details=e.details)

    except Exception as e:
        logging.error(f"Error processing bulk transactions: {e}", extra={"request_id": request_id})
        return error_response(500, "Failed to process bulk transactions")


@router.post(
    "/transactions/sms",
    response_model=SmsIngestResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
def upload_sms(
    request_body: SmsRequest,
    request: Request,
    store: TransactionStore = Depends(get_transaction_store),
):
    """Parse a forwarded VF-Cash SMS and store the resulting transaction."""
    request_id = get_request_id(request)

    try:
        record = parse_sms(request_body.message, utc_now(), transaction_id=request_body.id)
        transaction = validate_transaction(record)
        summary = _single_summary(store, store.upsert_one(transaction))

        record_ingestion(summary)
        log_ingestion(request_id, "sms", 1, summary.added, summary.updated, summary.total)

        return SmsIngestResponse(
            message="SMS parsed successfully",
            transaction=TransactionSchema.model_validate(transaction.to_dict()),
            transaction_count=summary.total,
        )

    except (SmsParseError, InvalidTransactionDataError) as e:
        validation_failure_counter.labels(kind="sms").inc()
        logging.warning(f"SMS rejected: {e}", extra={"request_id": request_id})
        return error_response(400, str(e))

    except Exception as e:
        logging.error(f"Error parsing SMS message: {e}", extra={"request_id": request_id})
        return error_response(500, "Failed to parse SMS message")


@router.delete("/transactions", response_model=ClearResponse, responses={500: {"model": ErrorResponse}})
def clear_transactions(
    request: Request,
    store: TransactionStore = Depends(get_transaction_store),
):
    """Remove every stored transaction."""
    try:
        store.clear()
        transaction_store_size_gauge.set(0)
        return ClearResponse(message="All transactions cleared")
    except Exception as e:
        logging.error(f"Error clearing transactions: {e}", extra={"request_id": get_request_id(request)})
        return error_response(500, "Failed to clear transactions")
