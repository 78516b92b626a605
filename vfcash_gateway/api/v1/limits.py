"""Limits endpoints: read and wholesale replace"""

import logging

from fastapi import APIRouter, Depends, Request

from vfcash_gateway.api.dependencies import get_limits_store, get_request_id
from vfcash_gateway.api.errors import error_response
from vfcash_gateway.api.v1.schemas import ErrorResponse, LimitsResponse, LimitsSchema, LimitsUpdateResponse
from vfcash_gateway.domain.exceptions import InvalidLimitsError
from vfcash_gateway.domain.validation import validate_limits
from vfcash_gateway.infrastructure.observability.metrics import limits_update_counter, validation_failure_counter
from vfcash_gateway.infrastructure.storage.base import LimitsStore

router = APIRouter()


@router.get("/limits", response_model=LimitsResponse)
def get_limits(
    request: Request,
    store: LimitsStore = Depends(get_limits_store),
):
    try:
        return LimitsResponse(limits=LimitsSchema.model_validate(store.get().to_dict()))
    except Exception as e:
        logging.error(f"Error fetching limits: {e}", extra={"request_id": get_request_id(request)})
        return error_response(500, "Failed to fetch limits")


@router.api_route(
    "/limits",
    methods=["POST", "PUT"],
    response_model=LimitsUpdateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def update_limits(
    request: Request,
    store: LimitsStore = Depends(get_limits_store),
):
    """
    Replace all four limits at once.

    POST and PUT behave identically. On a rule violation the stored limits
    are left untouched.
    """
    request_id = get_request_id(request)

    try:
        body = await request.json()
        limits = store.replace(validate_limits(body))
        limits_update_counter.inc()

        return LimitsUpdateResponse(
            message="Limits updated successfully",
            limits=LimitsSchema.model_validate(limits.to_dict()),
        )

    except InvalidLimitsError as e:
        validation_failure_counter.labels(kind="limits").inc()
        logging.warning(f"Limits rejected: {e}", extra={"request_id": request_id})
        return error_response(400, str(e))

    except Exception as e:
        logging.error(f"Error updating limits: {e}", extra={"request_id": request_id})
        return error_response(500, "Failed to update limits")
