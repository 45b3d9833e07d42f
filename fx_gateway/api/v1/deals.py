"""FX deal endpoints - single create, lookups, and batch import"""

import logging
import time
from typing import List, Optional
from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse

from fx_gateway.api.dependencies import get_deal_repository, get_import_service, get_request_id
from fx_gateway.api.errors import error_response
from fx_gateway.api.v1.schemas import BatchRequest, BatchResponse, DealRequest, DealResponse
from fx_gateway.domain.deal_import import DealImportService
from fx_gateway.domain.exceptions import DealNotFoundError
from fx_gateway.domain.models import (
    BatchOutcome,
    BusinessRuleFailure,
    DealCreated,
    DuplicateFailure,
    ValidationFailure,
)
from fx_gateway.infrastructure.database.repositories import DealRepository
from fx_gateway.infrastructure.observability.logging import log_batch_import
from fx_gateway.infrastructure.observability.metrics import record_batch_outcome, record_create_result

router = APIRouter()


def batch_status_code(outcome: BatchOutcome) -> int:
    """
    Pick the HTTP status for a batch outcome.

    201 when every deal was imported, 207 when some were, 400 when none were
    (including a rejected empty batch).
    """
    if outcome.successful_imports > 0 and outcome.failed_imports > 0:
        return 207
    if outcome.successful_imports > 0:
        return 201
    return 400


@router.post("/deals", response_model=DealResponse, status_code=201)
def create_deal(
    deal: DealRequest,
    request: Request,
    service: DealImportService = Depends(get_import_service),
):
    """
    Create a single FX deal.

    Returns:
        201 with the stored deal; 400 on invalid fields or same-currency pair,
        409 on duplicate unique ID, 500 when the store fails
    """
    request_id = get_request_id(request)
    logging.info(
        "Received request to create deal",
        extra={"request_id": request_id, "deal_unique_id": deal.deal_unique_id},
    )

    result = service.submit_deal(deal.to_domain())
    record_create_result(result)

    if isinstance(result, DealCreated):
        return DealResponse.from_domain(result.deal)
    if isinstance(result, ValidationFailure):
        return error_response(request, 400, "Validation Failed", result.message)
    if isinstance(result, DuplicateFailure):
        return error_response(request, 409, "Conflict", result.message)
    if isinstance(result, BusinessRuleFailure):
        return error_response(request, 400, "Bad Request", result.message)

    logging.error(
        "Deal creation failed in store",
        extra={"request_id": request_id, "detail": result.message},
    )
    return error_response(request, 500, "Internal Server Error", "An unexpected error occurred")


@router.get("/deals", response_model=List[DealResponse])
def list_deals(repository: DealRepository = Depends(get_deal_repository)):
    """Retrieve every stored FX deal"""
    return [DealResponse.from_domain(d) for d in repository.find_all()]


@router.get("/deals/unique/{deal_unique_id}", response_model=DealResponse)
def get_deal_by_unique_id(
    deal_unique_id: str,
    repository: DealRepository = Depends(get_deal_repository),
):
    """Retrieve a deal by its unique business identifier"""
    deal = repository.find_by_unique_id(deal_unique_id)
    if deal is None:
        raise DealNotFoundError.for_unique_id(deal_unique_id)
    return DealResponse.from_domain(deal)


@router.get("/deals/{deal_id}", response_model=DealResponse)
def get_deal(deal_id: int, repository: DealRepository = Depends(get_deal_repository)):
    """Retrieve a deal by its database ID"""
    deal = repository.find_by_id(deal_id)
    if deal is None:
        raise DealNotFoundError.for_id(deal_id)
    return DealResponse.from_domain(deal)


@router.post("/deals/batch", response_model=BatchResponse)
def import_batch(
    request: Request,
    batch: Optional[BatchRequest] = Body(default=None),
    service: DealImportService = Depends(get_import_service),
):
    """
    Import a batch of FX deals.

    Each deal is processed independently; valid deals are saved even when
    others in the same batch fail. Never fails as a whole for per-deal errors.
    """
    request_id = get_request_id(request)
    logging.info("Received batch import request", extra={"request_id": request_id})

    start_time = time.perf_counter()
    outcome = service.import_batch(
        [d.to_domain() for d in batch.deals] if batch and batch.deals is not None else None
    )
    record_batch_outcome(outcome)
    log_batch_import(
        outcome.total_requests,
        outcome.successful_imports,
        outcome.failed_imports,
        (time.perf_counter() - start_time) * 1000,
    )

    response = BatchResponse.from_domain(outcome)
    return JSONResponse(status_code=batch_status_code(outcome), content=response.model_dump(mode="json"))
