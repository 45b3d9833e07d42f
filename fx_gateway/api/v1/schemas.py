"""Pydantic schemas for API request/response validation"""

from dataclasses import asdict
from pydantic import BaseModel
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from fx_gateway.domain.models import BatchOutcome, DealSubmission, FailureRecord, StoredDeal


class DealRequest(BaseModel):
    """
    Request body for a single FX deal.

    Fields are optional here so that field rules are reported by the deal
    validator, item by item, instead of rejecting a whole batch.
    """

    deal_unique_id: Optional[str] = None
    from_currency_code: Optional[str] = None
    to_currency_code: Optional[str] = None
    deal_timestamp: Optional[datetime] = None
    deal_amount: Optional[Decimal] = None

    def to_domain(self) -> DealSubmission:
        return DealSubmission(**self.model_dump())

    @classmethod
    def from_domain(cls, submission: DealSubmission) -> "DealRequest":
        return cls(**asdict(submission))


class DealResponse(BaseModel):
    """Stored FX deal as returned to clients"""

    id: int
    deal_unique_id: str
    from_currency_code: str
    to_currency_code: str
    deal_timestamp: datetime
    deal_amount: Decimal
    created_at: datetime

    @classmethod
    def from_domain(cls, deal: StoredDeal) -> "DealResponse":
        return cls(**asdict(deal))


class BatchRequest(BaseModel):
    """Request body for POST /v1/deals/batch"""

    deals: Optional[List[DealRequest]] = None


class FailedDealImport(BaseModel):
    """Single rejected deal in a batch response"""

    deal_unique_id: Optional[str] = None
    reason: str
    original_request: DealRequest

    @classmethod
    def from_domain(cls, failure: FailureRecord) -> "FailedDealImport":
        return cls(
            deal_unique_id=failure.deal_unique_id,
            reason=failure.reason,
            original_request=DealRequest.from_domain(failure.submission),
        )


class BatchResponse(BaseModel):
    """Response for POST /v1/deals/batch"""

    total_requests: int
    successful_imports: int
    failed_imports: int
    successful_deals: List[DealResponse]
    failed_deals: List[FailedDealImport]

    @classmethod
    def from_domain(cls, outcome: BatchOutcome) -> "BatchResponse":
        return cls(
            total_requests=outcome.total_requests,
            successful_imports=outcome.successful_imports,
            failed_imports=outcome.failed_imports,
            successful_deals=[DealResponse.from_domain(d) for d in outcome.successful_deals],
            failed_deals=[FailedDealImport.from_domain(f) for f in outcome.failed_deals],
        )


class ErrorResponse(BaseModel):
    """Uniform error body"""

    timestamp: datetime
    status: int
    error: str
    message: str
    path: str
