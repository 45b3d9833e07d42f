"""Domain models - pure Python dataclasses representing FX deals and import outcomes"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Union


@dataclass(frozen=True)
class DealSubmission:
    """FX deal as submitted by a client; any field may be missing"""

    deal_unique_id: Optional[str] = None
    from_currency_code: Optional[str] = None
    to_currency_code: Optional[str] = None
    deal_timestamp: Optional[datetime] = None
    deal_amount: Optional[Decimal] = None


@dataclass(frozen=True)
class StoredDeal:
    """Persisted FX deal; id and created_at are assigned by the store"""

    id: int
    deal_unique_id: str
    from_currency_code: str
    to_currency_code: str
    deal_timestamp: datetime
    deal_amount: Decimal
    created_at: datetime


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation pass"""

    error_message: Optional[str] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def invalid(cls, error_message: str) -> "ValidationResult":
        return cls(error_message=error_message)

    @property
    def is_valid(self) -> bool:
        return self.error_message is None

    @property
    def is_invalid(self) -> bool:
        return not self.is_valid


# Single-create results. Exactly one of these comes back from the create path.


@dataclass(frozen=True)
class DealCreated:
    deal: StoredDeal


@dataclass(frozen=True)
class ValidationFailure:
    """Field-level rule violation (format, range, required-ness)"""

    message: str


@dataclass(frozen=True)
class DuplicateFailure:
    """Unique identifier already present in the store"""

    message: str


@dataclass(frozen=True)
class BusinessRuleFailure:
    """Source and destination currency are the same"""

    message: str


@dataclass(frozen=True)
class StoreFailure:
    """Unexpected fault raised by the store"""

    message: str


CreateResult = Union[DealCreated, ValidationFailure, DuplicateFailure, BusinessRuleFailure, StoreFailure]


@dataclass(frozen=True)
class FailureRecord:
    """Rejected batch item, echoing the original submission for correction"""

    deal_unique_id: Optional[str]
    reason: str
    submission: DealSubmission


@dataclass
class BatchOutcome:
    """Aggregated result of one batch import call"""

    total_requests: int = 0
    successful_imports: int = 0
    failed_imports: int = 0
    successful_deals: List[StoredDeal] = field(default_factory=list)
    failed_deals: List[FailureRecord] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "BatchOutcome":
        """Zero-result outcome returned for a rejected batch"""
        return cls()
