"""Deal import service - single-deal creation and non-transactional batch import"""

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Protocol, Sequence, Type

from fx_gateway.domain.currencies import normalize_currency
from fx_gateway.domain.exceptions import CurrencyPairError, DuplicateDealError
from fx_gateway.domain.models import (
    BatchOutcome,
    BusinessRuleFailure,
    CreateResult,
    DealCreated,
    DealSubmission,
    DuplicateFailure,
    FailureRecord,
    StoredDeal,
    StoreFailure,
    ValidationFailure,
)
from fx_gateway.domain.validation import validate_batch_structure, validate_deal

logger = logging.getLogger(__name__)


class DuplicateChecker(Protocol):
    def exists_by_unique_id(self, deal_unique_id: str) -> bool: ...


class DealStore(DuplicateChecker, Protocol):
    def insert(self, submission: DealSubmission) -> StoredDeal: ...

    def find_all(self) -> List[StoredDeal]: ...

    def find_by_id(self, deal_id: int) -> Optional[StoredDeal]: ...

    def find_by_unique_id(self, deal_unique_id: str) -> Optional[StoredDeal]: ...


# Reason prefixes reported to clients for each failed batch item
FAILURE_PREFIXES: Dict[Type, str] = {
    ValidationFailure: "Validation failed",
    DuplicateFailure: "Duplicate",
    BusinessRuleFailure: "Validation error",
    StoreFailure: "Error",
}


class DealImportService:
    """Creates FX deals one at a time or as an independent-outcome batch"""

    def __init__(self, store: DealStore, duplicate_checker: DuplicateChecker | None = None):
        self.store = store
        self.duplicate_checker = duplicate_checker or store

    def _insert(self, submission: DealSubmission) -> StoredDeal:
        unique_id = submission.deal_unique_id
        if self.duplicate_checker.exists_by_unique_id(unique_id):
            raise DuplicateDealError(unique_id)

        from_code = normalize_currency(submission.from_currency_code)
        to_code = normalize_currency(submission.to_currency_code)
        if from_code == to_code:
            raise CurrencyPairError()

        return self.store.insert(
            replace(submission, from_currency_code=from_code, to_currency_code=to_code)
        )

    def create_deal(self, submission: DealSubmission) -> CreateResult:
        """
        Persist one already-validated deal.

        Checks run in order: duplicate id, then currency inequality, then the
        insert. Store faults, including a unique-constraint violation that
        slipped past the duplicate check, come back as StoreFailure.
        """
        unique_id = submission.deal_unique_id
        logger.info("Creating new deal", extra={"deal_unique_id": unique_id})
        try:
            stored = self._insert(submission)
        except DuplicateDealError as e:
            logger.warning("Duplicate deal detected", extra={"deal_unique_id": unique_id})
            return DuplicateFailure(str(e))
        except CurrencyPairError as e:
            logger.warning(
                "Same currency exchange attempted",
                extra={"deal_unique_id": unique_id, "currency": submission.from_currency_code},
            )
            return BusinessRuleFailure(str(e))
        except Exception as e:
            logger.exception("Unexpected error creating deal", extra={"deal_unique_id": unique_id})
            return StoreFailure(str(e))

        logger.info("Deal saved", extra={"deal_unique_id": unique_id, "deal_id": stored.id})
        return DealCreated(stored)

    def submit_deal(self, submission: DealSubmission) -> CreateResult:
        """Validate then create a single deal"""
        validation = validate_deal(submission)
        if validation.is_invalid:
            return ValidationFailure(validation.error_message)
        return self.create_deal(submission)

    def import_batch(self, submissions: Optional[Sequence[DealSubmission]]) -> BatchOutcome:
        """
        Import a batch of deals with no rollback.

        Deals are processed sequentially in submission order. Each one ends up
        either in successful_deals or in failed_deals; a failure never stops
        the loop or undoes an earlier insert. An item that cannot even be
        validated, such as one with mis-typed fields, is reported as "Error".

        Returns:
            BatchOutcome; all counts are zero when the list is missing or empty
        """
        structure = validate_batch_structure(submissions)
        if structure.is_invalid:
            logger.warning("Batch import rejected", extra={"reason": structure.error_message})
            return BatchOutcome.empty()

        logger.info("Starting batch import", extra={"total_requests": len(submissions)})

        successful_deals: List[StoredDeal] = []
        failed_deals: List[FailureRecord] = []

        for submission in submissions:
            try:
                result = self.submit_deal(submission)
            except Exception as e:
                logger.exception(
                    "Unexpected error processing deal",
                    extra={"deal_unique_id": submission.deal_unique_id},
                )
                result = StoreFailure(str(e))

            if isinstance(result, DealCreated):
                successful_deals.append(result.deal)
                continue

            unique_id = submission.deal_unique_id
            reason = f"{FAILURE_PREFIXES[type(result)]}: {result.message}"
            failed_deals.append(
                FailureRecord(deal_unique_id=unique_id, reason=reason, submission=submission)
            )
            logger.warning("Failed to import deal", extra={"deal_unique_id": unique_id, "reason": reason})

        return BatchOutcome(
            total_requests=len(submissions),
            successful_imports=len(successful_deals),
            failed_imports=len(failed_deals),
            successful_deals=successful_deals,
            failed_deals=failed_deals,
        )
