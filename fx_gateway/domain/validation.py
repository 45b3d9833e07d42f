"""Field-level validation rules for FX deal submissions"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional, Sequence

from fx_gateway.domain.currencies import is_valid_currency
from fx_gateway.domain.models import DealSubmission, ValidationResult

MAX_UNIQUE_ID_LENGTH = 100
MAX_INTEGER_DIGITS = 15
MAX_FRACTION_DIGITS = 4


def _is_blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are taken to be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def amount_within_digit_budget(amount: Decimal) -> bool:
    """
    Check the amount fits NUMERIC(19, 4): at most 15 integer and 4 fraction digits.

    Trailing zeros are not counted, so 1000.000000 is accepted.
    """
    _, digits, exponent = amount.normalize().as_tuple()
    fraction_digits = max(0, -exponent)
    integer_digits = max(0, len(digits) + exponent)
    return integer_digits <= MAX_INTEGER_DIGITS and fraction_digits <= MAX_FRACTION_DIGITS


def _currency_errors(code: Optional[str], side: str) -> List[str]:
    if _is_blank(code):
        return [f"{side.capitalize()} currency code is required"]
    if not is_valid_currency(code):
        return [f"Invalid {side} currency code"]
    return []


def validate_deal(submission: DealSubmission, now: datetime | None = None) -> ValidationResult:
    """
    Validate a single deal submission.

    Every rule is evaluated; when several fail, their messages are joined
    with ", " in field order. Currency inequality is not checked here.

    Args:
        submission: Deal as received from the client
        now: Reference time for the future-timestamp rule (default: current UTC time)
    """
    now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    errors: List[str] = []

    unique_id = submission.deal_unique_id
    if _is_blank(unique_id):
        errors.append("Deal unique ID is required")
    elif len(unique_id) > MAX_UNIQUE_ID_LENGTH:
        errors.append(f"Deal unique ID must not exceed {MAX_UNIQUE_ID_LENGTH} characters")

    errors.extend(_currency_errors(submission.from_currency_code, "from"))
    errors.extend(_currency_errors(submission.to_currency_code, "to"))

    if submission.deal_timestamp is None:
        errors.append("Deal timestamp is required")
    elif _as_utc(submission.deal_timestamp) > now:
        errors.append("Deal timestamp cannot be in the future")

    amount = submission.deal_amount
    if amount is None:
        errors.append("Deal amount is required")
    elif not amount.is_finite() or amount <= 0:
        errors.append("Deal amount must be greater than zero")
    elif not amount_within_digit_budget(amount):
        errors.append("Deal amount format is invalid")

    if errors:
        return ValidationResult.invalid(", ".join(errors))
    return ValidationResult.ok()


def validate_batch_structure(submissions: Optional[Sequence[DealSubmission]]) -> ValidationResult:
    """Reject a batch whose list of deals is missing or empty"""
    if submissions is None:
        return ValidationResult.invalid("Deals list cannot be null")
    if len(submissions) == 0:
        return ValidationResult.invalid("Deals list cannot be empty")
    return ValidationResult.ok()
