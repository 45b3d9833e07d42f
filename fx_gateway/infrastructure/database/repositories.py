"""Data access layer for FX deals"""

from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from fx_gateway.infrastructure.database.models import FxDeal
from fx_gateway.domain.exceptions import DealStoreError
from fx_gateway.domain.models import DealSubmission, StoredDeal


def _is_unique_violation(error: IntegrityError) -> bool:
    # SQLite: "UNIQUE constraint failed", PostgreSQL: "violates unique constraint"
    return "unique" in str(error.orig).lower()


def _to_stored_deal(row: FxDeal) -> StoredDeal:
    return StoredDeal(
        id=row.id,
        deal_unique_id=row.deal_unique_id,
        from_currency_code=row.from_currency_code,
        to_currency_code=row.to_currency_code,
        deal_timestamp=row.deal_timestamp,
        deal_amount=row.deal_amount,
        created_at=row.created_at,
    )


class DealRepository:
    """Repository for FX deals; also serves as the duplicate checker"""

    def __init__(self, db: Session):
        self.db = db

    def exists_by_unique_id(self, deal_unique_id: str) -> bool:
        """Check whether a deal with this unique ID has already been imported"""
        try:
            found = self.db.execute(
                select(FxDeal.id).where(FxDeal.deal_unique_id == deal_unique_id).limit(1)
            ).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DealStoreError(f"Duplicate check failed for deal '{deal_unique_id}': {e}") from e
        return found is not None

    def insert(self, submission: DealSubmission) -> StoredDeal:
        """
        Persist a single deal in its own transaction.

        Each insert commits on success, so a later failure in the same session
        never rolls back deals inserted before it.

        Raises:
            DealStoreError: On a unique-constraint violation or any other database error
        """
        db_deal = FxDeal(
            deal_unique_id=submission.deal_unique_id,
            from_currency_code=submission.from_currency_code,
            to_currency_code=submission.to_currency_code,
            deal_timestamp=submission.deal_timestamp,
            deal_amount=submission.deal_amount,
        )
        try:
            self.db.add(db_deal)
            self.db.flush()  # Assigns id and created_at
            stored = _to_stored_deal(db_deal)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            kind = "uniqueness" if _is_unique_violation(e) else "database"
            raise DealStoreError(
                f"Deal with ID '{submission.deal_unique_id}' violates a {kind} constraint"
            ) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DealStoreError(f"Could not persist deal '{submission.deal_unique_id}': {e}") from e
        return stored

    def find_all(self) -> List[StoredDeal]:
        """Fetch every stored deal in insertion order"""
        try:
            rows = self.db.execute(select(FxDeal).order_by(FxDeal.id)).scalars().all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DealStoreError(f"Could not list deals: {e}") from e
        return [_to_stored_deal(row) for row in rows]

    def find_by_id(self, deal_id: int) -> Optional[StoredDeal]:
        """Fetch a deal by its database ID"""
        try:
            row = self.db.get(FxDeal, deal_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DealStoreError(f"Could not load deal {deal_id}: {e}") from e
        return _to_stored_deal(row) if row else None

    def find_by_unique_id(self, deal_unique_id: str) -> Optional[StoredDeal]:
        """Fetch a deal by its unique business identifier"""
        try:
            row = self.db.execute(
                select(FxDeal).where(FxDeal.deal_unique_id == deal_unique_id)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DealStoreError(f"Could not load deal '{deal_unique_id}': {e}") from e
        return _to_stored_deal(row) if row else None
