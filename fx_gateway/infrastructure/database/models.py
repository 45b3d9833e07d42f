"""SQLAlchemy ORM models for persisted FX deals"""

from datetime import datetime, timezone
from sqlalchemy import Column, BigInteger, DateTime, Index, Integer, Numeric, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FxDeal(Base):
    """Imported FX deal; deal_unique_id is unique across the table"""

    __tablename__ = "fx_deals"
    __table_args__ = (
        Index("idx_deal_unique_id", "deal_unique_id", unique=True),
    )

    # BigInteger on PostgreSQL, plain INTEGER on SQLite so autoincrement works
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    deal_unique_id = Column(String(100), nullable=False)
    from_currency_code = Column(String(3), nullable=False)
    to_currency_code = Column(String(3), nullable=False)
    deal_timestamp = Column(DateTime(timezone=True), nullable=False)
    deal_amount = Column(Numeric(19, 4, asdecimal=True), nullable=False)
    # Assigned once at insert time, never updated
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
