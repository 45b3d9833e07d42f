"""Integration tests for the deal repository and batch import on a real database"""

import pytest
from decimal import Decimal
from sqlalchemy import func, select
from fx_gateway.domain.exceptions import DealStoreError
from fx_gateway.domain.models import StoreFailure
from fx_gateway.domain.deal_import import DealImportService
from fx_gateway.infrastructure.database.models import FxDeal


class AlwaysUnique:
    """Duplicate checker that never finds anything"""

    def exists_by_unique_id(self, deal_unique_id: str) -> bool:
        return False


def count_rows(db) -> int:
    return db.execute(select(func.count()).select_from(FxDeal)).scalar_one()


def test_insert_assigns_id_and_created_at(repository, make_submission):
    stored = repository.insert(make_submission())

    assert stored.id is not None
    assert stored.created_at is not None
    assert stored.deal_unique_id == "DEAL-001"
    assert stored.deal_amount == Decimal("1000.00")


def test_exists_by_unique_id(repository, make_submission):
    assert repository.exists_by_unique_id("DEAL-001") is False
    repository.insert(make_submission())
    assert repository.exists_by_unique_id("DEAL-001") is True


def test_unique_constraint_enforced_on_insert(db, repository, make_submission):
    """Test the database rejects a second deal with the same unique ID"""
    repository.insert(make_submission())

    with pytest.raises(DealStoreError, match="uniqueness constraint"):
        repository.insert(make_submission(deal_amount=Decimal("1")))

    # Session stays usable and the first deal survives
    assert count_rows(db) == 1
    assert repository.find_by_unique_id("DEAL-001").deal_amount == Decimal("1000.00")


def test_find_methods(repository, make_submission):
    first = repository.insert(make_submission(deal_unique_id="F1"))
    repository.insert(make_submission(deal_unique_id="F2"))

    assert [d.deal_unique_id for d in repository.find_all()] == ["F1", "F2"]
    assert repository.find_by_id(first.id).deal_unique_id == "F1"
    assert repository.find_by_id(9999) is None
    assert repository.find_by_unique_id("F2").deal_unique_id == "F2"
    assert repository.find_by_unique_id("missing") is None


def test_batch_no_rollback_on_database(db, service, repository, make_submission):
    """Test valid deals persist even when an invalid one sits between them"""
    submissions = [
        make_submission(deal_unique_id="A"),
        make_submission(deal_unique_id="B", deal_amount=Decimal("-10")),
        make_submission(deal_unique_id="C"),
    ]

    outcome = service.import_batch(submissions)

    assert outcome.successful_imports == 2
    assert repository.exists_by_unique_id("A")
    assert not repository.exists_by_unique_id("B")
    assert repository.exists_by_unique_id("C")


def test_batch_race_caught_at_insert(db, repository, make_submission):
    """Test a constraint violation at insert time fails only that item"""
    service = DealImportService(repository, duplicate_checker=AlwaysUnique())
    submissions = [
        make_submission(deal_unique_id="R1"),
        make_submission(deal_unique_id="R1", from_currency_code="CHF"),
        make_submission(deal_unique_id="R2"),
    ]

    outcome = service.import_batch(submissions)

    assert [d.deal_unique_id for d in outcome.successful_deals] == ["R1", "R2"]
    assert outcome.failed_deals[0].deal_unique_id == "R1"
    assert outcome.failed_deals[0].reason.startswith("Error: ")
    assert count_rows(db) == 2
    assert repository.find_by_unique_id("R1").from_currency_code == "USD"


def test_lowercase_codes_stored_uppercase(service, repository, make_submission):
    service.import_batch([make_submission(from_currency_code="usd", to_currency_code="jpy")])

    stored = repository.find_by_unique_id("DEAL-001")
    assert stored.from_currency_code == "USD"
    assert stored.to_currency_code == "JPY"


def test_create_deal_race_returns_store_failure(repository, make_submission):
    repository.insert(make_submission())
    service = DealImportService(repository, duplicate_checker=AlwaysUnique())

    result = service.create_deal(make_submission())

    assert isinstance(result, StoreFailure)


def test_not_null_violation_not_reported_as_duplicate(db, repository, make_submission):
    """Test a missing required column gets a neutral constraint message"""
    with pytest.raises(DealStoreError, match="violates a database constraint"):
        repository.insert(make_submission(deal_timestamp=None))

    assert count_rows(db) == 0


def test_create_deal_missing_column_returns_store_failure(service, make_submission):
    result = service.create_deal(make_submission(deal_timestamp=None))

    assert isinstance(result, StoreFailure)
    assert "uniqueness" not in result.message
