"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from fx_gateway.domain.deal_import import DealImportService
from fx_gateway.infrastructure.database.repositories import DealRepository
from fx_gateway.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_deal_repository(db: Session = Depends(get_db)) -> DealRepository:
    """Provide deal repository bound to the request's session"""
    return DealRepository(db)


def get_import_service(repository: DealRepository = Depends(get_deal_repository)) -> DealImportService:
    """Provide deal import service backed by the repository"""
    return DealImportService(repository)
