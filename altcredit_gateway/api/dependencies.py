"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from altcredit_gateway.infrastructure.database.repositories import AnalysisRepository
from altcredit_gateway.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_analysis_repository(db: Session = Depends(get_db)) -> AnalysisRepository:
    """Provide an analysis repository bound to the request's session"""
    return AnalysisRepository(db)
