"""Data access layer for credit analyses"""

from typing import List, Optional
from sqlalchemy.orm import Session
from altcredit_gateway.infrastructure.database.models import CreditAnalysisRecord
from altcredit_gateway.domain.models import CreditAnalysisResult
from altcredit_gateway.domain.exceptions import AnalysisNotFoundError


class AnalysisRepository:
    """Repository for credit analysis records"""

    def __init__(self, db: Session):
        self.db = db

    def create_analysis(self, user_id: str, result: CreditAnalysisResult) -> CreditAnalysisRecord:
        """Persist a scoring result to database"""
        payload = result.to_dict()
        db_analysis = CreditAnalysisRecord(
            user_id=user_id,
            final_score=result.final_score,
            risk_tier=result.risk_tier,
            confidence=result.confidence,
            eligible=result.recommendation.eligible,
            max_amount=result.recommendation.max_amount,
            model_version=result.model_version,
            source_coverage=payload["source_coverage"],
            result=payload,
            analyzed_at=result.analysis_timestamp,
        )
        self.db.add(db_analysis)
        self.db.flush()  # Get ID without committing
        return db_analysis

    def get_latest(self, user_id: str) -> Optional[CreditAnalysisRecord]:
        """Most recent analysis for a user"""
        return (
            self.db.query(CreditAnalysisRecord)
            .filter(CreditAnalysisRecord.user_id == user_id)
            .order_by(CreditAnalysisRecord.analyzed_at.desc())
            .first()
        )

    def require_latest(self, user_id: str) -> CreditAnalysisRecord:
        """
        Most recent analysis for a user.

        Raises:
            AnalysisNotFoundError: user has never been scored
        """
        analysis = self.get_latest(user_id)
        if analysis is None:
            raise AnalysisNotFoundError(f"No credit analysis found for user {user_id}")
        return analysis

    def get_history(self, user_id: str, limit: int = 10, page: int = 1) -> List[CreditAnalysisRecord]:
        """Page of analyses for a user, newest first"""
        return (
            self.db.query(CreditAnalysisRecord)
            .filter(CreditAnalysisRecord.user_id == user_id)
            .order_by(CreditAnalysisRecord.analyzed_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

    def count_by_user(self, user_id: str) -> int:
        return (
            self.db.query(CreditAnalysisRecord)
            .filter(CreditAnalysisRecord.user_id == user_id)
            .count()
        )
