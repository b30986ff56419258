"""GET /v1/credit/report and /v1/credit/history - stored analyses"""

import math
from fastapi import APIRouter, Depends, HTTPException, Query
from altcredit_gateway.api.v1.schemas import AnalysisResponse, HistoryResponse, HistoryItem, Pagination
from altcredit_gateway.api.dependencies import get_analysis_repository
from altcredit_gateway.config import settings
from altcredit_gateway.infrastructure.database.repositories import AnalysisRepository
from altcredit_gateway.domain.exceptions import AnalysisNotFoundError

router = APIRouter()


@router.get("/credit/report", response_model=AnalysisResponse)
def get_credit_report(
    user_id: str = Query(..., description="User identifier"),
    repo: AnalysisRepository = Depends(get_analysis_repository),
):
    """
    Retrieve the most recent credit analysis for a user.

    Returns:
        Full analysis, or 404 when the user has never been scored
    """
    try:
        analysis = repo.require_latest(user_id)
    except AnalysisNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return AnalysisResponse(analysis_id=str(analysis.id), user_id=analysis.user_id, **analysis.result)


@router.get("/credit/history", response_model=HistoryResponse)
def get_credit_history(
    user_id: str = Query(..., description="User identifier"),
    limit: int = Query(settings.history_page_size, ge=1, le=100),
    page: int = Query(1, ge=1),
    repo: AnalysisRepository = Depends(get_analysis_repository),
):
    """
    Retrieve a page of past analyses for a user, newest first.

    Returns:
        Score, tier and confidence per analysis with pagination details
    """
    analyses = repo.get_history(user_id, limit=limit, page=page)
    total = repo.count_by_user(user_id)

    history_items = [
        HistoryItem(
            analysis_id=str(a.id),
            final_score=a.final_score,
            risk_tier=a.risk_tier,
            confidence=a.confidence,
            eligible=a.eligible,
            analyzed_at=a.analyzed_at.isoformat(),
            source_coverage=a.source_coverage,
        )
        for a in analyses
    ]

    return HistoryResponse(
        user_id=user_id,
        analyses=history_items,
        pagination=Pagination(total=total, page=page, limit=limit, pages=math.ceil(total / limit)),
    )
