"""POST /v1/credit/score - alternative credit scoring endpoint"""

import time
import logging
from datetime import datetime, timedelta, timezone
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from altcredit_gateway.api.v1.schemas import ScoreRequest, AnalysisResponse
from altcredit_gateway.api.dependencies import get_analysis_repository, get_request_id
from altcredit_gateway.config import settings
from altcredit_gateway.infrastructure.database.session import get_db
from altcredit_gateway.infrastructure.database.repositories import AnalysisRepository
from altcredit_gateway.domain.engine import analyze_credit
from altcredit_gateway.domain.exceptions import InvalidPayloadError, RescoreCooldownError
from altcredit_gateway.infrastructure.observability.metrics import record_analysis, rescore_rejected_counter
from altcredit_gateway.infrastructure.observability.logging import log_analysis
from altcredit_gateway.utils.date_utils import as_utc

router = APIRouter()


def ensure_cooldown_elapsed(repo: AnalysisRepository, user_id: str, now: datetime) -> None:
    """
    Reject re-scoring within the configured cooldown.

    Raises:
        RescoreCooldownError: last analysis is more recent than the cooldown
    """
    latest = repo.get_latest(user_id)
    if latest is None:
        return

    next_allowed_at = as_utc(latest.analyzed_at) + timedelta(hours=settings.rescore_cooldown_hours)
    if now < next_allowed_at:
        raise RescoreCooldownError(user_id, next_allowed_at)


@router.post("/credit/score", response_model=AnalysisResponse)
def create_credit_score(
    request_body: ScoreRequest,
    request: Request,
    db: Session = Depends(get_db),
    repo: AnalysisRepository = Depends(get_analysis_repository),
):
    """
    Score an applicant from SMS, UPI and recharge records.

    Flow:
    1. Enforce the re-score cooldown for the user
    2. Run the scoring engine on the raw payload
    3. Persist the analysis
    4. Return the full analysis
    """
    start_time = time.time()
    request_id = get_request_id(request)
    now = datetime.now(timezone.utc)

    try:
        # 1. Cooldown
        ensure_cooldown_elapsed(repo, request_body.user_id, now)

        # 2. Score
        result = analyze_credit(
            request_body.model_dump(exclude={"user_id"}),
            analysis_time=now,
            model_version=settings.model_version,
        )

        # 3. Persist analysis
        db_analysis = repo.create_analysis(request_body.user_id, result)
        db.commit()

        # Record metrics and logs
        duration_ms = (time.time() - start_time) * 1000
        record_analysis(result)
        log_analysis(request_id, request_body.user_id, result.summary(), duration_ms)

        return AnalysisResponse(
            analysis_id=str(db_analysis.id),
            user_id=request_body.user_id,
            **result.to_dict(),
        )

    except RescoreCooldownError as e:
        rescore_rejected_counter.inc()
        db.rollback()
        logging.warning(f"Re-score rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(
            status_code=429,
            detail={
                "message": "Credit score can only be refreshed once per cooldown period",
                "next_refresh_time": e.next_allowed_at.isoformat(),
            },
        )

    except InvalidPayloadError as e:
        db.rollback()
        logging.warning(f"Invalid payload: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
