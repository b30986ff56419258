"""Alternative credit scoring pipeline - public entry point"""

from datetime import datetime, timezone
from typing import Any, List, Optional

from altcredit_gateway.domain.features import extract_mobile_features, extract_sms_features, extract_upi_features
from altcredit_gateway.domain.models import (
    ComponentScore,
    CreditAnalysisResult,
    MobileSummary,
    SmsSummary,
    SourceCoverage,
    UpiSummary,
)
from altcredit_gateway.domain.normalizer import normalize_payload
from altcredit_gateway.domain.scoring import (
    aggregate_score,
    classify_risk,
    estimate_confidence,
    recommend_loan,
    score_components,
)
from altcredit_gateway.domain.signals import identify_positive_indicators, identify_red_flags

MODEL_VERSION = "1.0"


def assemble_result(
    components: List[ComponentScore],
    sms: SmsSummary,
    upi: UpiSummary,
    mobile: MobileSummary,
    coverage: List[SourceCoverage],
    analysis_time: datetime,
    model_version: str = MODEL_VERSION,
) -> CreditAnalysisResult:
    """Aggregate components and derive tier, signals, confidence and recommendation"""
    final_score = aggregate_score(components)
    risk_tier = classify_risk(final_score)
    red_flags = identify_red_flags(sms, upi, mobile)

    return CreditAnalysisResult(
        final_score=final_score,
        risk_tier=risk_tier,
        confidence=estimate_confidence(sms, upi, mobile),
        components=components,
        red_flags=red_flags,
        positive_indicators=identify_positive_indicators(sms, upi, mobile),
        recommendation=recommend_loan(final_score, risk_tier, red_flags),
        analysis_timestamp=analysis_time,
        source_coverage=coverage,
        sms_summary=sms,
        upi_summary=upi,
        mobile_summary=mobile,
        model_version=model_version,
    )


def analyze_credit(
    payload: Any,
    analysis_time: Optional[datetime] = None,
    model_version: str = MODEL_VERSION,
) -> CreditAnalysisResult:
    """
    Score one applicant from raw SMS, UPI and recharge records.

    Payload shape:
        {"sms_records": [...], "upi_records": [...], "recharge_records": [...],
         "profile": {"monthly_income": ..., "occupation": ...}}

    Any record list may be missing or empty. Unparseable records are dropped;
    the run is stateless and deterministic for a fixed analysis_time.

    Raises:
        InvalidPayloadError: a field has the wrong container type
    """
    normalized = normalize_payload(payload)

    sms = extract_sms_features(normalized.sms_records)
    upi = extract_upi_features(normalized.upi_records)
    mobile = extract_mobile_features(normalized.recharge_records)

    components = score_components(sms, upi, mobile, normalized.profile)

    return assemble_result(
        components,
        sms,
        upi,
        mobile,
        normalized.coverage,
        analysis_time or datetime.now(timezone.utc),
        model_version,
    )
