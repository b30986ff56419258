"""Credit scoring engine - component scores, aggregation and loan policy"""

import math
from statistics import mean
from typing import Dict, List, Optional

from altcredit_gateway.domain.features import clamp
from altcredit_gateway.domain.models import (
    ApplicantProfile,
    ComponentScore,
    LoanRecommendation,
    MobileSummary,
    RedFlag,
    SmsSummary,
    UpiSummary,
)

# Fixed component weights; must sum to 1.0
COMPONENT_WEIGHTS: Dict[str, float] = {
    "transaction_behavior": 0.25,
    "payment_regularity": 0.20,
    "digital_engagement": 0.20,
    "financial_stability": 0.25,
    "social_signals": 0.10,
}

MIN_SCORE = 300
MAX_SCORE = 900
SCORE_SCALE = 6  # 0-100 weighted mean -> 300-900

LOW_RISK_MIN_SCORE = 750
MEDIUM_RISK_MIN_SCORE = 600

# Average balance treated as fully stable (INR)
BALANCE_BASELINE = 25_000

# Income regularity when income is declared but no salary credit was seen
OCCUPATION_BASELINES: Dict[str, float] = {
    "government": 60,
    "salaried": 55,
    "business": 50,
    "self_employed": 45,
    "farmer": 40,
    "daily_wage": 35,
    "student": 30,
}
DEFAULT_OCCUPATION_BASELINE = 40
SALARY_WITHOUT_INCOME_SCORE = 70
NO_INCOME_SIGNAL_SCORE = 20
DEFAULT_FINANCIAL_STABILITY = 30

MIN_UPI_FOR_TIMING = 5
DEFAULT_TIMING_SCORE = 40
PLAN_TYPE_SCORES: Dict[str, float] = {"postpaid": 70, "prepaid": 50, "unknown": 40}

CONDITION_SCORE_TOO_LOW = "score too low"
CONDITION_BUILD_HISTORY = "build credit history"
CONDITION_VERIFICATION = "additional verification required"
CONDITION_MONITORING = "regular monitoring"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _component(name: str, value: float, factors: List[str], data_backed: bool) -> ComponentScore:
    return ComponentScore(
        name=name,
        score=int(clamp(round_half_up(value))),
        weight=COMPONENT_WEIGHTS[name],
        contributing_factors=factors,
        data_backed=data_backed,
    )


def income_regularity_score(sms: SmsSummary, profile: ApplicantProfile) -> float:
    """Salary-credit presence and size relative to declared monthly income"""
    income = profile.monthly_income
    if sms.salary_credits:
        if income:
            coverage = min(1.0, mean(s.amount for s in sms.salary_credits) / income)
            return 50 + 50 * coverage
        return SALARY_WITHOUT_INCOME_SCORE
    if income:
        return OCCUPATION_BASELINES.get(profile.occupation, DEFAULT_OCCUPATION_BASELINE)
    return NO_INCOME_SIGNAL_SCORE


def financial_stability_score(sms: SmsSummary, profile: ApplicantProfile) -> float:
    """
    Mean of balance level and income regularity.

    Balance level is only used when balances were read from SMS; income
    regularity only when there is SMS data or a valid declared income.
    """
    parts = []
    if sms.balance_readings:
        parts.append(clamp(sms.average_balance / BALANCE_BASELINE * 100))
    if sms.total_transactions or profile.monthly_income:
        parts.append(income_regularity_score(sms, profile))
    return mean(parts) if parts else DEFAULT_FINANCIAL_STABILITY


def social_signals_score(upi: UpiSummary, mobile: MobileSummary) -> float:
    """UPI timing concentration and mobile plan/recharge pattern"""
    if upi.transaction_count >= MIN_UPI_FOR_TIMING:
        timing = clamp(upi.peak_hour_share * 100)
    else:
        timing = DEFAULT_TIMING_SCORE

    usage = mean([PLAN_TYPE_SCORES.get(mobile.plan_type, 40), mobile.consistency_score])
    return mean([timing, usage])


def score_components(
    sms: SmsSummary,
    upi: UpiSummary,
    mobile: MobileSummary,
    profile: ApplicantProfile,
) -> List[ComponentScore]:
    """Five weighted components, always in the same order"""
    has_sms = sms.total_transactions > 0
    has_upi = upi.transaction_count > 0
    has_mobile = mobile.recharge_frequency > 0

    return [
        _component(
            "transaction_behavior",
            mean([sms.regularity_score, upi.payment_regularity]),
            ["SMS regularity", "UPI payment patterns"],
            has_sms or has_upi,
        ),
        _component(
            "payment_regularity",
            mean([sms.balance_stability, mobile.consistency_score]),
            ["Balance stability", "Recharge consistency"],
            has_sms or has_mobile,
        ),
        _component(
            "digital_engagement",
            mean([upi.digital_footprint_score, sms.merchant_diversity]),
            ["UPI usage", "Merchant diversity"],
            has_upi or has_sms,
        ),
        _component(
            "financial_stability",
            financial_stability_score(sms, profile),
            ["Average balance", "Income regularity"],
            has_sms,
        ),
        _component(
            "social_signals",
            social_signals_score(upi, mobile),
            ["Transaction timing", "Usage patterns"],
            has_upi or has_mobile,
        ),
    ]


def aggregate_score(components: List[ComponentScore]) -> int:
    """
    Weighted mean of data-backed components scaled to 300-900.

    Falls back to the scale minimum when no weight participates.
    """
    weighted = 0.0
    total_weight = 0.0
    for component in components:
        if component.data_backed and component.weight > 0:
            weighted += component.score * component.weight
            total_weight += component.weight

    if total_weight <= 0:
        return MIN_SCORE

    score = round_half_up(MIN_SCORE + SCORE_SCALE * (weighted / total_weight))
    return max(MIN_SCORE, min(MAX_SCORE, score))


def classify_risk(score: int) -> str:
    if score >= LOW_RISK_MIN_SCORE:
        return "low"
    elif score >= MEDIUM_RISK_MIN_SCORE:
        return "medium"
    return "high"


def estimate_confidence(sms: SmsSummary, upi: UpiSummary, mobile: MobileSummary) -> float:
    """Data sufficiency from 0.3 to 1.0; says nothing about the score itself"""
    confidence = 0.3
    if sms.total_transactions > 50:
        confidence += 0.2
    if upi.monthly_transaction_count > 10:
        confidence += 0.2
    if mobile.recharge_frequency > 5:
        confidence += 0.1
    return round(min(confidence, 1.0), 2)


def recommend_loan(score: int, risk_tier: str, red_flags: Optional[List[RedFlag]] = None) -> LoanRecommendation:
    """
    Map score to loan policy.

    Score bands (lower edge inclusive):
    - < 600:   not eligible
    - 600-649: 25,000 max / 15,000 recommended, 18% over 12 months
    - 650-749: 50,000 max / 25,000 recommended, 15% over 18 months
    - 750+:    100,000 max / 50,000 recommended, 12% over 24 months
    """
    if score < MEDIUM_RISK_MIN_SCORE:
        return LoanRecommendation(
            eligible=False,
            max_amount=0,
            recommended_amount=0,
            suggested_interest_rate=24.0,
            max_tenure_months=6,
            conditions=[CONDITION_SCORE_TOO_LOW, CONDITION_BUILD_HISTORY],
        )

    if score >= LOW_RISK_MIN_SCORE:
        recommendation = LoanRecommendation(True, 100_000, 50_000, 12.0, 24)
    elif score >= 650:
        recommendation = LoanRecommendation(True, 50_000, 25_000, 15.0, 18)
    else:
        recommendation = LoanRecommendation(True, 25_000, 15_000, 18.0, 12)

    if red_flags:
        recommendation.conditions.append(CONDITION_VERIFICATION)
    if risk_tier == "medium":
        recommendation.conditions.append(CONDITION_MONITORING)

    return recommendation
