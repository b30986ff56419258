"""Domain models - pure Python dataclasses representing scoring entities"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class TransactionRecord:
    """Transaction fact parsed from a bank SMS notification"""

    timestamp: datetime
    raw_text: str
    amount: Optional[float] = None
    direction: str = "unknown"  # "credit", "debit" or "unknown"
    merchant: Optional[str] = None
    balance_after: Optional[float] = None
    sender: Optional[str] = None


@dataclass
class UPITransaction:
    """UPI payment log entry"""

    timestamp: datetime
    amount: float
    merchant: str
    category: Optional[str] = None


@dataclass
class RechargeEvent:
    """Mobile recharge history entry"""

    timestamp: datetime
    amount: float
    type: str  # "recharge" or "other"


@dataclass
class ApplicantProfile:
    """Self-declared profile fields; invalid income is stored as None"""

    monthly_income: Optional[float] = None
    occupation: str = "other"


@dataclass
class SourceCoverage:
    """How much usable data a source contributed"""

    source: str
    record_count: int
    dropped_count: int = 0
    start: Optional[datetime] = None
    end: Optional[datetime] = None


@dataclass
class NormalizedPayload:
    """Typed records for one scoring request"""

    sms_records: List[TransactionRecord]
    upi_records: List[UPITransaction]
    recharge_records: List[RechargeEvent]
    profile: ApplicantProfile
    coverage: List[SourceCoverage]


@dataclass
class SalaryCredit:
    amount: float
    date: datetime
    source: Optional[str]


@dataclass
class RecurringPayment:
    merchant: str
    amount: float
    frequency: str  # weekly | biweekly | monthly | quarterly
    last_payment: datetime


@dataclass
class MerchantCategory:
    category: str
    transaction_count: int
    total_amount: float


@dataclass
class SmsSummary:
    """Features extracted from SMS transaction records"""

    total_transactions: int = 0
    credit_transactions: int = 0
    debit_transactions: int = 0
    total_credit_amount: float = 0.0
    total_debit_amount: float = 0.0
    average_balance: float = 0.0
    balance_stability: float = 30.0
    regularity_score: float = 30.0
    merchant_diversity: float = 20.0
    balance_readings: int = 0
    salary_credits: List[SalaryCredit] = field(default_factory=list)
    recurring_payments: List[RecurringPayment] = field(default_factory=list)


@dataclass
class UpiSummary:
    """Features extracted from UPI payment logs"""

    transaction_count: int = 0
    monthly_transaction_count: int = 0
    average_transaction_amount: float = 0.0
    total_volume: float = 0.0
    payment_regularity: float = 30.0
    digital_footprint_score: float = 20.0
    merchant_categories: List[MerchantCategory] = field(default_factory=list)
    peak_transaction_hours: List[int] = field(default_factory=list)
    peak_hour_share: float = 0.0
    weekday_weekend_ratio: float = 0.0


@dataclass
class MobileSummary:
    """Features extracted from recharge history"""

    recharge_frequency: int = 0
    average_recharge_amount: float = 0.0
    plan_type: str = "unknown"  # prepaid | postpaid | unknown
    data_usage_pattern: str = "low"  # low | medium | high
    consistency_score: float = 30.0


@dataclass
class ComponentScore:
    """One of the five weighted sub-scores"""

    name: str
    score: int
    weight: float
    contributing_factors: List[str]
    data_backed: bool = True


@dataclass
class RedFlag:
    kind: str
    severity: str  # low | medium | high
    description: str
    score_impact: int


@dataclass
class PositiveIndicator:
    kind: str
    strength: str  # low | medium | high
    description: str
    score_impact: int


@dataclass
class LoanRecommendation:
    eligible: bool
    max_amount: int
    recommended_amount: int
    suggested_interest_rate: float
    max_tenure_months: int
    conditions: List[str] = field(default_factory=list)


@dataclass
class CreditAnalysisResult:
    """Output of one scoring run"""

    final_score: int
    risk_tier: str
    confidence: float
    components: List[ComponentScore]
    red_flags: List[RedFlag]
    positive_indicators: List[PositiveIndicator]
    recommendation: LoanRecommendation
    analysis_timestamp: datetime
    source_coverage: List[SourceCoverage]
    sms_summary: SmsSummary
    upi_summary: UpiSummary
    mobile_summary: MobileSummary
    model_version: str = "1.0"

    def to_dict(self) -> Dict[str, Any]:
        """Flat, JSON-ready representation for responses and persistence"""
        return _jsonable(asdict(self))

    def summary(self) -> Dict[str, Any]:
        return {
            "final_score": self.final_score,
            "risk_tier": self.risk_tier,
            "confidence": self.confidence,
            "eligible": self.recommendation.eligible,
            "max_amount": self.recommendation.max_amount,
            "red_flags_count": len(self.red_flags),
            "positive_indicators_count": len(self.positive_indicators),
            "analysis_timestamp": self.analysis_timestamp.isoformat(),
        }


def _jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    return value
