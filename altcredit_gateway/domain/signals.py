"""
Red flags and positive indicators.

Each rule is a row in a table: a trigger predicate over the three source
summaries plus the flag it produces. New rules are added by appending rows.
"""

from dataclasses import dataclass
from typing import Callable, List, Tuple

from altcredit_gateway.domain.models import MobileSummary, PositiveIndicator, RedFlag, SmsSummary, UpiSummary

Predicate = Callable[[SmsSummary, UpiSummary, MobileSummary], bool]


@dataclass(frozen=True)
class SignalRule:
    kind: str
    level: str  # severity for red flags, strength for indicators
    description: str
    score_impact: int
    applies: Predicate


RED_FLAG_RULES: Tuple[SignalRule, ...] = (
    SignalRule(
        "low_balance_stability",
        "high",
        "Highly volatile account balance",
        -20,
        lambda sms, upi, mobile: sms.balance_stability < 30,
    ),
    SignalRule(
        "low_digital_usage",
        "medium",
        "Limited digital payment activity",
        -10,
        lambda sms, upi, mobile: upi.digital_footprint_score < 20,
    ),
    SignalRule(
        "spending_outpaces_income",
        "medium",
        "Money debited exceeds money credited",
        -10,
        lambda sms, upi, mobile: sms.total_transactions >= 10
        and sms.total_debit_amount > 1.2 * sms.total_credit_amount,
    ),
    SignalRule(
        "irregular_recharges",
        "low",
        "Mobile recharges follow no regular pattern",
        -5,
        lambda sms, upi, mobile: mobile.recharge_frequency > 0 and mobile.consistency_score < 30,
    ),
)

POSITIVE_RULES: Tuple[SignalRule, ...] = (
    SignalRule(
        "regular_salary",
        "high",
        "Regular salary credits detected",
        25,
        lambda sms, upi, mobile: len(sms.salary_credits) > 0,
    ),
    SignalRule(
        "high_digital_engagement",
        "medium",
        "Strong digital payment adoption",
        15,
        lambda sms, upi, mobile: upi.digital_footprint_score > 70,
    ),
    SignalRule(
        "recurring_commitments",
        "medium",
        "Recurring payments made on a steady schedule",
        10,
        lambda sms, upi, mobile: len(sms.recurring_payments) > 0,
    ),
    SignalRule(
        "postpaid_connection",
        "low",
        "Mobile spend consistent with a postpaid plan",
        5,
        lambda sms, upi, mobile: mobile.plan_type == "postpaid",
    ),
)


def identify_red_flags(sms: SmsSummary, upi: UpiSummary, mobile: MobileSummary) -> List[RedFlag]:
    return [
        RedFlag(kind=rule.kind, severity=rule.level, description=rule.description, score_impact=rule.score_impact)
        for rule in RED_FLAG_RULES
        if rule.applies(sms, upi, mobile)
    ]


def identify_positive_indicators(sms: SmsSummary, upi: UpiSummary, mobile: MobileSummary) -> List[PositiveIndicator]:
    return [
        PositiveIndicator(
            kind=rule.kind, strength=rule.level, description=rule.description, score_impact=rule.score_impact
        )
        for rule in POSITIVE_RULES
        if rule.applies(sms, upi, mobile)
    ]
