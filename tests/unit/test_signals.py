"""Unit tests for red flag and positive indicator rules"""

from datetime import datetime
from altcredit_gateway.domain.models import MobileSummary, RecurringPayment, SalaryCredit, SmsSummary, UpiSummary
from altcredit_gateway.domain.signals import (
    POSITIVE_RULES,
    RED_FLAG_RULES,
    identify_positive_indicators,
    identify_red_flags,
)


def test_default_summaries_raise_no_signals():
    """Test the conservative defaults sit at or above every red flag trigger"""
    red_flags = identify_red_flags(SmsSummary(), UpiSummary(), MobileSummary())

    assert red_flags == []
    assert identify_positive_indicators(SmsSummary(), UpiSummary(), MobileSummary()) == []


def test_low_balance_stability_flag():
    red_flags = identify_red_flags(SmsSummary(balance_stability=20), UpiSummary(), MobileSummary())

    assert [f.kind for f in red_flags] == ["low_balance_stability"]
    assert red_flags[0].severity == "high"
    assert red_flags[0].score_impact == -20


def test_low_digital_usage_flag():
    red_flags = identify_red_flags(SmsSummary(), UpiSummary(digital_footprint_score=10), MobileSummary())

    assert [f.kind for f in red_flags] == ["low_digital_usage"]
    assert red_flags[0].severity == "medium"


def test_spending_outpaces_income_needs_enough_transactions():
    heavy_spender = SmsSummary(total_transactions=10, total_credit_amount=10000, total_debit_amount=12500)
    few_records = SmsSummary(total_transactions=9, total_credit_amount=10000, total_debit_amount=50000)
    balanced = SmsSummary(total_transactions=20, total_credit_amount=10000, total_debit_amount=12000)

    assert [f.kind for f in identify_red_flags(heavy_spender, UpiSummary(), MobileSummary())] == [
        "spending_outpaces_income"
    ]
    assert identify_red_flags(few_records, UpiSummary(), MobileSummary()) == []
    assert identify_red_flags(balanced, UpiSummary(), MobileSummary()) == []


def test_irregular_recharges_requires_recharges():
    irregular = MobileSummary(recharge_frequency=4, consistency_score=10)
    no_recharges = MobileSummary(recharge_frequency=0, consistency_score=10)

    assert [f.kind for f in identify_red_flags(SmsSummary(), UpiSummary(), irregular)] == ["irregular_recharges"]
    assert identify_red_flags(SmsSummary(), UpiSummary(), no_recharges) == []


def test_red_flags_follow_rule_order():
    red_flags = identify_red_flags(
        SmsSummary(balance_stability=5, total_transactions=12, total_credit_amount=0, total_debit_amount=100),
        UpiSummary(digital_footprint_score=0),
        MobileSummary(recharge_frequency=2, consistency_score=0),
    )

    assert [f.kind for f in red_flags] == [rule.kind for rule in RED_FLAG_RULES]


def test_positive_indicators():
    """Test every positive rule fires for a strong profile"""
    sms = SmsSummary(
        salary_credits=[SalaryCredit(amount=30000, date=datetime(2024, 1, 1), source="ACME CORP")],
        recurring_payments=[
            RecurringPayment(merchant="LANDLORD", amount=8000, frequency="monthly", last_payment=datetime(2024, 3, 5))
        ],
    )
    upi = UpiSummary(digital_footprint_score=90)
    mobile = MobileSummary(recharge_frequency=3, plan_type="postpaid")

    indicators = identify_positive_indicators(sms, upi, mobile)

    assert [i.kind for i in indicators] == [rule.kind for rule in POSITIVE_RULES]
    assert indicators[0].kind == "regular_salary"
    assert indicators[0].strength == "high"
    assert indicators[0].score_impact == 25


def test_high_digital_engagement_threshold_is_strict():
    assert identify_positive_indicators(SmsSummary(), UpiSummary(digital_footprint_score=70), MobileSummary()) == []
