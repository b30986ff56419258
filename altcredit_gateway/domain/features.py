"""Per-source feature extraction - SMS, UPI and mobile recharge summaries"""

from collections import Counter
from statistics import mean, pstdev
from typing import Dict, Iterable, List

from altcredit_gateway.domain.models import (
    MerchantCategory,
    MobileSummary,
    RechargeEvent,
    SmsSummary,
    TransactionRecord,
    UPITransaction,
    UpiSummary,
)
from altcredit_gateway.domain.patterns import categorize_merchant, detect_recurring_payments, detect_salary_credits
from altcredit_gateway.utils.date_utils import days_between, month_key

# UPI logs are assumed to cover three months
UPI_OBSERVATION_MONTHS = 3

NEUTRAL_BALANCE_STABILITY = 50.0
REGULARITY_FLOOR = 30.0
REGULARITY_SCALE = 50.0

POSTPAID_MIN_AVERAGE = 500
PREPAID_MAX_AVERAGE = 100
LOW_USAGE_MAX_AVERAGE = 150
HIGH_USAGE_MIN_AVERAGE = 400


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def balance_stability(balances: List[float]) -> float:
    """100 * (1 - coefficient of variation), neutral 50 with fewer than two readings"""
    if len(balances) < 2:
        return NEUTRAL_BALANCE_STABILITY

    avg = mean(balances)
    if avg <= 0:
        return 0.0

    coefficient = pstdev(balances) / avg
    return clamp(100 * (1 - min(1.0, coefficient)))


def regularity_score(counts: Iterable[float]) -> float:
    """
    Map dispersion of per-period counts to 0-100.

    Lower relative spread scores higher: 100 - (stdev / mean) * 50. Fewer than
    two periods gives the 30-point floor.
    """
    values = list(counts)
    if len(values) < 2:
        return REGULARITY_FLOOR

    avg = mean(values)
    if avg <= 0:
        return REGULARITY_FLOOR

    return clamp(100 - (pstdev(values) / avg) * REGULARITY_SCALE)


def _monthly_counts(timestamps) -> Dict[str, int]:
    return Counter(month_key(ts) for ts in timestamps)


def extract_sms_features(records: List[TransactionRecord]) -> SmsSummary:
    """
    Summarize SMS-derived transactions.

    Returns the default low-confidence summary when there are no records.
    """
    if not records:
        return SmsSummary()

    balances = [r.balance_after for r in records if r.balance_after is not None]
    merchants = {r.merchant.lower() for r in records if r.merchant}

    return SmsSummary(
        total_transactions=len(records),
        credit_transactions=sum(1 for r in records if r.direction == "credit"),
        debit_transactions=sum(1 for r in records if r.direction == "debit"),
        total_credit_amount=sum(r.amount for r in records if r.direction == "credit" and r.amount is not None),
        total_debit_amount=sum(r.amount for r in records if r.direction == "debit" and r.amount is not None),
        average_balance=mean(balances) if balances else 0.0,
        balance_stability=balance_stability(balances),
        regularity_score=regularity_score(_monthly_counts(r.timestamp for r in records).values()),
        merchant_diversity=clamp(len(merchants) * 10),
        balance_readings=len(balances),
        salary_credits=detect_salary_credits(records),
        recurring_payments=detect_recurring_payments(records),
    )


def _merchant_categories(records: List[UPITransaction]) -> List[MerchantCategory]:
    counts: Counter = Counter()
    totals: Dict[str, float] = {}
    for record in records:
        category = record.category or categorize_merchant(record.merchant)
        counts[category] += 1
        totals[category] = totals.get(category, 0.0) + record.amount

    # Most used first; ties broken by name so output is stable
    ordered = sorted(counts, key=lambda c: (-counts[c], c))
    return [MerchantCategory(category=c, transaction_count=counts[c], total_amount=round(totals[c], 2)) for c in ordered]


def extract_upi_features(records: List[UPITransaction]) -> UpiSummary:
    if not records:
        return UpiSummary()

    count = len(records)
    total = sum(r.amount for r in records)

    hour_counts = Counter(r.timestamp.hour for r in records)
    peak_hours = sorted(hour_counts, key=lambda h: (-hour_counts[h], h))[:3]
    peak_share = sum(hour_counts[h] for h in peak_hours) / count

    weekend = sum(1 for r in records if r.timestamp.weekday() >= 5)
    weekday = count - weekend

    return UpiSummary(
        transaction_count=count,
        monthly_transaction_count=int(count / UPI_OBSERVATION_MONTHS + 0.5),
        average_transaction_amount=total / count,
        total_volume=total,
        payment_regularity=regularity_score(_monthly_counts(r.timestamp for r in records).values()),
        digital_footprint_score=clamp(count * 2),
        merchant_categories=_merchant_categories(records),
        peak_transaction_hours=peak_hours,
        peak_hour_share=peak_share,
        weekday_weekend_ratio=weekend / weekday if weekday else 0.0,
    )


def _plan_type(average_amount: float) -> str:
    if average_amount > POSTPAID_MIN_AVERAGE:
        return "postpaid"
    if average_amount < PREPAID_MAX_AVERAGE:
        return "prepaid"
    return "unknown"


def _data_usage_pattern(average_amount: float) -> str:
    if average_amount < LOW_USAGE_MAX_AVERAGE:
        return "low"
    if average_amount >= HIGH_USAGE_MIN_AVERAGE:
        return "high"
    return "medium"


def extract_mobile_features(records: List[RechargeEvent]) -> MobileSummary:
    """Only 'recharge' events count; without any the default summary is returned"""
    recharges = sorted((r for r in records if r.type == "recharge"), key=lambda r: r.timestamp)
    if not recharges:
        return MobileSummary()

    average = mean(r.amount for r in recharges)
    intervals = [days_between(a.timestamp, b.timestamp) for a, b in zip(recharges, recharges[1:])]

    return MobileSummary(
        recharge_frequency=len(recharges),
        average_recharge_amount=average,
        plan_type=_plan_type(average),
        data_usage_pattern=_data_usage_pattern(average),
        consistency_score=regularity_score(intervals),
    )
