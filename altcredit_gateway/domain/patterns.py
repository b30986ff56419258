"""
Heuristic rule tables for reading behavioral records.

Pure functions over text and typed records: currency/balance extraction from
bank SMS bodies, transaction direction and merchant cues, merchant
categorization, salary-credit and recurring-payment detection.
"""

import math
import re
from collections import defaultdict
from statistics import median
from typing import Dict, List, Optional

from altcredit_gateway.domain.models import RecurringPayment, SalaryCredit, TransactionRecord
from altcredit_gateway.utils.date_utils import days_between, month_key

_CURRENCY = r"(?:\brs\.?|\binr|₹)\s*([0-9][0-9,]*(?:\.[0-9]+)?)"

CURRENCY_RE = re.compile(_CURRENCY, re.IGNORECASE)
BALANCE_RE = re.compile(
    r"\b(?:avl\.?\s*bal(?:ance)?|available\s+balance|balance|bal)\b[^0-9₹]{0,20}?" + _CURRENCY,
    re.IGNORECASE,
)

CREDIT_CUES = ("credited", "received", "deposited")
DEBIT_CUES = ("debited", "paid", "spent", "withdrawn", "sent")

_MERCHANT_END = r"(?=\s+(?:on|via|ref|upi|avl|bal|for|from|by|to|dated|info|txn|using|thru)\b|\.(?:\s|$)|[,;:(]|$)"
_TO_RE = re.compile(r"\b(?:to|at|towards)\s+([A-Za-z0-9&'@._\- ]{2,40}?)" + _MERCHANT_END, re.IGNORECASE)
_FROM_RE = re.compile(r"\b(?:from|by)\s+([A-Za-z0-9&'@._\- ]{2,40}?)" + _MERCHANT_END, re.IGNORECASE)
_VPA_RE = re.compile(r"\b([a-z0-9._\-]+@[a-z]{2,})\b", re.IGNORECASE)

# Phrases that name the user's own account or a payment rail, not a counterparty
_ACCOUNT_PREFIXES = ("a/c", "ac ", "acct", "account", "your", "xx", "card", "self", "neft", "imps", "rtgs", "upi")

SALARY_KEYWORDS_RE = re.compile(r"\b(salary|sal|payroll|stipend|wages?)\b", re.IGNORECASE)
LABELED_SALARY_MIN = 5_000
PERIODIC_CREDIT_MIN = 10_000
SALARY_AMOUNT_TOLERANCE = 0.20

RECURRING_MIN_OCCURRENCES = 3
RECURRING_AMOUNT_TOLERANCE = 0.15
RECURRING_INTERVAL_TOLERANCE = 0.30
RECURRING_MIN_INTERVAL_SLACK_DAYS = 3.0

MERCHANT_CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    "food": ["swiggy", "zomato", "restaurant", "cafe", "hotel", "dhaba", "bakery", "canteen"],
    "groceries": ["bigbasket", "blinkit", "zepto", "dmart", "kirana", "grocery", "reliance fresh", "dairy"],
    "transport": ["uber", "ola", "rapido", "metro", "irctc", "redbus", "bus", "auto"],
    "fuel": ["petrol", "diesel", "fuel", "indian oil", "hpcl", "bpcl"],
    "utilities": ["electricity", "bescom", "water", "gas", "lpg", "broadband", "wifi", "bill"],
    "recharge": ["recharge", "jio", "airtel", "vodafone", "bsnl", "dth", "tata play"],
    "shopping": ["amazon", "flipkart", "myntra", "meesho", "ajio", "mall", "store"],
    "entertainment": ["netflix", "hotstar", "spotify", "prime video", "pvr", "inox", "movie"],
    "healthcare": ["pharmacy", "medical", "hospital", "clinic", "apollo", "1mg", "pharmeasy"],
    "education": ["school", "college", "tuition", "fees", "coaching", "byju", "unacademy"],
    "emi": ["emi", "loan", "finance", "bajaj", "repayment"],
    "transfer": ["transfer", "neft", "imps", "self"],
}


def _to_number(text: str) -> Optional[float]:
    try:
        value = float(text.replace(",", ""))
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_balance(text: str) -> Optional[float]:
    """Balance figure following a 'bal'/'balance' cue, if any"""
    match = BALANCE_RE.search(text)
    return _to_number(match.group(1)) if match else None


def parse_amount(text: str) -> Optional[float]:
    """First currency amount in the message that is not the balance figure"""
    balance_match = BALANCE_RE.search(text)
    for match in CURRENCY_RE.finditer(text):
        if balance_match and balance_match.start() <= match.start() < balance_match.end():
            continue
        return _to_number(match.group(1))
    return None


def parse_direction(text: str) -> str:
    lowered = text.lower()
    if any(cue in lowered for cue in CREDIT_CUES):
        return "credit"
    if any(cue in lowered for cue in DEBIT_CUES):
        return "debit"
    return "unknown"


def _clean_merchant(candidate: str) -> Optional[str]:
    name = " ".join(candidate.split()).strip(" .-")
    if len(name) < 2 or name.replace(" ", "").isdigit():
        return None
    if name.lower().startswith(_ACCOUNT_PREFIXES):
        return None
    return name


def parse_merchant(text: str, direction: str = "unknown") -> Optional[str]:
    """
    Counterparty named in the message.

    Credits look for 'from'/'by' first, debits for 'to'/'at' first; a UPI VPA
    is the fallback. Account references ("A/c XX1234") are skipped.
    """
    patterns = (_FROM_RE, _TO_RE) if direction == "credit" else (_TO_RE, _FROM_RE)
    for pattern in patterns:
        for match in pattern.finditer(text):
            name = _clean_merchant(match.group(1))
            if name:
                return name

    vpa = _VPA_RE.search(text)
    return vpa.group(1).lower() if vpa else None


def categorize_merchant(merchant: Optional[str]) -> str:
    if not merchant:
        return "other"
    lowered = merchant.lower()
    for category, keywords in MERCHANT_CATEGORY_KEYWORDS.items():
        if any(keyword in lowered for keyword in keywords):
            return category
    return "other"


def _source_of(record: TransactionRecord) -> Optional[str]:
    return record.merchant or record.sender


def detect_salary_credits(records: List[TransactionRecord]) -> List[SalaryCredit]:
    """
    Salary-like credits: labeled payroll credits, plus large credits the same
    source sends in at least two distinct months at a similar amount.
    """
    credits = [r for r in records if r.direction == "credit" and r.amount is not None]

    salary_idx = set()
    for idx, record in enumerate(credits):
        if record.amount >= LABELED_SALARY_MIN and SALARY_KEYWORDS_RE.search(record.raw_text):
            salary_idx.add(idx)

    by_source: Dict[str, List[int]] = defaultdict(list)
    for idx, record in enumerate(credits):
        source = _source_of(record)
        if idx in salary_idx or not source or record.amount < PERIODIC_CREDIT_MIN:
            continue
        by_source[source.lower()].append(idx)

    for indices in by_source.values():
        mid = median(credits[i].amount for i in indices)
        similar = [i for i in indices if abs(credits[i].amount - mid) <= SALARY_AMOUNT_TOLERANCE * mid]
        if len({month_key(credits[i].timestamp) for i in similar}) >= 2:
            salary_idx.update(similar)

    found = sorted((credits[i] for i in salary_idx), key=lambda r: r.timestamp)
    return [SalaryCredit(amount=r.amount, date=r.timestamp, source=_source_of(r)) for r in found]


def _frequency_label(interval_days: float) -> Optional[str]:
    if interval_days < 5:
        return None
    if interval_days <= 10:
        return "weekly"
    if interval_days <= 20:
        return "biweekly"
    if interval_days <= 45:
        return "monthly"
    if 80 <= interval_days <= 100:
        return "quarterly"
    return None


def detect_recurring_payments(records: List[TransactionRecord]) -> List[RecurringPayment]:
    """Debits to one merchant at a similar amount on a roughly fixed interval"""
    by_merchant: Dict[str, List[TransactionRecord]] = defaultdict(list)
    for record in records:
        if record.direction == "debit" and record.merchant and record.amount:
            by_merchant[record.merchant.lower()].append(record)

    recurring = []
    for payments in by_merchant.values():
        if len(payments) < RECURRING_MIN_OCCURRENCES:
            continue

        mid_amount = median(p.amount for p in payments)
        matching = sorted(
            (p for p in payments if abs(p.amount - mid_amount) <= RECURRING_AMOUNT_TOLERANCE * mid_amount),
            key=lambda p: p.timestamp,
        )
        if len(matching) < RECURRING_MIN_OCCURRENCES:
            continue

        intervals = [days_between(a.timestamp, b.timestamp) for a, b in zip(matching, matching[1:])]
        mid_interval = median(intervals)
        tolerance = max(RECURRING_MIN_INTERVAL_SLACK_DAYS, RECURRING_INTERVAL_TOLERANCE * mid_interval)
        if any(abs(i - mid_interval) > tolerance for i in intervals):
            continue

        frequency = _frequency_label(mid_interval)
        if frequency is None:
            continue

        recurring.append(
            RecurringPayment(
                merchant=matching[-1].merchant,
                amount=round(median(p.amount for p in matching), 2),
                frequency=frequency,
                last_payment=matching[-1].timestamp,
            )
        )

    return recurring
