"""Record normalization - raw behavioral payloads to typed records"""

import logging
import math
from collections.abc import Mapping
from typing import Any, Callable, List, Optional, Tuple, TypeVar

from altcredit_gateway.domain.exceptions import InvalidPayloadError
from altcredit_gateway.domain.models import (
    ApplicantProfile,
    NormalizedPayload,
    RechargeEvent,
    SourceCoverage,
    TransactionRecord,
    UPITransaction,
)
from altcredit_gateway.domain.patterns import parse_amount, parse_balance, parse_direction, parse_merchant
from altcredit_gateway.utils.date_utils import parse_timestamp

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _pick(entry: Mapping, *keys: str) -> Any:
    """First present, non-None value among alias keys"""
    for key in keys:
        value = entry.get(key)
        if value is not None:
            return value
    return None


def _to_amount(value: Any) -> Optional[float]:
    """Finite, non-negative amount or None"""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        value = value.replace(",", "").strip()
    try:
        amount = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(amount) or amount < 0:
        return None
    return amount


def _entry_timestamp(entry: Any):
    if not isinstance(entry, Mapping):
        return None
    return parse_timestamp(_pick(entry, "timestamp", "date"))


def parse_sms_entry(entry: Any) -> Optional[TransactionRecord]:
    timestamp = _entry_timestamp(entry)
    if timestamp is None:
        return None

    text = _pick(entry, "message", "body", "text", "raw_text", "rawText")
    text = text if isinstance(text, str) else ""
    sender = entry.get("sender")
    direction = parse_direction(text)

    return TransactionRecord(
        timestamp=timestamp,
        raw_text=text,
        amount=parse_amount(text),
        direction=direction,
        merchant=parse_merchant(text, direction),
        balance_after=parse_balance(text),
        sender=sender if isinstance(sender, str) else None,
    )


def parse_upi_entry(entry: Any) -> Optional[UPITransaction]:
    timestamp = _entry_timestamp(entry)
    if timestamp is None:
        return None
    amount = _to_amount(entry.get("amount"))
    if amount is None:
        return None

    merchant = _pick(entry, "merchant", "payee", "vpa")
    category = entry.get("category")
    return UPITransaction(
        timestamp=timestamp,
        amount=amount,
        merchant=str(merchant).strip() if merchant is not None and str(merchant).strip() else "unknown",
        category=category.strip().lower() if isinstance(category, str) and category.strip() else None,
    )


def parse_recharge_entry(entry: Any) -> Optional[RechargeEvent]:
    timestamp = _entry_timestamp(entry)
    if timestamp is None:
        return None
    amount = _to_amount(entry.get("amount"))
    if amount is None:
        return None

    kind = entry.get("type")
    return RechargeEvent(
        timestamp=timestamp,
        amount=amount,
        type="recharge" if isinstance(kind, str) and kind.strip().lower() == "recharge" else "other",
    )


def _normalize(source: str, raw: List[Any], parse: Callable[[Any], Optional[T]]) -> Tuple[List[T], int]:
    records = []
    dropped = 0
    for entry in raw:
        try:
            record = parse(entry)
        except (TypeError, ValueError, AttributeError, OverflowError) as e:
            logger.debug("Unparseable %s record: %s", source, e)
            record = None
        if record is None:
            dropped += 1
            continue
        records.append(record)

    if dropped:
        logger.debug("Dropped %d of %d %s records", dropped, len(raw), source)
    return records, dropped


def normalize_sms_records(raw: List[Any]) -> List[TransactionRecord]:
    return _normalize("sms", raw, parse_sms_entry)[0]


def normalize_upi_records(raw: List[Any]) -> List[UPITransaction]:
    return _normalize("upi", raw, parse_upi_entry)[0]


def normalize_recharge_records(raw: List[Any]) -> List[RechargeEvent]:
    return _normalize("mobile", raw, parse_recharge_entry)[0]


def normalize_profile(raw: Optional[Mapping]) -> ApplicantProfile:
    """Negative, zero or non-numeric income is treated as not declared"""
    if not raw:
        return ApplicantProfile()

    income = _to_amount(_pick(raw, "monthly_income", "monthlyIncome"))
    occupation = raw.get("occupation")
    return ApplicantProfile(
        monthly_income=income if income else None,
        occupation=occupation.strip().lower() if isinstance(occupation, str) and occupation.strip() else "other",
    )


def _record_list(payload: Mapping, field: str, alias: str) -> List[Any]:
    value = _pick(payload, field, alias)
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise InvalidPayloadError(field, "a list of records")
    return list(value)


def _coverage(source: str, records: List[Any], dropped: int) -> SourceCoverage:
    timestamps = [r.timestamp for r in records]
    return SourceCoverage(
        source=source,
        record_count=len(records),
        dropped_count=dropped,
        start=min(timestamps) if timestamps else None,
        end=max(timestamps) if timestamps else None,
    )


def normalize_payload(payload: Any) -> NormalizedPayload:
    """
    Validate the payload's gross shape and normalize every source.

    Raises:
        InvalidPayloadError: payload is not a mapping, a record list is not a
            list, or the profile is not a mapping
    """
    if not isinstance(payload, Mapping):
        raise InvalidPayloadError("payload", "a mapping")

    raw_sms = _record_list(payload, "sms_records", "smsRecords")
    raw_upi = _record_list(payload, "upi_records", "upiRecords")
    raw_recharges = _record_list(payload, "recharge_records", "rechargeRecords")

    raw_profile = payload.get("profile")
    if raw_profile is not None and not isinstance(raw_profile, Mapping):
        raise InvalidPayloadError("profile", "a mapping")

    sms, sms_dropped = _normalize("sms", raw_sms, parse_sms_entry)
    upi, upi_dropped = _normalize("upi", raw_upi, parse_upi_entry)
    recharges, recharge_dropped = _normalize("mobile", raw_recharges, parse_recharge_entry)

    return NormalizedPayload(
        sms_records=sms,
        upi_records=upi,
        recharge_records=recharges,
        profile=normalize_profile(raw_profile),
        coverage=[
            _coverage("sms", sms, sms_dropped),
            _coverage("upi", upi, upi_dropped),
            _coverage("mobile", recharges, recharge_dropped),
        ],
    )
