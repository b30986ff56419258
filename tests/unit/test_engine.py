"""Unit tests for the end-to-end scoring pipeline"""

import pytest
from altcredit_gateway.domain.engine import MODEL_VERSION, analyze_credit, assemble_result
from altcredit_gateway.domain.exceptions import InvalidPayloadError
from altcredit_gateway.domain.models import ComponentScore, MobileSummary, SmsSummary, UpiSummary
from altcredit_gateway.domain.scoring import COMPONENT_WEIGHTS


def _assemble(scores, analysis_time):
    components = [
        ComponentScore(name=name, score=score, weight=weight, contributing_factors=[])
        for (name, weight), score in zip(COMPONENT_WEIGHTS.items(), scores)
    ]
    return assemble_result(components, SmsSummary(), UpiSummary(), MobileSummary(), [], analysis_time)


def test_empty_payload_scores_minimum(empty_payload, analysis_time):
    """Test no usable data gives the scale minimum and an ineligible result"""
    result = analyze_credit(empty_payload, analysis_time=analysis_time)

    assert result.final_score == 300
    assert result.risk_tier == "high"
    assert result.confidence == 0.3
    assert result.recommendation.eligible is False
    assert result.recommendation.max_amount == 0
    assert result.red_flags == []
    assert [c.name for c in result.components] == list(COMPONENT_WEIGHTS)


@pytest.mark.parametrize("payload", [{}, {"sms_records": None, "upi_records": None}])
def test_missing_sources_are_treated_as_empty(payload, analysis_time):
    result = analyze_credit(payload, analysis_time=analysis_time)

    assert result.final_score == 300
    assert all(c.record_count == 0 for c in result.source_coverage)


def test_negative_income_is_ignored(analysis_time):
    result = analyze_credit({"profile": {"monthly_income": -500, "occupation": "salaried"}}, analysis_time)

    assert result.final_score == 300


def test_declared_income_without_behavioral_data_is_ineligible(analysis_time):
    """Test self-declared profile fields alone cannot earn a score or a loan"""
    result = analyze_credit({"profile": {"monthly_income": 50000, "occupation": "government"}}, analysis_time)

    assert result.final_score == 300
    assert result.risk_tier == "high"
    assert result.recommendation.eligible is False
    assert not any(c.data_backed for c in result.components)


def test_good_applicant(good_applicant_payload, analysis_time):
    """Test a salaried applicant with steady behavior lands in the low-risk tier"""
    result = analyze_credit(good_applicant_payload, analysis_time=analysis_time)

    assert result.final_score >= 750
    assert result.risk_tier == "low"
    assert result.red_flags == []
    assert [i.kind for i in result.positive_indicators] == [
        "regular_salary",
        "high_digital_engagement",
        "recurring_commitments",
    ]
    assert result.confidence == 0.5
    assert result.recommendation.eligible is True
    assert result.recommendation.max_amount == 100_000
    assert result.recommendation.conditions == []
    assert result.model_version == MODEL_VERSION
    assert result.analysis_timestamp == analysis_time


def test_analysis_is_deterministic(good_applicant_payload, analysis_time):
    first = analyze_credit(good_applicant_payload, analysis_time=analysis_time)
    second = analyze_credit(good_applicant_payload, analysis_time=analysis_time)

    assert first.to_dict() == second.to_dict()


def test_scores_stay_in_bounds(good_applicant_payload, sms_batch, analysis_time):
    payloads = [
        good_applicant_payload,
        {"sms_records": sms_batch(7)},
        {"upi_records": [{"timestamp": "2024-01-01T10:00:00", "amount": 10, "merchant": "X"}]},
        {"recharge_records": [{"date": "2024-01-01", "amount": 999, "type": "recharge"}]},
    ]

    for payload in payloads:
        result = analyze_credit(payload, analysis_time=analysis_time)
        assert 300 <= result.final_score <= 900
        assert 0.3 <= result.confidence <= 1.0
        assert all(0 <= c.score <= 100 for c in result.components)


def test_record_without_timestamp_does_not_change_score(sms_batch, analysis_time):
    records = sms_batch(50)
    baseline = analyze_credit({"sms_records": records}, analysis_time=analysis_time)

    with_bad_record = analyze_credit(
        {"sms_records": records + [{"message": "Rs 99,999 credited"}]}, analysis_time=analysis_time
    )

    assert with_bad_record.final_score == baseline.final_score
    assert with_bad_record.source_coverage[0].dropped_count == 1


def test_single_unparseable_message_has_bounded_effect(sms_batch, analysis_time):
    """Test one message with no readable amount moves the score by at most 10 points"""
    records = sms_batch(50)
    baseline = analyze_credit({"sms_records": records}, analysis_time=analysis_time)

    noisy = analyze_credit(
        {"sms_records": records + [{"date": "2024-02-01T08:00:00", "message": "Your statement is ready"}]},
        analysis_time=analysis_time,
    )

    assert abs(noisy.final_score - baseline.final_score) <= 10


def test_more_sms_history_raises_confidence(sms_batch, analysis_time):
    smaller = analyze_credit({"sms_records": sms_batch(40)}, analysis_time=analysis_time)
    larger = analyze_credit({"sms_records": sms_batch(60)}, analysis_time=analysis_time)

    assert smaller.confidence == 0.3
    assert larger.confidence == 0.5
    assert larger.confidence - smaller.confidence == pytest.approx(0.2)


def test_tier_threshold_at_750(analysis_time):
    result = _assemble([75, 75, 75, 75, 75], analysis_time)

    assert result.final_score == 750
    assert result.risk_tier == "low"
    assert result.recommendation.max_amount == 100_000


def test_tier_threshold_just_below_750(analysis_time):
    result = _assemble([75, 75, 75, 75, 73], analysis_time)

    assert result.final_score == 749
    assert result.risk_tier == "medium"
    assert result.recommendation.max_amount == 50_000
    assert result.recommendation.conditions == ["regular monitoring"]


def test_invalid_payload_names_field(analysis_time):
    with pytest.raises(InvalidPayloadError) as exc_info:
        analyze_credit({"upi_records": "not a list"}, analysis_time=analysis_time)

    assert exc_info.value.field == "upi_records"


def test_result_to_dict_is_json_ready(good_applicant_payload, analysis_time):
    data = analyze_credit(good_applicant_payload, analysis_time=analysis_time).to_dict()

    assert data["analysis_timestamp"] == "2024-04-01T12:00:00"
    assert data["recommendation"]["eligible"] is True
    assert data["source_coverage"][0]["source"] == "sms"
    assert isinstance(data["sms_summary"]["salary_credits"][0]["date"], str)


def test_result_summary(good_applicant_payload, analysis_time):
    result = analyze_credit(good_applicant_payload, analysis_time=analysis_time)

    summary = result.summary()

    assert summary["final_score"] == result.final_score
    assert summary["eligible"] is True
    assert summary["max_amount"] == 100_000
    assert summary["red_flags_count"] == 0
    assert summary["positive_indicators_count"] == 3
    assert summary["analysis_timestamp"] == "2024-04-01T12:00:00"


def test_huge_integers_do_not_escape(analysis_time):
    """Test integers too large for a float are dropped or ignored, never raised"""
    payload = {
        "sms_records": [{"timestamp": 10**400, "message": "Rs 100 debited"}],
        "upi_records": [{"timestamp": "2024-01-01T10:00:00", "amount": 10**400, "merchant": "X"}],
        "profile": {"monthly_income": 10**400},
    }

    result = analyze_credit(payload, analysis_time=analysis_time)

    assert result.final_score == 300
    assert [c.dropped_count for c in result.source_coverage] == [1, 1, 0]
