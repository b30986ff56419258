"""Unit tests for structured analysis logging"""

import logging
from altcredit_gateway.domain.engine import analyze_credit
from altcredit_gateway.infrastructure.observability.logging import log_analysis


def test_log_analysis_carries_result_summary(caplog, good_applicant_payload, analysis_time):
    """Test the completion log record holds the result summary fields"""
    result = analyze_credit(good_applicant_payload, analysis_time=analysis_time)

    with caplog.at_level(logging.INFO):
        log_analysis("req-1", "user_good", result.summary(), 12.5)

    record = caplog.records[-1]
    assert record.getMessage() == "Credit analysis completed"
    assert record.request_id == "req-1"
    assert record.user_id == "user_good"
    assert record.final_score == result.final_score
    assert record.eligible is True
    assert record.max_amount == 100_000
    assert record.positive_indicators_count == 3
    assert record.duration_ms == 12.5
