"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Any, List, Optional


class ProfileSchema(BaseModel):
    """Self-declared applicant profile"""

    model_config = ConfigDict(populate_by_name=True)

    monthly_income: Optional[float] = Field(None, alias="monthlyIncome")
    occupation: Optional[str] = None


class ScoreRequest(BaseModel):
    """Request body for POST /v1/credit/score; camelCase keys are also accepted"""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., min_length=1, alias="userId", description="User identifier")
    sms_records: List[Any] = Field(default_factory=list, alias="smsRecords", description="Raw bank SMS entries")
    upi_records: List[Any] = Field(default_factory=list, alias="upiRecords", description="Raw UPI log entries")
    recharge_records: List[Any] = Field(default_factory=list, alias="rechargeRecords", description="Raw recharge entries")
    profile: ProfileSchema = Field(default_factory=ProfileSchema)


class ComponentSchema(BaseModel):
    name: str
    score: int
    weight: float
    contributing_factors: List[str]
    data_backed: bool


class RedFlagSchema(BaseModel):
    kind: str
    severity: str
    description: str
    score_impact: int


class PositiveIndicatorSchema(BaseModel):
    kind: str
    strength: str
    description: str
    score_impact: int


class RecommendationSchema(BaseModel):
    eligible: bool
    max_amount: int
    recommended_amount: int
    suggested_interest_rate: float
    max_tenure_months: int
    conditions: List[str]


class SourceCoverageSchema(BaseModel):
    source: str
    record_count: int
    dropped_count: int
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class AnalysisResponse(BaseModel):
    """Full credit analysis, returned by score and report endpoints"""

    analysis_id: str
    user_id: str
    final_score: int
    risk_tier: str
    confidence: float
    components: List[ComponentSchema]
    red_flags: List[RedFlagSchema]
    positive_indicators: List[PositiveIndicatorSchema]
    recommendation: RecommendationSchema
    analysis_timestamp: datetime
    source_coverage: List[SourceCoverageSchema]
    model_version: str


class HistoryItem(BaseModel):
    """Single analysis in history"""

    analysis_id: str
    final_score: int
    risk_tier: str
    confidence: float
    eligible: bool
    analyzed_at: str
    source_coverage: List[SourceCoverageSchema]


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


class HistoryResponse(BaseModel):
    """Response for GET /v1/credit/history"""

    user_id: str
    analyses: List[HistoryItem]
    pagination: Pagination
