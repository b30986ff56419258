"""SQLAlchemy ORM models for stored credit analyses"""

import uuid
from sqlalchemy import Column, Boolean, Float, DateTime, Integer, Text, JSON, Uuid
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class CreditAnalysisRecord(Base):
    """One completed credit analysis for a user"""

    __tablename__ = "credit_analysis"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    final_score = Column(Integer, nullable=False, index=True)
    risk_tier = Column(Text, nullable=False, index=True)
    confidence = Column(Float, nullable=False)
    eligible = Column(Boolean, nullable=False)
    max_amount = Column(Integer, nullable=False)
    model_version = Column(Text, nullable=False)
    source_coverage = Column(JSON, nullable=False)
    result = Column(JSON, nullable=False)
    analyzed_at = Column(DateTime(timezone=True), nullable=False, index=True)
