"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Generator, List
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from altcredit_gateway.api.main import create_app
from altcredit_gateway.infrastructure.database.models import Base
from altcredit_gateway.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ANALYSIS_TIME = datetime(2024, 4, 1, 12, 0)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def analysis_time() -> datetime:
    return ANALYSIS_TIME


@pytest.fixture
def sms_batch() -> Callable[[int], List[Dict[str, Any]]]:
    """Builds n well-formed debit SMS entries spread over roughly three months"""
    merchants = ["KIRANA STORE", "SWIGGY", "INDIAN OIL", "APOLLO PHARMACY", "BIGBASKET"]

    def build(n: int) -> List[Dict[str, Any]]:
        start = datetime(2024, 1, 1, 9, 0)
        entries = []
        for i in range(n):
            ts = start + timedelta(hours=i * 40)
            amount = 500 + (i % 5) * 100
            balance = 20000 + (i % 4) * 500
            entries.append(
                {
                    "date": ts.isoformat(),
                    "message": f"Rs {amount} debited from A/c XX1234 to {merchants[i % 5]} "
                    f"on {ts:%d-%m-%y}. Avl Bal Rs {balance:,}",
                    "sender": "VK-HDFCBK",
                }
            )
        return entries

    return build


@pytest.fixture
def good_applicant_payload() -> Dict[str, Any]:
    """
    Salaried applicant with three months of steady behavior:
    monthly salary and rent, weekly-ish shopping, active UPI and regular recharges.
    """
    sms_records = []
    upi_records = []
    recharge_records = []
    shops = ["BIGBASKET", "DMART", "APOLLO PHARMACY", "INDIAN OIL"]

    for month in (1, 2, 3):
        balance = 45000 + (month - 2) * 1000
        sms_records.append(
            {
                "date": datetime(2024, month, 1, 10, 0).isoformat(),
                "message": f"Salary of Rs 30,000 credited to A/c XX1234 from ACME CORP. Avl Bal Rs {balance:,}",
                "sender": "VK-HDFCBK",
            }
        )
        balance -= 8000
        sms_records.append(
            {
                "date": datetime(2024, month, 5, 10, 0).isoformat(),
                "message": f"Rs 8,000 debited from A/c XX1234 to LANDLORD on 05-0{month}-24. Avl Bal Rs {balance:,}",
                "sender": "VK-HDFCBK",
            }
        )
        for day, shop in zip((10, 15, 20, 25), shops):
            balance -= 1500
            sms_records.append(
                {
                    "date": datetime(2024, month, day, 18, 0).isoformat(),
                    "message": f"Rs 1,500 spent at {shop} on {day}-0{month}-24. Avl Bal Rs {balance:,}",
                    "sender": "VK-HDFCBK",
                }
            )

        for i in range(15):
            upi_records.append(
                {
                    "timestamp": datetime(2024, month, 1 + i, (9, 13, 19)[i % 3], 15).isoformat(),
                    "amount": 150 + i * 10,
                    "merchant": ("Swiggy", "Blinkit", "Uber", "Jio Recharge", "Ravi Kumar")[i % 5],
                }
            )

    for i in range(4):
        recharge_records.append(
            {"date": (datetime(2024, 1, 1) + timedelta(days=28 * i)).isoformat(), "amount": 239, "type": "recharge"}
        )

    return {
        "sms_records": sms_records,
        "upi_records": upi_records,
        "recharge_records": recharge_records,
        "profile": {"monthly_income": 30000, "occupation": "salaried"},
    }


@pytest.fixture
def empty_payload() -> Dict[str, Any]:
    return {
        "sms_records": [],
        "upi_records": [],
        "recharge_records": [],
        "profile": {"monthly_income": 0, "occupation": "other"},
    }
