"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Any, Dict, List
from fastapi.testclient import TestClient
from finplan.api.main import create_app
from finplan.domain.models import (
    Account,
    ConfidenceLevel,
    PersonalFinanceCategory,
    Transaction,
)

AS_OF = date(2024, 6, 30)

# (id, amount, date, name, pfc primary, pfc detailed, confidence, tags, pending)
# Positive amount = money out
_SAMPLE_ROWS = []
for _month in range(1, 7):
    _SAMPLE_ROWS.extend(
        [
            (f"pay_{_month}", -5000.0, date(2024, _month, 1), "ACME Payroll",
             "INCOME", "INCOME_WAGES", "HIGH", ["Transfer", "Payroll"], False),
            (f"rent_{_month}", 1500.0, date(2024, _month, 3), "Parkview Apartments",
             "RENT_AND_UTILITIES", "RENT_AND_UTILITIES_RENT", "VERY_HIGH", ["Payment", "Rent"], False),
            (f"groceries_{_month}", 400.0, date(2024, _month, 10), "Whole Foods",
             "FOOD_AND_DRINK", "FOOD_AND_DRINK_GROCERIES", "HIGH", ["Shops", "Supermarkets and Groceries"], False),
            (f"netflix_{_month}", 15.0, date(2024, _month, 15), "Netflix",
             "ENTERTAINMENT", "ENTERTAINMENT_STREAMING_SERVICES", "MEDIUM", ["Service", "Subscription"], False),
            (f"brokerage_{_month}", 500.0, date(2024, _month, 20), "Vanguard Transfer",
             "TRANSFER_OUT", "TRANSFER_OUT_INVESTMENT_AND_RETIREMENT_FUNDS", "HIGH",
             ["Transfer", "Investment"], False),
            (f"card_payment_{_month}", 200.0, date(2024, _month, 25), "Chase Card Payment",
             "LOAN_PAYMENTS", "LOAN_PAYMENTS_CREDIT_CARD_PAYMENT", "HIGH", ["Payment", "Credit Card"], False),
        ]
    )
_SAMPLE_ROWS.extend(
    [
        ("corner_store", 30.0, date(2024, 3, 5), "Corner Store", None, None, None, ["Shops"], False),
        ("pending_groceries", 999.0, date(2024, 6, 28), "Whole Foods",
         "FOOD_AND_DRINK", "FOOD_AND_DRINK_GROCERIES", "HIGH", ["Shops"], True),
    ]
)

_SAMPLE_ACCOUNTS: List[Dict[str, Any]] = [
    {"account_id": "checking", "item_id": "bank_1", "name": "Checking", "type": "depository",
     "subtype": "checking", "current_balance": 8200.0, "available_balance": 8000.0},
    {"account_id": "savings", "item_id": "bank_1", "name": "Savings", "type": "depository",
     "subtype": "savings", "current_balance": 4000.0},
    {"account_id": "card", "item_id": "bank_1", "name": "Sapphire", "type": "credit",
     "subtype": "credit card", "current_balance": 5000.0, "limit": 10000.0, "apr": 0.24},
    {"account_id": "student_loan", "item_id": "servicer", "name": "Student Loan", "type": "loan",
     "subtype": "student", "current_balance": 30000.0, "apr": 0.05},
    {"account_id": "brokerage", "item_id": "broker", "name": "Brokerage", "type": "investment",
     "subtype": "brokerage", "current_balance": 25000.0},
]


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def as_of() -> date:
    """Fixed analysis date so windows don't drift with the calendar"""
    return AS_OF


@pytest.fixture
def sample_transactions() -> List[Transaction]:
    """Six months of salary, rent, groceries, streaming, investing and card payments"""
    transactions = []
    for txn_id, amount, day, name, primary, detailed, confidence, tags, pending in _SAMPLE_ROWS:
        pfc = None
        if primary is not None:
            pfc = PersonalFinanceCategory(primary, detailed, ConfidenceLevel(confidence))
        transactions.append(
            Transaction(
                transaction_id=txn_id,
                account_id="checking",
                amount=amount,
                date=day,
                name=name,
                category=tuple(tags),
                pending=pending,
                personal_finance_category=pfc,
            )
        )
    return transactions


@pytest.fixture
def sample_accounts() -> List[Account]:
    """Checking, savings, credit card, student loan and brokerage accounts"""
    return [Account(**row) for row in _SAMPLE_ACCOUNTS]


@pytest.fixture
def sample_transaction_payloads() -> List[Dict[str, Any]]:
    """Same history as sample_transactions, as JSON request bodies"""
    payloads = []
    for txn_id, amount, day, name, primary, detailed, confidence, tags, pending in _SAMPLE_ROWS:
        payload: Dict[str, Any] = {
            "transaction_id": txn_id,
            "account_id": "checking",
            "amount": amount,
            "date": day.isoformat(),
            "name": name,
            "category": tags,
            "pending": pending,
        }
        if primary is not None:
            payload["personal_finance_category"] = {
                "primary": primary,
                "detailed": detailed,
                "confidence_level": confidence,
            }
        payloads.append(payload)
    return payloads


@pytest.fixture
def sample_account_payloads() -> List[Dict[str, Any]]:
    return [dict(row) for row in _SAMPLE_ACCOUNTS]
