"""Pytest fixtures for testing"""

from typing import List
import pytest
from fastapi.testclient import TestClient
from aml_gateway.api.main import create_app
from aml_gateway.domain.models import Transaction


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def march_statement() -> List[Transaction]:
    """Salary, a gambling spree right after payday, and a structuring-sized cash deposit"""
    return [
        Transaction(
            date="2024-03-01",
            description="ACME LTD SALARY",
            money_in=2000.0,
            balance=2500.0,
            category="Income Categories",
            subcategory="Salary (PAYE)",
        ),
        Transaction(
            date="2024-03-02",
            description="Bet365",
            money_out=350.0,
            balance=2150.0,
            category="Lifestyle",
            subcategory="Entertainment",
        ),
        Transaction(
            date="2024-03-15",
            description="Cash deposit - branch counter",
            money_in=9200.0,
            balance=11350.0,
            category="Income Categories",
            subcategory="Other Income",
        ),
    ]


@pytest.fixture
def statement_payload() -> dict:
    """Extraction-service response shape, including fields the analyzer ignores"""
    return {
        "bank": "Example Bank",
        "transactions": [
            {
                "date": "2024-03-01",
                "description": "ACME LTD SALARY",
                "raw_description": "ACME LTD SALARY MAR",
                "money_in": 2000.0,
                "money_out": None,
                "balance": 2500.0,
                "currency": "GBP",
                "bank": "Example Bank",
                "category": "Income Categories",
                "subcategory": "Salary (PAYE)",
            },
            {
                "date": "2024-03-02",
                "description": "Bet365",
                "raw_description": "BET365 ONLINE",
                "money_in": None,
                "money_out": 350.0,
                "balance": 2150.0,
                "currency": "GBP",
                "bank": "Example Bank",
                "category": "Lifestyle",
                "subcategory": "Entertainment",
            },
            {
                "date": "not-a-date",
                "description": "Coffee",
                "money_out": 3.5,
                "balance": 2146.5,
                "category": "Lifestyle",
                "subcategory": "Food and Drink",
            },
            {
                "date": "2024-03-15",
                "description": "Cash deposit - branch counter",
                "raw_description": "CASH DEP 15MAR",
                "money_in": 9200.0,
                "balance": 11346.5,
                "currency": "GBP",
                "bank": "Example Bank",
                "category": "Income Categories",
                "subcategory": "Other Income",
            },
        ],
    }
