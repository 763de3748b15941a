"""Pytest fixtures for testing"""

import json
import pytest
from typing import Any, Callable, Dict
from fastapi.testclient import TestClient
from loan_gateway.api.main import create_app
from loan_gateway.config import DEFAULT_POLICY_PATH
from loan_gateway.domain.models import Applicant, EmploymentType
from loan_gateway.domain.policy import PolicyDataset, load_policy_dataset, parse_policy_dataset


@pytest.fixture
def policy_data() -> Dict[str, Any]:
    """Raw JSON of the bundled lending rules (safe to mutate per test)"""
    return json.loads(DEFAULT_POLICY_PATH.read_text(encoding="utf-8"))


@pytest.fixture
def policy() -> PolicyDataset:
    """Bundled lending rules, version 2024.1"""
    return load_policy_dataset(DEFAULT_POLICY_PATH)


@pytest.fixture
def zero_rate_policy(policy_data: Dict[str, Any]) -> PolicyDataset:
    """Bundled rules at 0% interest, so new EMI is exactly principal / months"""
    policy_data["annual_interest_rate"] = 0.0
    return parse_policy_dataset(policy_data)


@pytest.fixture
def make_applicant() -> Callable[..., Applicant]:
    """Factory for the strong baseline applicant, with per-test overrides"""

    def _make(**overrides: Any) -> Applicant:
        fields = dict(
            age=30,
            employment_type=EmploymentType.SALARIED,
            employment_years=5.0,
            monthly_income=50_000.0,
            credit_score=760,
            existing_monthly_emi=0.0,
            existing_loan_count=0,
            requested_principal=500_000.0,
            product_type="Personal",
            requested_tenure_months=36,
        )
        fields.update(overrides)
        return Applicant(**fields)

    return _make


@pytest.fixture
def applicant_payload() -> Dict[str, Any]:
    """JSON body for POST /v1/assessment matching the baseline applicant"""
    return {
        "age": 30,
        "employment_type": "Salaried",
        "employment_years": 5,
        "monthly_income": 50000,
        "credit_score": 760,
        "existing_monthly_emi": 0,
        "existing_loan_count": 0,
        "requested_principal": 500000,
        "product_type": "Personal",
        "requested_tenure_months": 36,
    }


@pytest.fixture
def client(policy: PolicyDataset) -> TestClient:
    """Create FastAPI test client bound to the bundled policy"""
    app = create_app(policy)
    return TestClient(app)
