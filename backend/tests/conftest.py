"""
Pytest configuration and fixtures.
"""
import pytest
from fastapi.testclient import TestClient

from gateway.main import create_app
from gateway.mocks.explanation_generator import MockExplanationGenerator
from gateway.models.charges import ChargeRequest
from gateway.services.charge_service import ChargePipeline
from gateway.services.explanation_service import ExplanationCache, ExplanationService
from gateway.services.risk_scorer import RiskScorer
from gateway.services.transaction_ledger import TransactionLedger


def make_request(
    amount: int = 1000,
    email: str = "user@gmail.com",
    currency: str = "USD",
    source: str = "tok_visa",
) -> ChargeRequest:
    """Build a well-formed charge request."""
    return ChargeRequest(amount=amount, currency=currency, source=source, email=email)


@pytest.fixture
def scorer() -> RiskScorer:
    return RiskScorer()


@pytest.fixture
def ledger() -> TransactionLedger:
    return TransactionLedger()


@pytest.fixture
def template_explanations() -> ExplanationService:
    """Explanation service with no external generator."""
    return ExplanationService(cache=ExplanationCache())


@pytest.fixture
def mock_generator() -> MockExplanationGenerator:
    return MockExplanationGenerator()


@pytest.fixture
def pipeline(scorer, template_explanations, ledger) -> ChargePipeline:
    return ChargePipeline(scorer=scorer, explanations=template_explanations, ledger=ledger)


@pytest.fixture
def client(pipeline):
    """HTTP client bound to an app using the template-only pipeline."""
    with TestClient(create_app(pipeline=pipeline)) as test_client:
        yield test_client
