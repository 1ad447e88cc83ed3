"""
Charge Pipeline

Processes one charge request end to end:
score → block decision → route → explain → record → respond.

The pipeline holds no request-local state; the only shared state lives in
the explanation cache and the transaction ledger it is given.
"""
import uuid
from datetime import datetime, timezone
import logging

from ..models.charges import ChargeRequest, ChargeDecision, ChargeResponse
from ..models.transactions import Transaction
from .explanation_service import ExplanationService
from .risk_scorer import RiskScorer, is_blocked
from .router import route_provider
from .transaction_ledger import TransactionLedger

logger = logging.getLogger(__name__)


def generate_transaction_id() -> str:
    return f"txn_{uuid.uuid4().hex}"


class ChargePipeline:
    """
    Orchestrates the charge processing services.

    Built once at application startup and shared by every request.
    """

    def __init__(
        self,
        scorer: RiskScorer,
        explanations: ExplanationService,
        ledger: TransactionLedger,
    ):
        self.scorer = scorer
        self.explanations = explanations
        self.ledger = ledger

    def decide(self, request: ChargeRequest) -> ChargeDecision:
        """Score a request and make the block/route decision."""
        risk_score = self.scorer.score(request)
        blocked = is_blocked(risk_score)
        provider = None if blocked else route_provider(risk_score)

        return ChargeDecision(risk_score=risk_score, blocked=blocked, provider=provider)

    async def process(self, request: ChargeRequest) -> ChargeResponse:
        """
        Process a validated charge request.

        Args:
            request: Well-formed charge request

        Returns:
            ChargeResponse; the matching Transaction is already in the ledger

        Explanation failures are absorbed by the explanation service, so this
        never fails for a well-formed request.
        """
        transaction_id = generate_transaction_id()
        decision = self.decide(request)

        explanation = await self.explanations.explain(
            request,
            decision.risk_score,
            decision.provider,
            decision.blocked
        )

        response = ChargeResponse.from_decision(transaction_id, decision, explanation)

        self.ledger.append(Transaction(
            id=transaction_id,
            timestamp=datetime.now(timezone.utc),
            request=request,
            response=response,
        ))

        logger.info(
            f"Processed charge: {transaction_id}, status={response.status}, "
            f"provider={response.provider}, risk_score={decision.risk_score:.2f}"
        )

        return response
