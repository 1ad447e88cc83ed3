"""
Charge processing services.

Exports the pipeline and the shared stateful services it is built from.
"""
from .risk_scorer import RiskScorer, is_blocked, BLOCK_THRESHOLD
from .router import route_provider
from .explanation_service import (
    ExplanationCache,
    ExplanationGenerator,
    BedrockExplanationGenerator,
    ExplanationService,
)
from .transaction_ledger import TransactionLedger
from .charge_service import ChargePipeline

__all__ = [
    "RiskScorer",
    "is_blocked",
    "BLOCK_THRESHOLD",
    "route_provider",
    "ExplanationCache",
    "ExplanationGenerator",
    "BedrockExplanationGenerator",
    "ExplanationService",
    "TransactionLedger",
    "ChargePipeline",
]
