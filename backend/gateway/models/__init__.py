"""
Pydantic models for charges, decisions and ledger records.
"""
from .charges import (
    PROVIDER_A,
    PROVIDER_B,
    NO_PROVIDER,
    Provider,
    ChargeRequest,
    ChargeDecision,
    ChargeResponse,
)
from .transactions import Transaction

__all__ = [
    "PROVIDER_A",
    "PROVIDER_B",
    "NO_PROVIDER",
    "Provider",
    "ChargeRequest",
    "ChargeDecision",
    "ChargeResponse",
    "Transaction",
]
