"""
Pydantic Transaction Model

Ledger record of one processed charge: the request as received and the
response that was returned for it.
"""
from datetime import datetime
from typing import Any, Dict
from pydantic import BaseModel

from .charges import ChargeRequest, ChargeResponse


class Transaction(BaseModel):
    """
    Immutable ledger entry, created once per processed charge.

    The id is the same value as response.transaction_id.
    """
    id: str
    timestamp: datetime
    request: ChargeRequest
    response: ChargeResponse

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "id": "txn_9f2c4e1ab7d84d3c9a51f0e2b6c7d8e9",
                "timestamp": "2025-10-17T14:35:00Z",
                "request": {
                    "amount": 1000,
                    "currency": "USD",
                    "source": "tok_visa",
                    "email": "user@example.com"
                },
                "response": {
                    "transactionId": "txn_9f2c4e1ab7d84d3c9a51f0e2b6c7d8e9",
                    "provider": "ProviderA",
                    "status": "success",
                    "riskScore": 0.0,
                    "explanation": "Payment routed to ProviderA with low risk score (0.00) for $10.00 transaction."
                }
            }
        }
    }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to API response format with an ISO-8601 timestamp."""
        return self.model_dump(mode="json", by_alias=True)
