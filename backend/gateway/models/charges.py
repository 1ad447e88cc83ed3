"""
Pydantic Charge Models

Inbound charge request, the ephemeral block/route decision and the
response returned to the caller. All monetary values in minor units.
"""
from typing import Optional, Literal
from pydantic import BaseModel, Field, field_validator, model_validator


Provider = Literal["ProviderA", "ProviderB"]

PROVIDER_A: Provider = "ProviderA"  # low risk
PROVIDER_B: Provider = "ProviderB"  # moderate risk
NO_PROVIDER = "none"

MAX_AMOUNT = 10_000_000

# local@label.label[...]; rejects "user@com" and "user@.com"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s.]+(\.[^@\s.]+)+$"


class ChargeRequest(BaseModel):
    """
    Charge request as received at the gateway boundary.

    Validation happens here, before the charge pipeline ever sees the
    request; the pipeline itself assumes a well-formed instance.
    """
    amount: int = Field(gt=0, le=MAX_AMOUNT)
    currency: str = Field(pattern="^[A-Z]{3}$")
    source: str = Field(min_length=1, max_length=100)
    email: str = Field(pattern=EMAIL_PATTERN)

    model_config = {
        "extra": "forbid",
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "amount": 1000,
                "currency": "USD",
                "source": "tok_visa",
                "email": "user@example.com"
            }
        }
    }

    @field_validator("amount", mode="before")
    @classmethod
    def reject_boolean_amount(cls, v):
        """Whole-number floats and numeric strings coerce; booleans do not."""
        if isinstance(v, bool):
            raise ValueError("amount must be an integer")
        return v

    @field_validator("currency", mode="before")
    @classmethod
    def uppercase_currency(cls, v):
        """Accept lower-case codes such as "usd"."""
        if isinstance(v, str):
            return v.upper()
        return v


class ChargeDecision(BaseModel):
    """
    Outcome of scoring and routing a single charge.

    A blocked decision never carries a provider; an accepted one always does.
    """
    risk_score: float = Field(ge=0.0, le=1.0)
    blocked: bool
    provider: Optional[Provider] = None

    model_config = {
        "frozen": True
    }

    @model_validator(mode="after")
    def provider_matches_block(self):
        if self.blocked and self.provider is not None:
            raise ValueError("Blocked decision cannot carry a provider")
        if not self.blocked and self.provider is None:
            raise ValueError("Accepted decision requires a provider")
        return self

    @property
    def status(self) -> Literal["success", "blocked"]:
        return "blocked" if self.blocked else "success"


class ChargeResponse(BaseModel):
    """
    Response returned for every processed charge.

    Serialized with camelCase keys (transactionId, riskScore) at the API.
    """
    transaction_id: str = Field(pattern="^txn_", serialization_alias="transactionId")
    provider: Literal["ProviderA", "ProviderB", "none"]
    status: Literal["success", "blocked"]
    risk_score: float = Field(ge=0.0, le=1.0, serialization_alias="riskScore")
    explanation: str

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "transactionId": "txn_9f2c4e1ab7d84d3c9a51f0e2b6c7d8e9",
                "provider": "ProviderA",
                "status": "success",
                "riskScore": 0.0,
                "explanation": "Payment routed to ProviderA with low risk score (0.00) for $10.00 transaction."
            }
        }
    }

    @classmethod
    def from_decision(
        cls,
        transaction_id: str,
        decision: ChargeDecision,
        explanation: str
    ) -> "ChargeResponse":
        return cls(
            transaction_id=transaction_id,
            provider=decision.provider or NO_PROVIDER,
            status=decision.status,
            risk_score=decision.risk_score,
            explanation=explanation,
        )

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return self.model_dump(mode="json", by_alias=True)
