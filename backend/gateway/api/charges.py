"""
Charges API Endpoints

Accepts charge requests and runs them through the charge pipeline.
Request bodies are validated by the ChargeRequest model before the
pipeline is invoked.
"""
from fastapi import APIRouter, Depends
from typing import Dict, Any
import logging

from ..models.charges import ChargeRequest
from ..services.charge_service import ChargePipeline
from .dependencies import get_pipeline

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/charge")
async def create_charge_endpoint(
    charge: ChargeRequest,
    pipeline: ChargePipeline = Depends(get_pipeline)
) -> Dict[str, Any]:
    """
    Process a charge.

    Request Body:
        {
            "amount": int,  # minor units, 1-10000000
            "currency": str,  # 3-letter code
            "source": str,  # payment source token, 1-100 chars
            "email": str
        }

    Returns:
        {
            "transactionId": str,
            "provider": "ProviderA" | "ProviderB" | "none",
            "status": "success" | "blocked",
            "riskScore": float,
            "explanation": str
        }

    Example:
        POST /charge {"amount": 1000, "currency": "USD", "source": "tok_visa", "email": "user@example.com"}
    """
    logger.debug(f"Charge received: amount={charge.amount} {charge.currency}")

    response = await pipeline.process(charge)

    return response.to_dict()
