"""
Transactions API Endpoints

Read access to the in-memory transaction ledger.
"""
from fastapi import APIRouter, HTTPException, Depends
from typing import Dict, Any
import logging

from ..services.transaction_ledger import TransactionLedger
from .dependencies import get_ledger

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def list_transactions_endpoint(
    ledger: TransactionLedger = Depends(get_ledger)
) -> Dict[str, Any]:
    """
    Get every processed transaction, oldest first.

    Returns:
        {
            "transactions": [
                {"id": str, "timestamp": ISO-8601, "request": {...}, "response": {...}}
            ]
        }
    """
    transactions = ledger.snapshot()
    logger.debug(f"Retrieving {len(transactions)} transactions")

    return {
        "transactions": [t.to_dict() for t in transactions]
    }


@router.get("/{transaction_id}")
async def get_transaction_endpoint(
    transaction_id: str,
    ledger: TransactionLedger = Depends(get_ledger)
) -> Dict[str, Any]:
    """
    Get a single transaction.

    Example:
        GET /transactions/txn_9f2c4e1ab7d84d3c9a51f0e2b6c7d8e9
    """
    transaction = ledger.get(transaction_id)

    if not transaction:
        raise HTTPException(
            status_code=404,
            detail={
                "error_code": "transaction_not_found",
                "message": f"No transaction found with ID: {transaction_id}"
            }
        )

    return transaction.to_dict()
