"""
Shared service lookups for API routes.

Services are built once in the application lifespan and kept on app.state.
"""
from fastapi import Request

from ..services.charge_service import ChargePipeline
from ..services.transaction_ledger import TransactionLedger


def get_pipeline(request: Request) -> ChargePipeline:
    return request.app.state.pipeline


def get_ledger(request: Request) -> TransactionLedger:
    return request.app.state.pipeline.ledger
