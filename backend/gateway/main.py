"""
Mini Payment Gateway - FastAPI Application

Simulated payment gateway front door: scores charges for fraud risk,
blocks or routes them, explains each decision and records it in an
in-memory ledger.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
import logging

from .config import Settings, settings
from .exceptions import GatewayError
from .services.bedrock_service import BedrockService
from .services.charge_service import ChargePipeline
from .services.explanation_service import (
    BedrockExplanationGenerator,
    ExplanationCache,
    ExplanationGenerator,
    ExplanationService,
)
from .services.risk_scorer import RiskScorer
from .services.transaction_ledger import TransactionLedger
from .api.charges import router as charges_router
from .api.transactions import router as transactions_router


# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def build_explanation_generator(config: Settings) -> Optional[ExplanationGenerator]:
    """
    Create the Bedrock generator when external explanations are enabled.

    Returns None (template-only explanations) when disabled, or when the
    client cannot be created in demo mode.
    """
    if not config.explanations_enabled:
        logger.info("External explanations disabled, using local templates")
        return None

    try:
        bedrock = BedrockService(
            region=config.aws_region,
            model_id=config.aws_bedrock_model_id,
            timeout_seconds=config.explanation_timeout_seconds,
        )
    except RuntimeError as e:
        logger.error(f"Failed to initialize Bedrock service: {e}")
        if not config.demo_mode:
            raise
        logger.warning("Continuing without Bedrock in demo mode")
        return None

    return BedrockExplanationGenerator(
        bedrock,
        max_tokens=config.explanation_max_tokens,
        temperature=config.explanation_temperature,
    )


def build_pipeline(config: Settings) -> ChargePipeline:
    """Construct the shared services once per process."""
    explanations = ExplanationService(
        cache=ExplanationCache(),
        generator=build_explanation_generator(config),
        timeout_seconds=config.explanation_timeout_seconds,
    )
    return ChargePipeline(
        scorer=RiskScorer(),
        explanations=explanations,
        ledger=TransactionLedger(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup builds the charge pipeline unless one was injected.
    """
    logger.info("Starting payment gateway...")
    logger.info(f"Demo mode: {settings.demo_mode}")

    if getattr(app.state, "pipeline", None) is None:
        app.state.pipeline = build_pipeline(settings)

    logger.info("Server startup complete")

    yield

    logger.info(f"Shutting down payment gateway, {len(app.state.pipeline.ledger)} transactions processed")


def create_app(pipeline: Optional[ChargePipeline] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        pipeline: Pre-built pipeline (tests); built at startup when omitted
    """
    app = FastAPI(
        title="Mini Payment Gateway",
        description="Simulated charge processing with fraud scoring and explanations",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.pipeline = pipeline

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """
        Reject malformed charge requests with 400 Bad Request.

        The pipeline never sees a request that fails here.
        """
        details = [error.get("msg", "") for error in exc.errors()]
        logger.warning(f"Invalid request: {details}")

        return JSONResponse(
            status_code=400,
            content=jsonable_encoder({
                "error_code": "invalid_request",
                "message": "Invalid request",
                "details": details
            })
        )

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        """
        Handle gateway errors that escaped the pipeline.

        Only invariant violations get here, so they are server errors.
        """
        logger.error(
            f"Gateway error: {exc.error_code} - {exc.message}",
            extra={"details": exc.details}
        )

        return JSONResponse(status_code=500, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        """
        Catch-all handler for unexpected errors.

        Logs full exception for debugging but returns generic message to client.
        """
        logger.error(f"Unexpected error: {str(exc)}", exc_info=True)

        return JSONResponse(
            status_code=500,
            content={
                "error_code": "internal_error",
                "message": "An unexpected error occurred",
                "details": {"error_type": type(exc).__name__} if settings.demo_mode else {}
            }
        )

    @app.get("/health")
    async def health_check():
        """Health check endpoint for monitoring and load balancers."""
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    app.include_router(charges_router, tags=["Charges"])
    app.include_router(transactions_router, prefix="/transactions", tags=["Transactions"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "gateway.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )
