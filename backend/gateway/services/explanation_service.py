"""
Explanation Service

Produces a human-readable explanation for every charge decision.

Lookup order:
1. Shared cache keyed by (amount, email, risk score, blocked)
2. External generator (Bedrock) with a bounded timeout, when configured
3. Deterministic local template

Every failure of the external generator converges on the template, so
explain() always returns a string.
"""
import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

from ..exceptions import ExplanationUnavailableError
from ..models.charges import ChargeRequest, Provider
from .bedrock_service import BedrockService

logger = logging.getLogger(__name__)


CacheKey = Tuple[int, str, float, bool]

LOW_RISK_BELOW = 0.3
MODERATE_RISK_BELOW = 0.7

PROMPT_TEMPLATE = """Generate a brief explanation for a payment decision:
Amount: ${amount:.2f} {currency}
Email: {email}
Risk Score: {risk_score:.2f}
{decision}

Explain why this decision was made based on the risk factors. Keep it under 50 words."""


# ============================================================================
# Cache
# ============================================================================

class ExplanationCache:
    """
    Thread-safe explanation store shared by all pipeline invocations.

    put() keeps the first text stored for a key and returns it, so two
    racing misses may both call the generator but every caller ends up
    with the same cached string.
    """

    def __init__(self):
        self._entries: Dict[CacheKey, str] = {}
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> Optional[str]:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: CacheKey, explanation: str) -> str:
        with self._lock:
            return self._entries.setdefault(key, explanation)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# ============================================================================
# Generators
# ============================================================================

class ExplanationGenerator(ABC):
    """External natural-language generator for decision explanations."""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """
        Blocking call returning the generated text.

        Raises:
            ExplanationUnavailableError: On transport failure or empty reply
        """


class BedrockExplanationGenerator(ExplanationGenerator):
    """Generates explanations with Claude via AWS Bedrock."""

    def __init__(
        self,
        bedrock: BedrockService,
        max_tokens: int = 100,
        temperature: float = 0.3,
    ):
        self.bedrock = bedrock
        self.max_tokens = max_tokens
        self.temperature = temperature

    def generate(self, prompt: str) -> str:
        try:
            response = self.bedrock.invoke_model(
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except RuntimeError as e:
            raise ExplanationUnavailableError(str(e)) from e

        text = self.bedrock.extract_text_from_content(response["content"])
        if not text.strip():
            raise ExplanationUnavailableError(
                "Empty explanation returned by model",
                details={"stop_reason": response.get("stop_reason")}
            )
        return text


# ============================================================================
# Templates
# ============================================================================

def risk_level(risk_score: float) -> str:
    if risk_score < LOW_RISK_BELOW:
        return "low"
    if risk_score < MODERATE_RISK_BELOW:
        return "moderate"
    return "high"


def build_fallback_explanation(
    request: ChargeRequest,
    risk_score: float,
    provider: Optional[Provider],
    blocked: bool
) -> str:
    """Deterministic explanation used whenever the generator is not."""
    level = risk_level(risk_score)

    if blocked:
        return f"Payment blocked due to {level} risk score ({risk_score:.2f}) from suspicious patterns."

    return (
        f"Payment routed to {provider} with {level} risk score ({risk_score:.2f}) "
        f"for ${request.amount / 100:.2f} transaction."
    )


def build_prompt(
    request: ChargeRequest,
    risk_score: float,
    provider: Optional[Provider],
    blocked: bool
) -> str:
    decision = "Decision: BLOCKED" if blocked else f"Decision: APPROVED via {provider}"
    return PROMPT_TEMPLATE.format(
        amount=request.amount / 100,
        currency=request.currency,
        email=request.email,
        risk_score=risk_score,
        decision=decision,
    )


# ============================================================================
# Service
# ============================================================================

class ExplanationService:
    """
    Cached explanation provider with external-service fallback.

    Args:
        cache: Shared explanation cache
        generator: External generator, or None to always use the template
        timeout_seconds: Bound on a single generator call
    """

    def __init__(
        self,
        cache: ExplanationCache,
        generator: Optional[ExplanationGenerator] = None,
        timeout_seconds: float = 5.0,
    ):
        self.cache = cache
        self.generator = generator
        self.timeout_seconds = timeout_seconds

    @staticmethod
    def cache_key(request: ChargeRequest, risk_score: float, blocked: bool) -> CacheKey:
        # Provider is intentionally not part of the key
        return (request.amount, request.email, risk_score, blocked)

    async def explain(
        self,
        request: ChargeRequest,
        risk_score: float,
        provider: Optional[Provider],
        blocked: bool
    ) -> str:
        """
        Explain a charge decision. Never raises.

        Returns:
            Cached, generated or template explanation
        """
        key = self.cache_key(request, risk_score, blocked)

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Explanation cache hit: amount={request.amount}, risk_score={risk_score}")
            return cached

        if self.generator is None:
            return self.cache.put(
                key, build_fallback_explanation(request, risk_score, provider, blocked)
            )

        prompt = build_prompt(request, risk_score, provider, blocked)
        try:
            explanation = await self._generate(prompt)
        except ExplanationUnavailableError as e:
            logger.warning(f"Explanation generation failed, using template: {e.message}")
            explanation = build_fallback_explanation(request, risk_score, provider, blocked)

        return self.cache.put(key, explanation)

    async def _generate(self, prompt: str) -> str:
        """
        Run the blocking generator in a worker thread with a timeout.

        A timed-out call keeps running in its thread; its result is discarded.
        """
        loop = asyncio.get_running_loop()
        try:
            text = await asyncio.wait_for(
                loop.run_in_executor(None, self.generator.generate, prompt),
                timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError:
            raise ExplanationUnavailableError(
                f"Explanation generation timed out after {self.timeout_seconds} seconds"
            )
        except ExplanationUnavailableError:
            raise
        except Exception as e:
            raise ExplanationUnavailableError(f"Explanation generation failed: {e}") from e

        if not isinstance(text, str) or not text.strip():
            raise ExplanationUnavailableError("Generator returned an empty explanation")
        return text
