"""
Provider Routing

Selects a simulated downstream provider for an accepted charge.
"""
from ..exceptions import RoutingContractError
from ..models.charges import PROVIDER_A, PROVIDER_B, Provider
from .risk_scorer import BLOCK_THRESHOLD

# Below this score a charge goes to ProviderA
LOW_RISK_THRESHOLD = 0.3


def route_provider(risk_score: float) -> Provider:
    """
    Route an accepted charge by risk.

    Args:
        risk_score: Score of a charge that was not blocked

    Returns:
        ProviderA for low risk (< 0.3), ProviderB for moderate risk

    Raises:
        RoutingContractError: If called with a score that must be blocked
    """
    if risk_score >= BLOCK_THRESHOLD:
        raise RoutingContractError(
            f"Cannot route blocked risk score {risk_score}",
            details={"risk_score": risk_score, "block_threshold": BLOCK_THRESHOLD}
        )

    return PROVIDER_A if risk_score < LOW_RISK_THRESHOLD else PROVIDER_B
