"""
Risk Scoring

Additive heuristic fraud score for a charge request. Each signal is
checked independently; contributions are summed and capped at 1.0.
"""
import logging

from ..models.charges import ChargeRequest

logger = logging.getLogger(__name__)


# Amount thresholds in minor units (50000 cents = $500)
LARGE_AMOUNT = 50_000
VERY_LARGE_AMOUNT = 100_000

LARGE_AMOUNT_WEIGHT = 0.3
VERY_LARGE_AMOUNT_WEIGHT = 0.2
SUSPICIOUS_DOMAIN_WEIGHT = 0.4
SUSPICIOUS_PATTERN_WEIGHT = 0.3

# Substring matches: domains against the part after "@", patterns against
# the whole lower-cased address
SUSPICIOUS_DOMAINS = (".ru", "test.com", ".tk", ".ml", ".ga")
SUSPICIOUS_PATTERNS = ("temp", "fake")

MAX_SCORE = 1.0
BLOCK_THRESHOLD = 0.5


class RiskScorer:
    """
    Stateless rule-based risk scorer.

    The score depends only on the request's amount and email, so the same
    pair always yields the same score regardless of call history.
    """

    def score(self, request: ChargeRequest) -> float:
        """
        Calculate a risk score in [0.0, 1.0].

        Signals:
        - Large amount (> 50 000): +0.3
        - Suspicious substring in the email's domain part: +0.4
        - Very large amount (> 100 000), on top of large: +0.2
        - "temp" or "fake" anywhere in the email: +0.3
        """
        email = request.email.lower()
        domain_part = email.rsplit("@", 1)[-1]
        score = 0.0

        if request.amount > LARGE_AMOUNT:
            score += LARGE_AMOUNT_WEIGHT

        if any(domain in domain_part for domain in SUSPICIOUS_DOMAINS):
            score += SUSPICIOUS_DOMAIN_WEIGHT

        if request.amount > VERY_LARGE_AMOUNT:
            score += VERY_LARGE_AMOUNT_WEIGHT

        if any(pattern in email for pattern in SUSPICIOUS_PATTERNS):
            score += SUSPICIOUS_PATTERN_WEIGHT

        return min(score, MAX_SCORE)


def is_blocked(risk_score: float) -> bool:
    """Block at or above the threshold; 0.5 itself blocks."""
    return risk_score >= BLOCK_THRESHOLD
