"""
Mock Explanation Generator

Deterministic stand-in for the Bedrock explanation generator. Lets the
charge pipeline run without network access or AWS credentials.

Mock Behavior:
- Replies with a fixed text, or "Mock explanation #<n>" when none is given
- Optional delay simulates a slow model (for timeout handling)
- Optional error simulates a transport failure
- Every prompt is recorded for inspection
"""
import threading
import time
from typing import List, Optional

from ..exceptions import ExplanationUnavailableError
from ..services.explanation_service import ExplanationGenerator


class MockExplanationGenerator(ExplanationGenerator):

    def __init__(
        self,
        reply: Optional[str] = None,
        delay_seconds: float = 0.0,
        error: Optional[Exception] = None,
    ):
        self.reply = reply
        self.delay_seconds = delay_seconds
        self.error = error
        self.prompts: List[str] = []
        self._lock = threading.Lock()

    @property
    def call_count(self) -> int:
        with self._lock:
            return len(self.prompts)

    def generate(self, prompt: str) -> str:
        with self._lock:
            self.prompts.append(prompt)
            call_number = len(self.prompts)

        if self.delay_seconds:
            time.sleep(self.delay_seconds)

        if self.error is not None:
            raise self.error

        if self.reply is None:
            return f"Mock explanation #{call_number}"
        return self.reply


def failing_generator(message: str = "Simulated transport failure") -> MockExplanationGenerator:
    """Generator whose every call fails."""
    return MockExplanationGenerator(error=ExplanationUnavailableError(message))
