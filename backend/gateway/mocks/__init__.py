"""
Simulated external collaborators for local runs and tests.
"""
from .explanation_generator import MockExplanationGenerator

__all__ = ["MockExplanationGenerator"]
