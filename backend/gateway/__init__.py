"""
Mini Payment Gateway

Simulated charge processing: fraud risk scoring, provider routing,
decision explanations and an in-memory transaction ledger.
"""

__version__ = "0.1.0"
