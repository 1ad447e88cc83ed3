"""
Gateway Configuration Module

Loads environment variables for backend configuration.
"""
from pydantic_settings import BaseSettings
from typing import Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Explanation Notes:
    - External explanations are off unless EXPLANATIONS_ENABLED is set
    - With explanations off every decision uses the local template
    - The timeout bounds each Bedrock call made by the charge pipeline
    """

    # Explanation generation
    explanations_enabled: bool = False
    explanation_timeout_seconds: float = 5.0
    explanation_max_tokens: int = 100
    explanation_temperature: float = 0.3

    # AWS Bedrock Configuration
    aws_region: str = "us-east-1"  # Configurable via AWS_REGION environment variable
    aws_bedrock_model_id: str = "us.anthropic.claude-sonnet-4-20250514-v1:0"

    # Demo Configuration
    demo_mode: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
