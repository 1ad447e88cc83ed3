"""
AWS Bedrock Service for Claude Model Invocation

Thin non-streaming client used to generate charge decision explanations.
Retries are disabled and the read timeout follows the explanation timeout,
so a slow model never holds a worker thread much past the pipeline's bound.
"""
import json
import boto3
from botocore.config import Config
from typing import Dict, Any, Optional
import logging
from botocore.exceptions import ClientError, BotoCoreError


logger = logging.getLogger(__name__)


class BedrockService:
    """
    AWS Bedrock client wrapper for Claude model invocation.
    """

    def __init__(self, region: str, model_id: str, timeout_seconds: float):
        """
        Initialize Bedrock client with configured region and model.

        Raises:
            RuntimeError: If client initialization fails
        """
        try:
            self.client = boto3.client(
                service_name='bedrock-runtime',
                region_name=region,
                config=Config(
                    connect_timeout=timeout_seconds,
                    read_timeout=timeout_seconds,
                    retries={"total_max_attempts": 1, "mode": "standard"},
                ),
            )
            self.model_id = model_id
            logger.info(f"Bedrock client initialized: region={region}, model={self.model_id}")
        except Exception as e:
            logger.error(f"Failed to initialize Bedrock client: {e}")
            raise RuntimeError(f"Bedrock initialization failed: {e}")

    def invoke_model(
        self,
        messages: list[Dict[str, Any]],
        system: Optional[str] = None,
        max_tokens: int = 100,
        temperature: float = 0.3,
    ) -> Dict[str, Any]:
        """
        Invoke Claude model with non-streaming request.

        Args:
            messages: List of message dicts with 'role' and 'content'
            system: Optional system prompt
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature (0.0-1.0)

        Returns:
            Model response dict with 'content', 'stop_reason', 'usage'

        Raises:
            RuntimeError: If invocation fails
        """
        try:
            # Build request body per Bedrock Claude API format
            body = {
                "anthropic_version": "bedrock-2023-05-31",
                "messages": messages,
                "max_tokens": max_tokens,
                "temperature": temperature,
            }

            if system:
                body["system"] = system

            response = self.client.invoke_model(
                modelId=self.model_id,
                body=json.dumps(body),
                contentType="application/json",
                accept="application/json"
            )

            response_body = json.loads(response['body'].read())

            return {
                "content": response_body.get("content", []),
                "stop_reason": response_body.get("stop_reason"),
                "usage": response_body.get("usage", {}),
            }

        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', 'Unknown')
            error_message = e.response.get('Error', {}).get('Message', str(e))
            logger.error(f"Bedrock ClientError: {error_code} - {error_message}")
            raise RuntimeError(f"Model invocation failed: {error_code} - {error_message}")

        except BotoCoreError as e:
            logger.error(f"Bedrock BotoCoreError: {e}")
            raise RuntimeError(f"Bedrock communication error: {e}")

        except Exception as e:
            logger.error(f"Unexpected error in invoke_model: {e}")
            raise RuntimeError(f"Model invocation failed: {e}")

    def extract_text_from_content(self, content: list[Dict[str, Any]]) -> str:
        """
        Extract text from Claude's content blocks.

        Args:
            content: List of content blocks from Claude response

        Returns:
            Concatenated text from all text blocks
        """
        text_parts = []
        for block in content:
            if block.get("type") == "text":
                text_parts.append(block.get("text", ""))
        return "".join(text_parts)
