"""
Completion client - thin wrapper around the Anthropic Messages API.

Search and tagging only need "system instruction + user prompt -> text",
so both depend on this wrapper rather than on the SDK directly.
"""

import logging
from typing import Optional

import anthropic

from bridgeyou.config import CompletionConfig
from bridgeyou.error_handling import CompletionError

logger = logging.getLogger(__name__)


class CompletionClient:
    """Chat-style completion returning a single text block"""

    def __init__(self, config: CompletionConfig, client: Optional[anthropic.AsyncAnthropic] = None):
        if client is None and not config.is_configured:
            raise CompletionError("ANTHROPIC_API_KEY is not set")
        self.config = config
        self.client = client or anthropic.AsyncAnthropic(api_key=config.api_key)

    @classmethod
    def from_config(cls, config: CompletionConfig) -> Optional["CompletionClient"]:
        """Build a client, or return None when no API key is configured."""
        if not config.is_configured:
            logger.warning("Completion service not configured, AI features disabled")
            return None
        return cls(config)

    async def complete(
        self,
        system: str,
        prompt: str,
        temperature: float,
        max_tokens: Optional[int] = None
    ) -> str:
        """
        Send one prompt and return the stripped text of the first block.

        Raises:
            CompletionError: on API failure or an empty response
        """
        try:
            response = await self.client.messages.create(
                model=self.config.model,
                max_tokens=max_tokens or self.config.max_tokens,
                temperature=temperature,
                system=system,
                messages=[{"role": "user", "content": prompt}]
            )
        except anthropic.APIError as e:
            raise CompletionError(f"Completion request failed: {e}") from e

        if not response.content:
            raise CompletionError("No response from completion service")

        text = getattr(response.content[0], "text", "") or ""
        text = text.strip()
        if not text:
            raise CompletionError("Empty completion")
        return text


def extract_json_block(text: str) -> str:
    """Strip a markdown code fence wrapped around a JSON payload."""
    if '```json' in text:
        return text.split('```json')[1].split('```')[0].strip()
    if '```' in text:
        return text.split('```')[1].split('```')[0].strip()
    return text.strip()
