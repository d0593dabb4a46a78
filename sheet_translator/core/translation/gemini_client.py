"""
Gemini Client - Interfaces with Gemini via OpenRouter.
Sends a single prompt per request with fixed generation parameters.
"""

import asyncio
import logging
from typing import Dict, Optional, Any
import httpx
from datetime import datetime, timedelta, timezone

from ..errors import TranslationError

logger = logging.getLogger(__name__)

GENERATION_CONFIG = {
    "temperature": 1,
    "top_p": 0.95,
    "top_k": 40,
    "max_tokens": 8192,
}


class GeminiClient:
    """
    Client for Google Gemini AI via the OpenRouter chat completions API.
    """

    def __init__(self, api_key: str, base_url: str = "https://openrouter.ai/api/v1",
                 model: str = "google/gemini-flash-1.5-8b", timeout: int = 120,
                 requests_per_minute: int = 60,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.transport = transport

        # Rate limiting
        self.requests_per_minute = requests_per_minute
        self.request_count = 0
        self.window_start = datetime.now(timezone.utc)

        self.headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "X-Title": "Spreadsheet Translation Pipeline"
        }

    async def complete(self, prompt: str) -> str:
        """
        Send one prompt and return the raw completion text.

        Args:
            prompt: Full prompt text, sent as a single user message

        Returns:
            Text content of the first choice

        Raises:
            TranslationError: transport failure, non-200 status or
                a response body without message content
        """
        await self._apply_rate_limit()

        request_data = {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": prompt
                }
            ],
            **GENERATION_CONFIG
        }

        try:
            async with self._client() as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    headers=self.headers,
                    json=request_data
                )
        except httpx.HTTPError as e:
            raise TranslationError(f"Translation request failed: {e}") from e

        if response.status_code != 200:
            raise TranslationError(
                f"Translation API error: {response.status_code} - {response.text}"
            )

        try:
            response_data = response.json()
        except ValueError as e:
            raise TranslationError(f"Completion body is not JSON: {e}") from e

        return self._parse_completion(response_data)

    def _parse_completion(self, response_data: Dict[str, Any]) -> str:
        try:
            content = response_data['choices'][0]['message']['content']
        except (KeyError, IndexError, TypeError) as e:
            raise TranslationError(f"Unexpected completion payload: {e}") from e

        if content is None:
            return ""
        if not isinstance(content, str):
            raise TranslationError(f"Completion content is not text: {type(content).__name__}")

        usage = response_data.get('usage') or {}
        if isinstance(usage, dict) and usage:
            logger.debug(f"Completion used {usage.get('total_tokens', 0)} tokens")
        return content

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def _apply_rate_limit(self):
        """Apply rate limiting to API requests."""
        now = datetime.now(timezone.utc)

        # Reset window if needed
        if now - self.window_start > timedelta(minutes=1):
            self.request_count = 0
            self.window_start = now

        if self.request_count >= self.requests_per_minute:
            wait_time = 60 - (now - self.window_start).total_seconds()
            if wait_time > 0:
                logger.info(f"Rate limit reached, waiting {wait_time:.1f}s")
                await asyncio.sleep(wait_time)
            self.request_count = 0
            self.window_start = datetime.now(timezone.utc)

        self.request_count += 1

    async def health_check(self) -> bool:
        """
        Check if the OpenRouter API is accessible.

        Returns:
            True if API is accessible, False otherwise
        """
        try:
            async with self._client() as client:
                response = await client.get(
                    f"{self.base_url}/models",
                    headers={"Authorization": f"Bearer {self.api_key}"}
                )
                return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning(f"Model health check failed: {e}")
            return False
