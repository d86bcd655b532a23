"""
OpenAI Chat Completions Client
Async model adapter for OpenAI-compatible chat-completions endpoints
"""

import asyncio
import json
import logging
from datetime import datetime
from typing import Callable, Optional, Sequence, Type

import aiohttp

from futuna.config import OpenAISettings
from futuna.domain.exceptions import AuthError, ModelCallError, RateLimitedError, TransportError
from futuna.infrastructure.llm.llm_interfaces import ModelAdapter, ModelExchange
from futuna.infrastructure.llm.prompts import build_messages
from futuna.infrastructure.utils import safe_json_dumps


def error_for_status(status: int) -> Type[ModelCallError]:
    """Map an HTTP status to the pipeline error kind"""
    if status == 429:
        return RateLimitedError
    if status in (401, 403):
        return AuthError
    return TransportError


def extract_message_content(raw_response: str) -> Optional[str]:
    """Pull choices[0].message.content out of a chat-completions body"""
    try:
        body = json.loads(raw_response)
    except (TypeError, ValueError):
        return None
    if not isinstance(body, dict):
        return None
    choices = body.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return None
    message = choices[0].get("message") or {}
    content = message.get("content")
    return content if isinstance(content, str) else None


class OpenAIChatAdapter(ModelAdapter):
    """
    Async client for an OpenAI-compatible chat-completions API
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4o-mini",
        temperature: float = 0.2,
        timeout: int = 300,
        max_batch_size: int = 10,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.max_batch_size = max_batch_size
        self.logger = logging.getLogger(self.__class__.__name__)

        self._session = session
        self._owns_session = session is None

    @classmethod
    def from_settings(cls, settings: OpenAISettings) -> "OpenAIChatAdapter":
        return cls(
            api_key=settings.api_key,
            base_url=settings.base_url,
            model=settings.model,
            temperature=settings.temperature,
            timeout=settings.timeout,
            max_batch_size=settings.max_batch_size,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/chat/completions"

    async def __aenter__(self):
        """Async context manager entry"""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()

    async def connect(self):
        """Initialize HTTP session"""
        if not self._session:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True

    async def close(self):
        """Close HTTP session"""
        if self._session and self._owns_session:
            await self._session.close()
        self._session = None

    def build_request(self, symbols: Sequence[str]) -> dict:
        return {
            "model": self.model,
            "temperature": self.temperature,
            "messages": build_messages(symbols),
        }

    async def analyze(
        self, batch: Sequence[str], is_cancelled: Optional[Callable[[], bool]] = None
    ) -> ModelExchange:
        symbols = list(batch)
        if len(symbols) > self.max_batch_size:
            self.logger.warning(
                "Batch of %d exceeds max_batch_size=%d, truncating", len(symbols), self.max_batch_size
            )
            symbols = symbols[: self.max_batch_size]

        if not self.api_key:
            raise AuthError("OPENAI_API_KEY is not set", batch=symbols)

        if not self._session:
            await self.connect()

        raw_request = safe_json_dumps(self.build_request(symbols))
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        start_time = datetime.now()
        self.logger.info(
            "Sending to model API | model=%s | tickers=%s | request_chars=%d",
            self.model,
            ",".join(symbols),
            len(raw_request),
        )

        try:
            async with self._session.post(self.endpoint, data=raw_request, headers=headers) as response:
                raw_response = await response.text()
                if response.status != 200:
                    error_cls = error_for_status(response.status)
                    raise error_cls(
                        f"Model call failed: {raw_response[:300]}",
                        batch=symbols,
                        status_code=response.status,
                        endpoint=self.endpoint,
                    )
        except ModelCallError:
            raise
        except aiohttp.ClientError as e:
            raise TransportError(f"Connection error: {e}", batch=symbols, endpoint=self.endpoint) from e
        except asyncio.TimeoutError as e:
            raise TransportError("Timeout waiting for model response", batch=symbols, endpoint=self.endpoint) from e

        duration = (datetime.now() - start_time).total_seconds()

        output = extract_message_content(raw_response)
        if output is None:
            self.logger.warning("Response body has no message content | tickers=%s", ",".join(symbols))
            output = ""

        self.logger.info(
            "Received from model API | model=%s | tickers=%s | duration=%.2fs | output_chars=%d",
            self.model,
            ",".join(symbols),
            duration,
            len(output),
        )
        self.logger.debug("  - Content preview: %s...", output[:200])

        return ModelExchange(raw_request=raw_request, raw_response=raw_response, output=output, batch=symbols)
