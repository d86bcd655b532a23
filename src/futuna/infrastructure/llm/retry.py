"""
Rate-limit retry for model adapters.

Only errors flagged ``retryable`` (rate limiting) are retried, with a fixed
delay between attempts. Every other failure is terminal on first occurrence.
A retry is never started once the run has been cancelled.
"""

import asyncio
import logging
from typing import Callable, Optional, Sequence

from futuna.domain.exceptions import ModelCallError, RunCancelledError
from futuna.infrastructure.llm.llm_interfaces import ModelAdapter, ModelExchange

logger = logging.getLogger(__name__)


class RateLimitRetryAdapter(ModelAdapter):
    """Wraps another adapter and retries rate-limited calls"""

    def __init__(self, inner: ModelAdapter, attempts: int = 3, delay_seconds: float = 2.0):
        if attempts <= 0:
            raise ValueError("attempts must be positive")
        self.inner = inner
        self.attempts = attempts
        self.delay_seconds = delay_seconds

    async def analyze(
        self, batch: Sequence[str], is_cancelled: Optional[Callable[[], bool]] = None
    ) -> ModelExchange:
        for attempt in range(self.attempts):
            if attempt > 0 and is_cancelled is not None and is_cancelled():
                logger.info(f"Run cancelled, abandoning retry {attempt + 1}/{self.attempts}")
                raise RunCancelledError(f"Run cancelled before retry {attempt + 1}", batch=batch)

            try:
                return await self.inner.analyze(batch, is_cancelled=is_cancelled)
            except ModelCallError as e:
                if not e.retryable:
                    raise
                if attempt == self.attempts - 1:
                    logger.error(f"Rate limited after {self.attempts} attempts: {e}")
                    raise

                logger.warning(
                    f"Rate limited on attempt {attempt + 1}/{self.attempts}, "
                    f"retrying in {self.delay_seconds}s: {e}"
                )
                await asyncio.sleep(self.delay_seconds)

    async def close(self) -> None:
        await self.inner.close()
