"""
LLM Infrastructure

Model adapter contract, OpenAI chat client and rate-limit retry.
"""

from futuna.infrastructure.llm.llm_interfaces import ModelAdapter, ModelExchange
from futuna.infrastructure.llm.openai_client import OpenAIChatAdapter
from futuna.infrastructure.llm.retry import RateLimitRetryAdapter

__all__ = [
    "ModelAdapter",
    "ModelExchange",
    "OpenAIChatAdapter",
    "RateLimitRetryAdapter",
]
