#!/usr/bin/env python3
"""
Futuna - Model Adapter Interfaces
Copyright (c) 2025 Vijaykumar Singh
Licensed under the Apache License 2.0

Model Adapter Interfaces and Data Models
Defines the contract between the analysis pipeline and a language model
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence


# ============================================================================
# Data Models
# ============================================================================


@dataclass
class ModelExchange:
    """One completed model call: what was sent, what came back, and the text"""

    raw_request: str
    raw_response: str
    output: str
    batch: List[str] = field(default_factory=list)


# ============================================================================
# Adapter Interface
# ============================================================================


class ModelAdapter(ABC):
    """Boundary to a language model that analyzes a batch of tickers"""

    @abstractmethod
    async def analyze(
        self, batch: Sequence[str], is_cancelled: Optional[Callable[[], bool]] = None
    ) -> ModelExchange:
        """
        Request an analysis of the given symbols.

        ``is_cancelled`` reports whether the surrounding run was cancelled;
        adapters that make more than one outbound call check it before each
        further call.

        Raises:
            RateLimitedError: upstream throttled the call
            TransportError: connection, timeout or unexpected HTTP status
            AuthError: missing or rejected credentials
            RunCancelledError: the run was cancelled between outbound calls
        """
        pass

    async def close(self) -> None:
        """Release network resources held by the adapter"""
        return None
