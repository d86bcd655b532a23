"""
Pipeline error taxonomy.

Every failure a batch can hit during an analysis run maps onto one of these
classes. Model call failures carry the HTTP context, payload and persistence
failures carry the batch they belong to.
"""

from typing import Optional, Sequence


class FutunaError(Exception):
    """Base exception for analysis pipeline errors"""

    def __init__(
        self,
        message: str,
        batch: Optional[Sequence[str]] = None,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
    ):
        self.batch = list(batch) if batch else []
        self.status_code = status_code
        self.endpoint = endpoint
        self.detail = message

        parts = []
        if self.batch:
            parts.append(f"batch={','.join(self.batch)}")
        if status_code:
            parts.append(f"status={status_code}")
        if endpoint:
            parts.append(f"endpoint={endpoint}")

        super().__init__(f"{message} ({', '.join(parts)})" if parts else message)


class ModelCallError(FutunaError):
    """The language model call did not produce a usable response"""

    retryable = False


class RateLimitedError(ModelCallError):
    """Upstream refused the call because of rate limiting (HTTP 429)"""

    retryable = True


class TransportError(ModelCallError):
    """Connection, timeout or unexpected HTTP status from the model endpoint"""

    pass


class AuthError(ModelCallError):
    """Credentials missing or rejected (HTTP 401/403)"""

    pass


class MalformedPayloadError(FutunaError):
    """Model output could not be decoded into an analysis payload"""

    pass


class ExtractionError(MalformedPayloadError):
    """Model output did not contain a JSON object at all"""

    pass


class PersistenceError(FutunaError):
    """Storage unavailable or a write violated a constraint"""

    pass


class RunCancelledError(FutunaError):
    """Batch skipped because the run was cancelled or its deadline passed"""

    pass


__all__ = [
    "FutunaError",
    "ModelCallError",
    "RateLimitedError",
    "TransportError",
    "AuthError",
    "MalformedPayloadError",
    "ExtractionError",
    "PersistenceError",
    "RunCancelledError",
]
