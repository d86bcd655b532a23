"""
Decode and shape-validate the JSON recovered from a model response.
"""

import json
import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from dateutil import parser as date_parser
from pydantic import ValidationError

from futuna.domain.exceptions import ExtractionError, MalformedPayloadError
from futuna.domain.models import AnalysisBatchPayload

logger = logging.getLogger(__name__)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp or date, None when unusable"""
    if not value:
        return None
    try:
        return date_parser.isoparse(value)
    except (ValueError, OverflowError, TypeError):
        return None


class PayloadValidator:
    """
    Turns extracted JSON text into an AnalysisBatchPayload.

    Recommendation and stance values pass through as strings unless
    ``strict_enums`` is set, in which case unknown values reject the batch.
    """

    def __init__(self, strict_enums: bool = False, clock: Callable[[], datetime] = datetime.now):
        self.strict_enums = strict_enums
        self.clock = clock

    def parse(self, json_text: str, batch: Optional[Sequence[str]] = None) -> AnalysisBatchPayload:
        """
        Decode the payload.

        Raises:
            ExtractionError: the text never contained a JSON object
            MalformedPayloadError: invalid JSON or a shape violation
        """
        try:
            data = json.loads(json_text)
        except (TypeError, ValueError) as e:
            if "{" not in (json_text or ""):
                raise ExtractionError("No JSON object in model output", batch=batch) from e
            raise MalformedPayloadError(f"Invalid JSON in model output: {e}", batch=batch) from e

        if not isinstance(data, dict):
            raise MalformedPayloadError(f"Expected a JSON object, got {type(data).__name__}", batch=batch)

        try:
            payload = AnalysisBatchPayload.model_validate(data, context={"strict_enums": self.strict_enums})
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()[:5]
            )
            raise MalformedPayloadError(f"Payload failed validation: {problems}", batch=batch) from e

        if batch:
            missing = sorted(set(s.upper() for s in batch) - set(payload.symbols))
            if missing:
                logger.warning("Payload is missing tickers: %s", ",".join(missing))

        return payload

    def analysis_date(self, payload: AnalysisBatchPayload) -> date:
        """
        Day key for every row of the batch.

        The calendar day is taken as written in ``as_of``; an unparsable
        timestamp falls back to the current processing time.
        """
        timestamp = parse_timestamp(payload.as_of)
        if timestamp is None:
            logger.warning(f"Unparsable as_of {payload.as_of!r}, using processing time")
            timestamp = self.clock()
        return timestamp.date()
