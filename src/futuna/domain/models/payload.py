"""
Structured payload the analysis prompt asks the model to return.

The producer is a generative model, not a contract-bound system, so these
models are lenient: optional fields default, confidences are coerced and
clamped, and enum-like values stay plain strings unless validation runs with
``context={"strict_enums": True}``. Only the ticker identity is mandatory.
"""

from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from futuna.domain.models.analysis import Recommendation, Stance

RECOMMENDATION_VALUES = {member.value for member in Recommendation}
STANCE_VALUES = {member.value for member in Stance}


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _strict(info: ValidationInfo) -> bool:
    return bool(info.context and info.context.get("strict_enums"))


class Assessment(BaseModel):
    """Recommendation with confidence and rationale for one horizon"""

    model_config = ConfigDict(extra="ignore")

    recommendation: str = Field(default="", description="ACCUMULATE, HOLD or AVOID")
    confidence: Optional[int] = Field(default=None, description="Confidence in [0, 100]")
    reason: str = Field(default="", validation_alias=AliasChoices("reason", "justification"))

    @field_validator("recommendation", mode="before")
    @classmethod
    def normalize_recommendation(cls, v: Any, info: ValidationInfo) -> str:
        value = _coerce_text(v).upper()
        if _strict(info) and value not in RECOMMENDATION_VALUES:
            raise ValueError(f"unknown recommendation {value!r}")
        return value

    @field_validator("confidence", mode="before")
    @classmethod
    def coerce_confidence(cls, v: Any) -> Optional[int]:
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, str):
            v = v.strip().rstrip("%").strip()
        try:
            number = float(v)
        except (TypeError, ValueError):
            return None
        if number != number:  # NaN
            return None
        return int(round(min(max(number, 0.0), 100.0)))

    @field_validator("reason", mode="before")
    @classmethod
    def coerce_reason(cls, v: Any) -> str:
        return _coerce_text(v)

    def summary(self) -> str:
        """Stored text form: '<RECOMMENDATION> - <reason>'"""
        return f"{self.recommendation} - {self.reason}"


class Strategy(BaseModel):
    """Stance of one named trading strategy"""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    stance: str = ""
    note: str = ""

    @field_validator("name", "note", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return _coerce_text(v)

    @field_validator("stance", mode="before")
    @classmethod
    def normalize_stance(cls, v: Any, info: ValidationInfo) -> str:
        value = _coerce_text(v).upper()
        if _strict(info) and value not in STANCE_VALUES:
            raise ValueError(f"unknown stance {value!r}")
        return value


class TickerAnalysis(BaseModel):
    """Model verdict for a single ticker"""

    model_config = ConfigDict(extra="ignore")

    ticker: str = Field(..., description="Ticker symbol, required")
    short_term: Assessment = Field(default_factory=Assessment)
    long_term: Assessment = Field(default_factory=Assessment)
    strategies: List[Strategy] = Field(default_factory=list)
    overall: Assessment = Field(
        default_factory=Assessment,
        validation_alias=AliasChoices("overall", "overall_recommendation"),
    )

    @field_validator("ticker", mode="before")
    @classmethod
    def normalize_ticker(cls, v: Any) -> str:
        symbol = _coerce_text(v).upper()
        if not symbol:
            raise ValueError("ticker must not be empty")
        return symbol

    @field_validator("short_term", "long_term", "overall", mode="before")
    @classmethod
    def default_assessment(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("strategies", mode="before")
    @classmethod
    def normalize_strategies(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, list):
            return [{"name": item} if isinstance(item, str) else item for item in v]
        return v


class AnalysisBatchPayload(BaseModel):
    """Everything the model returned for one batch"""

    model_config = ConfigDict(extra="ignore")

    as_of: Optional[str] = Field(default=None, description="Timestamp the analysis refers to")
    tickers: List[TickerAnalysis] = Field(..., description="One entry per analyzed ticker")
    sources: List[str] = Field(default_factory=list, description="Reference URLs")

    @field_validator("as_of", mode="before")
    @classmethod
    def coerce_as_of(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return str(v).strip()

    @field_validator("sources", mode="before")
    @classmethod
    def coerce_sources(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        if isinstance(v, list):
            return [str(item).strip() for item in v if item is not None and str(item).strip()]
        return v

    @property
    def symbols(self) -> List[str]:
        return [item.ticker for item in self.tickers]
