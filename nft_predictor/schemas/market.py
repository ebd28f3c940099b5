"""Input records produced upstream by the market data and AI analysis agents."""
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from nft_predictor.core.exceptions import InputValidationError

MarketSentiment = Literal["bullish", "bearish", "neutral"]


def parse_price(value: Any) -> float | None:
    """Read a price as a float, or ``None`` when it is absent or not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    @classmethod
    def field_default(cls, info: ValidationInfo) -> Any:
        return cls.model_fields[info.field_name].get_default(call_default_factory=True)


class MarketData(_Record):
    """Market snapshot for a collection.

    ``floor_price`` is never defaulted: anything that does not parse as a
    number is kept as ``None`` so the predictor can reject it.
    """

    name: str | None = None
    address: str | None = None
    floor_price: float | None = None
    volume_24h: float = 0.0
    market_cap: float = 0.0

    @field_validator("floor_price", mode="before")
    @classmethod
    def parse_floor_price(cls, value: Any) -> float | None:
        return parse_price(value)

    @field_validator("volume_24h", "market_cap", mode="before")
    @classmethod
    def default_when_null(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.field_default(info)
        return value


class ReasoningStep(_Record):
    factor: str | None = None
    impact: str | None = None
    confidence: float = 70.0
    explanation: str | None = None

    @field_validator("confidence", mode="before")
    @classmethod
    def default_when_null(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.field_default(info)
        return value


class AIAnalysis(_Record):
    """Output of the upstream AI analysis.

    ``market_sentiment`` is kept as given; anything other than a
    ``MarketSentiment`` value is scored like ``neutral``.
    """

    market_sentiment: str = "neutral"
    confidence_score: float = 70.0
    data_quality: float = 75.0
    reasoning_steps: list[ReasoningStep] = Field(
        default_factory=lambda: [ReasoningStep()]
    )

    @field_validator("market_sentiment", "confidence_score", "data_quality", mode="before")
    @classmethod
    def default_when_null(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.field_default(info)
        return value

    @field_validator("reasoning_steps", mode="before")
    @classmethod
    def at_least_one_step(cls, value: Any) -> Any:
        if value is None or (isinstance(value, (list, tuple)) and not value):
            return [{}]
        return value

    @property
    def sentiment_score(self) -> float:
        """Confidence of the leading reasoning step, scaled to 0-1."""
        return self.reasoning_steps[0].confidence / 100


@dataclass(frozen=True)
class NormalizedInputs:
    """Both input records with every default filled in."""
    market: MarketData
    analysis: AIAnalysis

    @property
    def base_price(self) -> float | None:
        return self.market.floor_price


def floor_price_of(market_data: Mapping[str, Any] | MarketData | None) -> Any:
    """The floor price as sent, read without parsing the rest of the payload."""
    if isinstance(market_data, MarketData):
        return market_data.floor_price
    if isinstance(market_data, Mapping):
        return market_data.get("floor_price")
    return None


RecordT = TypeVar("RecordT", bound=_Record)


def _parse(model: type[RecordT], payload: Any, source: str) -> RecordT:
    if isinstance(payload, model):
        return payload
    if payload is None:
        payload = {}
    if isinstance(payload, Mapping):
        payload = dict(payload)
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise InputValidationError.from_pydantic(source, e) from e


def normalize_inputs(
    market_data: Mapping[str, Any] | MarketData | None,
    ai_analysis: Mapping[str, Any] | AIAnalysis | None,
) -> NormalizedInputs:
    """
    Parse raw payloads into records with defaults applied.

    The caller's mappings are copied, never modified.

    Raises:
        InputValidationError: If either payload has a field of the wrong type.
    """
    return NormalizedInputs(
        market=_parse(MarketData, market_data, "market_data"),
        analysis=_parse(AIAnalysis, ai_analysis, "ai_analysis"),
    )
