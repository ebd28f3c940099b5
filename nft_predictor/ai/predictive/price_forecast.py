"""
Multi-timeframe price prediction for NFT collections.

Blends the market snapshot with the upstream AI analysis through small
lookup tables:
- Base change by market sentiment and timeframe
- Volume factor (liquidity amplifies or dampens the move)
- Sentiment factor (reasoning confidence, stronger on short timeframes)
- Bounded random noise for market unpredictability

DISCLAIMER: Predictions are heuristic estimates for informational purposes ONLY.
They are NOT investment recommendations.
"""
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
import math
from typing import Any, Optional
import numpy as np
import structlog

from nft_predictor.core.config import settings
from nft_predictor.core.exceptions import InputValidationError, InvalidBasePriceError
from nft_predictor.schemas.market import (
    AIAnalysis,
    MarketData,
    MarketSentiment,
    NormalizedInputs,
    floor_price_of,
    normalize_inputs,
    parse_price,
)

logger = structlog.get_logger()

# Uniform float in [0, 1)
RandomSource = Callable[[], float]

TIMEFRAMES: tuple[str, ...] = ("24h", "7d", "30d")

INVALID_BASE_PRICE_MESSAGE = (
    "Invalid or missing base price for prediction. No fallback allowed."
)

MAX_PERCENTAGE_CHANGE = 30.0
MIN_TARGET_RATIO = 0.5
MAX_TARGET_RATIO = 2.0


@dataclass(frozen=True)
class TimeframeFactors:
    """Tuning for one timeframe.

    Only ``noise_amplitude`` feeds the scoring; the other weights describe
    the timeframe and are not read by any formula.
    """
    volatility: float
    sentiment_weight: float
    volume_weight: float
    noise_amplitude: float


TIMEFRAME_FACTORS: dict[str, TimeframeFactors] = {
    "24h": TimeframeFactors(
        volatility=1.5,
        sentiment_weight=0.8,
        volume_weight=0.9,
        noise_amplitude=3.0,
    ),
    "7d": TimeframeFactors(
        volatility=1.2,
        sentiment_weight=0.6,
        volume_weight=0.7,
        noise_amplitude=5.0,
    ),
    "30d": TimeframeFactors(
        volatility=1.0,
        sentiment_weight=0.4,
        volume_weight=0.5,
        noise_amplitude=8.0,
    ),
}

# Percent change by sentiment and timeframe
BASE_CHANGES: dict[MarketSentiment, dict[str, float]] = {
    "bullish": {"24h": 3.0, "7d": 5.0, "30d": 8.0},
    "bearish": {"24h": -2.5, "7d": -6.0, "30d": -12.0},
    "neutral": {"24h": 0.0, "7d": -1.0, "30d": -2.0},
}

# Confidence decreases with longer timeframes
TIMEFRAME_CONFIDENCE_PENALTY: dict[str, int] = {
    "24h": 0,
    "7d": -10,
    "30d": -20,
}
UNKNOWN_TIMEFRAME_PENALTY = -15


@dataclass(frozen=True)
class TimeframePrediction:
    """Price prediction for a single timeframe."""
    timeframe: str
    direction: str  # "up", "down", "stable"
    percentage_change: float  # -30 to 30
    confidence: int  # 30-95
    price_target: float

    @property
    def degraded(self) -> bool:
        return False

    def to_dict(self) -> dict:
        return {
            "direction": self.direction,
            "percentage_change": self.percentage_change,
            "confidence": self.confidence,
            "price_target": self.price_target,
        }


@dataclass(frozen=True)
class DegradedPrediction(TimeframePrediction):
    """Neutral placeholder for a timeframe that could not be computed.

    The values are safe defaults, not a forecast; ``error`` says why.
    """
    error: str = ""

    @property
    def degraded(self) -> bool:
        return True

    @classmethod
    def neutral(
        cls,
        timeframe: str,
        price_target: float,
        error: str,
    ) -> "DegradedPrediction":
        return cls(
            timeframe=timeframe,
            direction="stable",
            percentage_change=0.0,
            confidence=50,
            price_target=price_target,
            error=error,
        )

    def to_dict(self) -> dict:
        return {**super().to_dict(), "error": self.error}


@dataclass
class PredictionBundle:
    """Predictions for every timeframe, or the reason there are none."""
    success: bool
    predictions: dict[str, TimeframePrediction] = field(default_factory=dict)
    overall_confidence: Optional[int] = None  # 40-90
    base_price: Optional[float] = None
    error: Optional[str] = None
    inputs: Optional[NormalizedInputs] = field(default=None, repr=False)

    @classmethod
    def failure(cls, error: str) -> "PredictionBundle":
        return cls(success=False, error=error)

    @property
    def degraded_timeframes(self) -> list[str]:
        return [tf for tf, p in self.predictions.items() if p.degraded]

    def to_dict(self) -> dict:
        if not self.success:
            return {"success": False, "error": self.error}
        return {
            "success": True,
            "predictions": {
                timeframe: prediction.to_dict()
                for timeframe, prediction in self.predictions.items()
            },
            "overall_confidence": self.overall_confidence,
            "base_price": self.base_price,
        }


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def validate_base_price(value: Any) -> float:
    """
    Return the base price as a float.

    Raises:
        InvalidBasePriceError: If the value is missing, not numeric, NaN,
            infinite, or not positive.
    """
    price = parse_price(value)
    if price is None or not math.isfinite(price) or price <= 0:
        raise InvalidBasePriceError(value=value)
    return price


def get_timeframe_factors(timeframe: str) -> TimeframeFactors:
    """Factors for a timeframe; unknown timeframes use the 7d row."""
    return TIMEFRAME_FACTORS.get(timeframe, TIMEFRAME_FACTORS["7d"])


def calculate_base_change(sentiment: str, timeframe: str) -> float:
    """Base percent change implied by the market sentiment."""
    changes = BASE_CHANGES.get(sentiment, BASE_CHANGES["neutral"])
    return changes.get(timeframe, 0.0)


def calculate_volume_factor(volume: float) -> float:
    """Volume impact factor."""
    if volume > 500:
        return 1.3  # High volume amplifies movement
    elif volume > 100:
        return 1.1
    elif volume > 50:
        return 1.0
    elif volume > 10:
        return 0.9
    else:
        return 0.7  # Thin market dampens movement


def calculate_sentiment_factor(sentiment_score: float, timeframe: str) -> float:
    """Sentiment impact factor; sentiment weighs more on shorter timeframes."""
    if timeframe == "24h":
        multiplier = 1.2
    elif timeframe == "7d":
        multiplier = 1.0
    else:
        multiplier = 0.8

    if sentiment_score > 0.8:
        return 1.2 * multiplier
    elif sentiment_score > 0.6:
        return 1.1 * multiplier
    elif sentiment_score > 0.4:
        return 1.0 * multiplier
    elif sentiment_score > 0.2:
        return 0.9 * multiplier
    else:
        return 0.8 * multiplier


def calculate_timeframe_confidence(
    market: MarketData,
    analysis: AIAnalysis,
    timeframe: str,
) -> int:
    """Confidence (30-95) for a single timeframe prediction."""
    penalty = TIMEFRAME_CONFIDENCE_PENALTY.get(timeframe, UNKNOWN_TIMEFRAME_PENALTY)

    volume = market.volume_24h
    if volume > 100:
        volume_bonus = 5
    elif volume > 50:
        volume_bonus = 0
    else:
        volume_bonus = -5

    confidence = round(analysis.confidence_score + penalty + volume_bonus)
    return int(_clamp(confidence, 30, 95))


def calculate_overall_confidence(market: MarketData, analysis: AIAnalysis) -> int:
    """Weighted confidence (40-90) across data quality, AI confidence and volume."""
    volume = market.volume_24h
    if volume > 200:
        volume_score = 85
    elif volume > 100:
        volume_score = 75
    elif volume > 50:
        volume_score = 65
    elif volume > 10:
        volume_score = 55
    else:
        volume_score = 45

    overall = (
        analysis.data_quality * 0.3
        + analysis.confidence_score * 0.4
        + volume_score * 0.3
    )
    return int(_clamp(round(overall), 40, 90))


def _direction(percentage_change: float) -> str:
    if percentage_change > 1:
        return "up"
    elif percentage_change < -1:
        return "down"
    return "stable"


class PricePredictor:
    """
    Heuristic price predictor over the 24h, 7d and 30d timeframes.

    Inputs may be plain mappings or parsed records; they are never modified.
    The noise term draws from ``random_source``, so passing a seeded source
    makes the output reproducible.
    """

    def __init__(self, random_source: Optional[RandomSource] = None):
        if random_source is None:
            rng = np.random.default_rng(settings.PREDICTION_RANDOM_SEED)
            random_source = rng.random
        self.random_source = random_source

    def predict_prices(
        self,
        market_data: Mapping[str, Any] | MarketData | None,
        ai_analysis: Mapping[str, Any] | AIAnalysis | None,
    ) -> PredictionBundle:
        """
        Generate predictions for every timeframe.

        Args:
            market_data: Market snapshot; ``floor_price`` is the base price
            ai_analysis: Upstream AI analysis

        Returns a failed bundle, never partial predictions, when the base
        price is unusable or the payloads are malformed.
        """
        try:
            logger.info("Starting price prediction")

            try:
                base_price = validate_base_price(floor_price_of(market_data))
            except InvalidBasePriceError as e:
                logger.warning("Rejected base price", value=e.details["value"])
                return PredictionBundle.failure(INVALID_BASE_PRICE_MESSAGE)

            inputs = normalize_inputs(market_data, ai_analysis)

            predictions = {
                timeframe: self.predict_timeframe(
                    base_price, inputs.market, inputs.analysis, timeframe
                )
                for timeframe in TIMEFRAMES
            }

            overall_confidence = calculate_overall_confidence(
                inputs.market, inputs.analysis
            )

            bundle = PredictionBundle(
                success=True,
                predictions=predictions,
                overall_confidence=overall_confidence,
                base_price=base_price,
                inputs=inputs,
            )

            logger.info(
                "Price prediction completed",
                collection=inputs.market.name,
                base_price=base_price,
                overall_confidence=overall_confidence,
                degraded=bundle.degraded_timeframes,
            )

            return bundle

        except InputValidationError as e:
            logger.error("Price prediction rejected input", error=e.message)
            return PredictionBundle.failure(e.message)

        except Exception as e:
            logger.error("Price prediction failed", error=str(e))
            return PredictionBundle.failure(str(e))

    def predict_timeframe(
        self,
        base_price: Any,
        market_data: Mapping[str, Any] | MarketData | None,
        ai_analysis: Mapping[str, Any] | AIAnalysis | None,
        timeframe: str,
    ) -> TimeframePrediction:
        """
        Predict the price for one timeframe.

        Failures degrade to a neutral ``DegradedPrediction`` instead of
        raising, so one bad timeframe never sinks the others.
        """
        try:
            base_price = validate_base_price(base_price)
        except InvalidBasePriceError as e:
            return DegradedPrediction.neutral(timeframe, price_target=0.0, error=e.message)

        try:
            inputs = normalize_inputs(market_data, ai_analysis)
            market, analysis = inputs.market, inputs.analysis

            factors = get_timeframe_factors(timeframe)

            base_change = calculate_base_change(analysis.market_sentiment, timeframe)
            volume_factor = calculate_volume_factor(market.volume_24h)
            sentiment_factor = calculate_sentiment_factor(analysis.sentiment_score, timeframe)

            percentage_change = base_change * volume_factor * sentiment_factor

            # Market unpredictability
            noise = (float(self.random_source()) - 0.5) * factors.noise_amplitude
            percentage_change += noise

            percentage_change = _clamp(
                percentage_change, -MAX_PERCENTAGE_CHANGE, MAX_PERCENTAGE_CHANGE
            )

            # Bounds apply to the rounded target
            price_target = base_price * (1 + percentage_change / 100)
            price_target = _clamp(
                round(price_target, 2),
                base_price * MIN_TARGET_RATIO,
                base_price * MAX_TARGET_RATIO,
            )

            # Direction follows the reported (rounded) change
            percentage_change = round(percentage_change, 1)

            return TimeframePrediction(
                timeframe=timeframe,
                direction=_direction(percentage_change),
                percentage_change=percentage_change,
                confidence=calculate_timeframe_confidence(market, analysis, timeframe),
                price_target=price_target,
            )

        except Exception as e:
            logger.warning("Timeframe prediction failed", timeframe=timeframe, error=str(e))
            return DegradedPrediction.neutral(timeframe, price_target=base_price, error=str(e))


# Global instance
price_predictor = PricePredictor()
