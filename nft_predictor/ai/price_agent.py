"""
Price predictor agent exposed to the agent coordinator.

Combines quantitative market data with the upstream AI insights to produce
multi-timeframe price predictions, confidence scores and a risk assessment.
"""
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional
import structlog

from nft_predictor.ai.predictive.price_forecast import (
    TIMEFRAMES,
    PricePredictor,
    price_predictor,
)
from nft_predictor.ai.predictive.risk_assessment import RiskAssessor, risk_assessor
from nft_predictor.core.config import settings
from nft_predictor.schemas.market import AIAnalysis, MarketData, normalize_inputs

logger = structlog.get_logger()


@dataclass(frozen=True)
class AgentConfig:
    """Descriptor the coordinator uses to route work to the agent."""
    name: str
    description: str
    capabilities: tuple[str, ...]
    timeframes: tuple[str, ...]
    version: str = settings.APP_VERSION

    def supports(self, capability: str) -> bool:
        return capability in self.capabilities

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "capabilities": list(self.capabilities),
            "timeframes": list(self.timeframes),
            "version": self.version,
        }


PRICE_PREDICTOR_CONFIG = AgentConfig(
    name=settings.AGENT_NAME,
    description="Generates multi-timeframe price predictions with confidence scores",
    capabilities=("price_prediction", "confidence_scoring", "risk_assessment"),
    timeframes=TIMEFRAMES,
    version=settings.APP_VERSION,
)


class PricePredictorAgent:
    """Facade over the price predictor and risk assessor."""

    def __init__(
        self,
        config: AgentConfig = PRICE_PREDICTOR_CONFIG,
        predictor: Optional[PricePredictor] = None,
        assessor: Optional[RiskAssessor] = None,
    ):
        self.config = config
        self.predictor = predictor or price_predictor
        self.assessor = assessor or risk_assessor

    def predict_prices(
        self,
        market_data: Mapping[str, Any] | MarketData | None,
        ai_analysis: Mapping[str, Any] | AIAnalysis | None,
    ) -> dict:
        return self.predictor.predict_prices(market_data, ai_analysis).to_dict()

    def assess_risks(
        self,
        market_data: Mapping[str, Any] | MarketData | None,
        ai_analysis: Mapping[str, Any] | AIAnalysis | None,
    ) -> list[str]:
        return self.assessor.assess_risks(market_data, ai_analysis)

    def analyze(
        self,
        market_data: Mapping[str, Any] | MarketData | None,
        ai_analysis: Mapping[str, Any] | AIAnalysis | None,
    ) -> dict:
        """
        Predictions plus risk factors, ready to merge into a coordinator response.

        A failed prediction is returned as is; risk factors are only added
        alongside successful predictions.
        """
        bundle = self.predictor.predict_prices(market_data, ai_analysis)
        if not bundle.success:
            return bundle.to_dict()

        inputs = bundle.inputs or normalize_inputs(market_data, ai_analysis)

        logger.info(
            "Collection analysis completed",
            agent=self.config.name,
            version=self.config.version,
            collection=inputs.market.name,
        )

        return {
            **bundle.to_dict(),
            "risk_factors": self.assessor.assess_risks(inputs.market, inputs.analysis),
            "market_sentiment": inputs.analysis.market_sentiment,
            "confidence_score": inputs.analysis.confidence_score,
            "data_quality": inputs.analysis.data_quality,
        }


# Global instance
price_predictor_agent = PricePredictorAgent()


def predict_prices(
    market_data: Mapping[str, Any] | MarketData | None,
    ai_analysis: Mapping[str, Any] | AIAnalysis | None,
) -> dict:
    """Predictions bundle as a JSON-ready dict."""
    return price_predictor_agent.predict_prices(market_data, ai_analysis)


def assess_risks(
    market_data: Mapping[str, Any] | MarketData | None,
    ai_analysis: Mapping[str, Any] | AIAnalysis | None,
) -> list[str]:
    """Risk statements for the collection."""
    return price_predictor_agent.assess_risks(market_data, ai_analysis)
