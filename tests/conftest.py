"""Pytest configuration and fixtures."""
from typing import Any

import pytest

from nft_predictor.ai.predictive.price_forecast import PricePredictor
from nft_predictor.ai.predictive.risk_assessment import RiskAssessor
from nft_predictor.ai.price_agent import PricePredictorAgent


@pytest.fixture
def market_data() -> dict[str, Any]:
    """Market snapshot for a liquid collection."""
    return {
        "name": "Bored Ape Yacht Club",
        "address": "0xBC4CA0EdA7647A8aB7C2061c2E118A18a936f13D",
        "floor_price": 13.26,
        "volume_24h": 852,
        "market_cap": 132568,
        "total_supply": 10000,
    }


@pytest.fixture
def ai_analysis() -> dict[str, Any]:
    """Bullish analysis as produced by the AI analysis agent."""
    return {
        "market_sentiment": "bullish",
        "confidence_score": 70,
        "data_quality": 92,
        "reasoning_steps": [
            {
                "factor": "Social Media Sentiment",
                "impact": "neutral",
                "confidence": 75,
                "explanation": "Twitter mentions increased 32%.",
            },
            {
                "factor": "Whale Activity",
                "impact": "negative",
                "confidence": 77,
            },
        ],
    }


@pytest.fixture
def predictor() -> PricePredictor:
    """Predictor whose noise term is always zero."""
    return PricePredictor(random_source=lambda: 0.5)


@pytest.fixture
def agent(predictor: PricePredictor) -> PricePredictorAgent:
    """Agent wired to the noiseless predictor."""
    return PricePredictorAgent(predictor=predictor, assessor=RiskAssessor())
