"""
Tests for the price predictor agent facade.
"""

import pytest
from unittest.mock import Mock, patch

from nft_predictor.ai import price_agent
from nft_predictor.ai.predictive.price_forecast import INVALID_BASE_PRICE_MESSAGE, PredictionBundle
from nft_predictor.ai.price_agent import PRICE_PREDICTOR_CONFIG, AgentConfig, PricePredictorAgent


def test_agent_config():
    """Test the agent descriptor."""
    assert PRICE_PREDICTOR_CONFIG.name == "PricePredictor"
    assert PRICE_PREDICTOR_CONFIG.timeframes == ("24h", "7d", "30d")
    assert PRICE_PREDICTOR_CONFIG.supports("risk_assessment")
    assert not PRICE_PREDICTOR_CONFIG.supports("portfolio_rebalancing")
    assert PRICE_PREDICTOR_CONFIG.to_dict()["capabilities"] == [
        "price_prediction",
        "confidence_scoring",
        "risk_assessment",
    ]
    assert PRICE_PREDICTOR_CONFIG.version == "0.1.0"
    assert PRICE_PREDICTOR_CONFIG.to_dict()["version"] == "0.1.0"


def test_default_agent_uses_global_instances():
    """Test default wiring."""
    agent = PricePredictorAgent()

    assert agent.config is PRICE_PREDICTOR_CONFIG
    assert agent.predictor is price_agent.price_predictor
    assert agent.assessor is price_agent.risk_assessor


def test_predict_prices_returns_dict(agent, market_data, ai_analysis):
    """Test prediction through the agent."""
    result = agent.predict_prices(market_data, ai_analysis)

    assert result["success"] is True
    assert set(result["predictions"]) == {"24h", "7d", "30d"}
    assert result["overall_confidence"] == 81


def test_analyze_adds_risk_factors(agent, market_data, ai_analysis):
    """Test combined analysis report."""
    result = agent.analyze(market_data, ai_analysis)

    assert result["success"] is True
    assert result["base_price"] == 13.26
    assert result["risk_factors"] == [
        "High market volatility",
        "Macroeconomic uncertainty",
        "Regulatory changes",
    ]
    assert result["market_sentiment"] == "bullish"
    assert result["confidence_score"] == 70
    assert result["data_quality"] == 92


def test_analyze_reuses_bundle_inputs(agent, market_data, ai_analysis):
    """Test analysis reads the inputs the predictor already parsed."""
    with patch("nft_predictor.ai.price_agent.normalize_inputs") as mock_normalize:
        result = agent.analyze(market_data, ai_analysis)

    mock_normalize.assert_not_called()
    assert result["market_sentiment"] == "bullish"
    assert result["data_quality"] == 92


def test_analyze_parses_inputs_for_custom_predictor(market_data, ai_analysis):
    """Test analysis with a predictor that returns no parsed inputs."""
    predictor = Mock()
    predictor.predict_prices.return_value = PredictionBundle(
        success=True,
        overall_confidence=60,
        base_price=13.26,
    )

    agent = PricePredictorAgent(predictor=predictor)
    result = agent.analyze(market_data, ai_analysis)

    assert result["success"] is True
    assert result["market_sentiment"] == "bullish"
    assert len(result["risk_factors"]) == 3


def test_analyze_fills_defaults(agent):
    """Test analysis with a sparse AI payload."""
    result = agent.analyze({"floor_price": 1.5, "volume_24h": 5}, {})

    assert result["market_sentiment"] == "neutral"
    assert result["data_quality"] == 75
    assert "Low trading volume increases volatility risk" in result["risk_factors"]


def test_analyze_failure_has_no_risk_factors(agent, ai_analysis):
    """Test failed prediction is passed through unchanged."""
    result = agent.analyze({"floor_price": 0}, ai_analysis)

    assert result == {"success": False, "error": INVALID_BASE_PRICE_MESSAGE}


def test_analyze_does_not_assess_after_failure():
    """Test the assessor is skipped when prediction fails."""
    predictor = Mock()
    predictor.predict_prices.return_value = PredictionBundle.failure("boom")
    assessor = Mock()

    agent = PricePredictorAgent(
        config=AgentConfig("Test", "test agent", ("price_prediction",), ("24h",)),
        predictor=predictor,
        assessor=assessor,
    )

    assert agent.analyze({}, {}) == {"success": False, "error": "boom"}
    assessor.assess_risks.assert_not_called()


def test_module_functions(market_data):
    """Test the functions exported to the coordinator."""
    result = price_agent.predict_prices(market_data, {"market_sentiment": "bearish"})
    risks = price_agent.assess_risks({"volume_24h": 10, "market_cap": 500}, {"market_sentiment": "bearish"})

    assert result["success"] is True
    for prediction in result["predictions"].values():
        assert 13.26 * 0.5 <= prediction["price_target"] <= 13.26 * 2.0
        assert 30 <= prediction["confidence"] <= 95
    assert len(risks) == 6


@pytest.mark.parametrize("floor_price", [None, float("nan"), -1])
def test_module_predict_prices_rejects_base_price(floor_price):
    """Test hard failure through the exported function."""
    result = price_agent.predict_prices({"floor_price": floor_price}, {})

    assert result == {"success": False, "error": INVALID_BASE_PRICE_MESSAGE}
