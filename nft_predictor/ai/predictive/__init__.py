"""
Predictive analysis for NFT collections.

DISCLAIMER: These predictions are heuristic estimates and should NOT be used as
the sole basis for investment decisions.
"""
from nft_predictor.ai.predictive.price_forecast import (
    DegradedPrediction,
    PredictionBundle,
    PricePredictor,
    TimeframePrediction,
)
from nft_predictor.ai.predictive.risk_assessment import RiskAssessor

__all__ = [
    "DegradedPrediction",
    "PredictionBundle",
    "PricePredictor",
    "RiskAssessor",
    "TimeframePrediction",
]
