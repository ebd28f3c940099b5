"""Risk assessment for NFT collection predictions."""
from collections.abc import Mapping
from typing import Any

from nft_predictor.schemas.market import AIAnalysis, MarketData, normalize_inputs

LOW_VOLUME_RISK = "Low trading volume increases volatility risk"
SMALL_MARKET_CAP_RISK = "Small market cap vulnerable to manipulation"
BEARISH_SENTIMENT_RISK = "Negative market sentiment could accelerate decline"


class RiskAssessor:
    """Derives qualitative risk statements from the market snapshot."""

    LOW_VOLUME_THRESHOLD = 50
    SMALL_MARKET_CAP_THRESHOLD = 1000

    # Always reported, in this order
    GENERAL_RISKS = (
        "High market volatility",
        "Macroeconomic uncertainty",
        "Regulatory changes",
    )

    def assess_risks(
        self,
        market_data: Mapping[str, Any] | MarketData | None,
        ai_analysis: Mapping[str, Any] | AIAnalysis | None,
    ) -> list[str]:
        """
        List risks, contextual ones first, without duplicates.

        Raises:
            InputValidationError: If either payload is malformed.
        """
        inputs = normalize_inputs(market_data, ai_analysis)
        risks = []

        if inputs.market.volume_24h < self.LOW_VOLUME_THRESHOLD:
            risks.append(LOW_VOLUME_RISK)

        if inputs.market.market_cap < self.SMALL_MARKET_CAP_THRESHOLD:
            risks.append(SMALL_MARKET_CAP_RISK)

        if inputs.analysis.market_sentiment == "bearish":
            risks.append(BEARISH_SENTIMENT_RISK)

        risks.extend(self.GENERAL_RISKS)

        # Stable de-duplication
        return list(dict.fromkeys(risks))


# Global instance
risk_assessor = RiskAssessor()
