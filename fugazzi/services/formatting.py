"""Display helpers shared by outcome messages and API responses."""

from .population import RiskTier, TIER_CONFIGS


def format_currency(amount: float, show_cents: bool = True) -> str:
    """Format an amount as dollars, e.g. $12.00 or $12."""
    if show_cents:
        return f"${amount:.2f}"
    return f"${int(amount // 1)}"


def format_percentage(multiplier: float) -> str:
    """Format a reward multiplier as a gain, e.g. 1.2 -> +20.0%."""
    return f"+{(multiplier - 1) * 100:.1f}%"


def risk_color(risk_tier: RiskTier) -> str:
    return TIER_CONFIGS[risk_tier].color
