"""Pass/fail decision for scored listings."""

from ..config import Configuration

# Fixed score a listing must reach to count as a good deal
MIN_DEAL_SCORE = 70


def is_good_deal(cash_flow: float, rent_ratio: float, score: int, config: Configuration) -> bool:
    """
    Check a listing's metrics against the investment thresholds.

    Expects the unrounded cash flow and rent ratio, the same values the
    score is computed from.
    """
    return (
        cash_flow >= config.min_cash_flow
        and rent_ratio >= config.min_rent_ratio
        and score >= MIN_DEAL_SCORE
    )
