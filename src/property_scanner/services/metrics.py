"""Financial metrics engine for buy-and-hold rental analysis."""

import math
from typing import Optional

from ..config import Configuration
from ..models.listing import RawListing, ScoredListing
from .qualifier import is_good_deal

LOAN_TERM_YEARS = 30

# Score points per satisfied condition (max 100)
CASH_FLOW_POINTS = 30
RENT_RATIO_POINTS = 25
CAP_RATE_POINTS = 20
ROI_POINTS = 25

CAP_RATE_TARGET = 8.0
ROI_TARGET = 10.0


def monthly_mortgage_payment(principal: float, annual_rate: float, years: int = LOAN_TERM_YEARS) -> float:
    """
    Fixed-rate monthly payment for a fully amortizing loan.

    Args:
        principal: Loan amount
        annual_rate: Annual nominal rate in percent (6.5 means 6.5%)
        years: Loan term in years

    Returns:
        Monthly principal and interest payment
    """
    n = years * 12
    if n <= 0:
        return 0.0
    r = annual_rate / 100 / 12
    if r == 0:
        return principal / n
    growth = (1 + r) ** n
    return principal * (r * growth) / (growth - 1)


def round_currency(value: float) -> int:
    """Round half up to whole dollars (0.5 -> 1, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def round_percent(value: float) -> float:
    return round(value, 2)


def investment_score(
    cash_flow: float,
    rent_ratio: float,
    cap_rate: float,
    roi: float,
    min_rent_ratio: float,
) -> int:
    """Additive 0-100 score from four independent conditions."""
    score = 0
    if cash_flow > 0:
        score += CASH_FLOW_POINTS
    if rent_ratio >= min_rent_ratio:
        score += RENT_RATIO_POINTS
    if cap_rate > CAP_RATE_TARGET:
        score += CAP_RATE_POINTS
    if roi > ROI_TARGET:
        score += ROI_POINTS
    return score


def _number(value: Optional[float], field: str) -> float:
    number = float(value) if value else 0.0
    if not math.isfinite(number):
        raise ValueError(f"{field} must be a finite number, got {value!r}")
    return number


def analyze_listing(listing: RawListing, estimated_rent: Optional[float], config: Configuration) -> ScoredListing:
    """
    Compute expenses, cash flow, return ratios and score for one listing.

    Missing numeric inputs count as zero and ratios whose denominator is
    zero resolve to zero. The good-deal check runs on the unrounded cash
    flow and rent ratio.

    Args:
        listing: Normalized listing
        estimated_rent: Monthly rent estimate
        config: Scan criteria

    Returns:
        Immutable ScoredListing with is_good_deal already evaluated

    Raises:
        ValueError: If the price or rent is NaN or infinite
    """
    price = _number(listing.price, "price")
    rent = _number(estimated_rent, "rent")

    # Financing
    down_payment = price * config.down_payment_percent / 100
    loan_amount = price - down_payment
    mortgage = monthly_mortgage_payment(loan_amount, config.interest_rate)

    # Monthly expenses
    property_tax = price * config.property_tax_rate / 100 / 12
    insurance = config.insurance_monthly
    maintenance = price * config.maintenance_percent / 100 / 12
    management = rent * config.property_management_percent / 100
    vacancy = rent * config.vacancy_rate / 100

    total_expenses = mortgage + property_tax + insurance + maintenance + management + vacancy
    cash_flow = rent - total_expenses

    if price > 0:
        rent_ratio = rent / price * 100
        operating_costs = property_tax + insurance + maintenance
        cap_rate = (rent * 12 - operating_costs * 12) / price * 100
    else:
        rent_ratio = 0.0
        cap_rate = 0.0

    roi = cash_flow * 12 / down_payment * 100 if down_payment > 0 else 0.0

    score = investment_score(cash_flow, rent_ratio, cap_rate, roi, config.min_rent_ratio)

    return ScoredListing(
        address=listing.address,
        city=listing.city or "",
        state=listing.state or "",
        zip_code=listing.zip_code or "",
        price=price,
        bedrooms=float(listing.bedrooms or 0),
        bathrooms=float(listing.bathrooms or 0),
        square_footage=listing.square_footage,
        property_type=listing.property_type,
        estimated_rent=rent,
        monthly_mortgage=round_currency(mortgage),
        property_tax=round_currency(property_tax),
        insurance=round_currency(insurance),
        maintenance=round_currency(maintenance),
        property_management=round_currency(management),
        vacancy=round_currency(vacancy),
        total_expenses=round_currency(total_expenses),
        cash_flow=round_currency(cash_flow),
        rent_ratio=round_percent(rent_ratio),
        cap_rate=round_percent(cap_rate),
        roi=round_percent(roi),
        score=score,
        is_good_deal=is_good_deal(cash_flow, rent_ratio, score, config),
        listing_id=listing.listing_id,
    )
