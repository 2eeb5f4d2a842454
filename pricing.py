import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import List

from config import (
    COMMISSION_RATE,
    DEDUCTIBLE_REDUCTION_COST_PER_DAY,
    DISCOUNT_TIERS,
    INSURANCE_PART_RATE,
    ROADSIDE_ASSISTANCE_FEE_PER_DAY,
)
from errors import InvalidRentalPeriodError, LedgerImbalanceError
from schemas import Action, Rental, Settlement

logger = logging.getLogger(__name__)


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (Python's round() goes to even)."""
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def rental_duration(rental: Rental) -> int:
    """Number of calendar days covered by the rental, both ends included."""
    days = (rental.end_date - rental.start_date).days + 1
    if days < 1:
        raise InvalidRentalPeriodError(
            f"Rental {rental.id} ends on {rental.end_date} before it starts on {rental.start_date}"
        )
    return days


# Decreasing pricing for longer rentals
def discount_percent(duration: int) -> float:
    """
    Average discount over the whole rental, as a percentage (0 <= discount < 100).

    Every tier discounts the days that fall inside it; the sum is spread
    evenly over all days of the rental.
    """
    discounts_sum = 0.0
    for rate, first_day, max_days in DISCOUNT_TIERS:
        days = max(duration - (first_day - 1), 0)
        if max_days is not None:
            days = min(days, max_days)
        discounts_sum += rate * days
    return discounts_sum / duration


def price_time_component(rental: Rental, duration: int) -> int:
    # truncated, not rounded
    return int(duration * rental.car.price_per_day * (1 - discount_percent(duration) / 100))


def price_distance_component(rental: Rental) -> int:
    return rental.distance * rental.car.price_per_km


def deductible_reduction_fee(rental: Rental, duration: int) -> int:
    if rental.deductible_reduction:
        return duration * DEDUCTIBLE_REDUCTION_COST_PER_DAY
    return 0


def commission_fees(price: int, duration: int) -> tuple:
    """
    Split the commission between insurance, roadside assistance and the platform.

    The platform keeps what is left, so the three fees always add up to the
    rounded commission.
    """
    commission = round_half_away(COMMISSION_RATE * price)
    insurance_fee = round_half_away(COMMISSION_RATE * INSURANCE_PART_RATE * price)
    assistance_fee = ROADSIDE_ASSISTANCE_FEE_PER_DAY * duration
    platform_fee = commission - insurance_fee - assistance_fee
    return insurance_fee, assistance_fee, platform_fee


def compute_settlement(rental: Rental) -> Settlement:
    duration = rental_duration(rental)
    time_component = price_time_component(rental, duration)
    distance_component = price_distance_component(rental)
    price = time_component + distance_component
    insurance_fee, assistance_fee, platform_fee = commission_fees(price, duration)

    settlement = Settlement(
        duration=duration,
        price_time_component=time_component,
        price_distance_component=distance_component,
        price=price,
        deductible_reduction_fee=deductible_reduction_fee(rental, duration),
        insurance_fee=insurance_fee,
        assistance_fee=assistance_fee,
        platform_fee=platform_fee,
    )
    check_balance(settlement.amounts(), f"rental {rental.id}")
    logger.debug("Rental %s: %s days, price %s", rental.id, duration, price)
    return settlement


def check_balance(amounts: dict, label: str) -> None:
    total = sum(amounts.values())
    if total != 0:
        raise LedgerImbalanceError(f"Amounts for {label} sum to {total}, expected 0")


def actions_from_amounts(amounts: dict) -> List[Action]:
    return [Action.from_amount(who, amount) for who, amount in amounts.items()]


def generate_actions(rental: Rental) -> List[Action]:
    """Credits and debits that settle one rental."""
    return actions_from_amounts(compute_settlement(rental).amounts())
