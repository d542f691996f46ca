"""
Late fee calculation.

Each membership tier maps to a strategy: a plain function taking the number of
whole days late and returning the fee in dollars, rounded to cents.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict

from exceptions import InvalidArgumentError
from schemas import MembershipType

MONEY_Q = Decimal("0.01")
ZERO_FEE = Decimal("0.00")

LATE_FEE_PER_DAY: Dict[MembershipType, Decimal] = {
    MembershipType.REGULAR: Decimal("0.50"),
    MembershipType.PREMIUM: Decimal("0.00"),
    MembershipType.STUDENT: Decimal("0.25"),
}

LateFeeStrategy = Callable[[int], Decimal]


def money(x: Decimal) -> Decimal:
    return x.quantize(MONEY_Q, rounding=ROUND_HALF_UP)


def format_money(x: Decimal) -> str:
    return f"{money(x):.2f}"


def _require_days(days_late: int) -> None:
    if days_late < 0:
        raise InvalidArgumentError(f"days_late cannot be negative: {days_late}")


def regular_late_fee(days_late: int) -> Decimal:
    _require_days(days_late)
    return money(LATE_FEE_PER_DAY[MembershipType.REGULAR] * days_late)


def premium_late_fee(days_late: int) -> Decimal:
    # Premium members are never charged.
    _require_days(days_late)
    return ZERO_FEE


def student_late_fee(days_late: int) -> Decimal:
    _require_days(days_late)
    return money(LATE_FEE_PER_DAY[MembershipType.STUDENT] * days_late)


LATE_FEE_STRATEGIES: Dict[MembershipType, LateFeeStrategy] = {
    MembershipType.REGULAR: regular_late_fee,
    MembershipType.PREMIUM: premium_late_fee,
    MembershipType.STUDENT: student_late_fee,
}


def get_strategy(membership_type: MembershipType) -> LateFeeStrategy:
    return LATE_FEE_STRATEGIES[MembershipType(membership_type)]


def days_late(due_date: date, today: date) -> int:
    """Whole days between due_date and today, clamped to zero."""
    if due_date < today:
        return today.toordinal() - due_date.toordinal()
    return 0


def calculate_late_fee(membership_type: MembershipType, late_days: int) -> Decimal:
    """Fee for returning a book `late_days` days late.

    Non-positive values short-circuit to 0.00 without a strategy lookup.
    """
    if late_days <= 0:
        return ZERO_FEE
    return get_strategy(membership_type)(late_days)
