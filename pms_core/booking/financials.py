"""
Booking financial deriver.

Calculation flow, always from scratch:
1. nights = whole days between check-in and check-out (must be >= 1)
2. total = base rate x nights
3. vat, tourism fee, commission = total x their rates
4. net to owner = total - vat - tourism fee - commission

Everything stays in exact Decimal arithmetic. Rounding (half-even, two
places) happens once, in ``FinancialBreakdown.rounded()``.
"""

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Union

from pms_core.booking.availability import validate_date_range
from pms_core.errors import InvalidAmountError, InvalidDateRangeError
from pms_core.schemas.booking_schema import PaymentStatus

Number = Union[Decimal, int, float, str]

DEFAULT_TOURISM_FEE_RATE = Decimal("0.03")
DEFAULT_COMMISSION_RATE = Decimal("0.10")
CENT = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    """Convert to Decimal through str so floats like 0.1 stay 0.1."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_EVEN)


@dataclass(frozen=True)
class FinancialBreakdown:
    nights: int
    total_amount: Decimal
    vat: Decimal
    tourism_fee: Decimal
    commission: Decimal
    net_to_owner: Decimal

    def rounded(self) -> "FinancialBreakdown":
        """Presentation copy with every amount rounded half-even to cents."""
        return FinancialBreakdown(
            nights=self.nights,
            total_amount=money(self.total_amount),
            vat=money(self.vat),
            tourism_fee=money(self.tourism_fee),
            commission=money(self.commission),
            net_to_owner=money(self.net_to_owner),
        )


def _non_negative(name: str, value: Decimal) -> Decimal:
    if not value.is_finite():
        raise InvalidAmountError(f"{name} must be a finite number, got {value}")
    if value < 0:
        raise InvalidAmountError(f"{name} must not be negative, got {value}")
    return value


def count_nights(check_in: date, check_out: date) -> int:
    validate_date_range(check_in, check_out)
    nights = (check_out - check_in).days
    if nights < 1:
        raise InvalidDateRangeError(
            check_in, check_out, f"A stay needs at least one night, got {nights}."
        )
    return nights


def derive_financials(
    base_rate: Number,
    check_in: date,
    check_out: date,
    tax_rate: Number,
    tourism_fee_rate: Number = DEFAULT_TOURISM_FEE_RATE,
    commission_rate: Number = DEFAULT_COMMISSION_RATE,
) -> FinancialBreakdown:
    """Derive the money side of a stay from the nightly rate and fee rates.

    Raises:
        InvalidDateRangeError: If the stay has no nights.
        InvalidAmountError: If an amount is negative or not finite, or the
            rates together exceed 1 and would leave the owner a negative net.
    """
    nights = count_nights(check_in, check_out)
    rate = _non_negative("base_rate", to_decimal(base_rate))
    vat_rate = _non_negative("tax_rate", to_decimal(tax_rate))
    tourism_rate = _non_negative("tourism_fee_rate", to_decimal(tourism_fee_rate))
    commission_pct = _non_negative("commission_rate", to_decimal(commission_rate))
    combined_rate = vat_rate + tourism_rate + commission_pct
    if combined_rate > 1:
        raise InvalidAmountError(
            f"Combined tax, tourism fee, and commission rates must not exceed 1, "
            f"got {combined_rate}"
        )

    total_amount = rate * nights
    vat = total_amount * vat_rate
    tourism_fee = total_amount * tourism_rate
    commission = total_amount * commission_pct

    return FinancialBreakdown(
        nights=nights,
        total_amount=total_amount,
        vat=vat,
        tourism_fee=tourism_fee,
        commission=commission,
        net_to_owner=total_amount - vat - tourism_fee - commission,
    )


def settle_balance(total_amount: Number, amount_paid: Number) -> tuple[Decimal, PaymentStatus]:
    """Return the outstanding balance and the payment status it implies."""
    total = _non_negative("total_amount", to_decimal(total_amount))
    paid = _non_negative("amount_paid", to_decimal(amount_paid))
    remaining = max(total - paid, Decimal("0"))
    if remaining == 0:
        return remaining, PaymentStatus.PAID
    if paid > 0:
        return remaining, PaymentStatus.PARTIAL
    return remaining, PaymentStatus.PENDING
