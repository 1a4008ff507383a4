"""Sale line pricing: subtotal, tax and total."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")


class PricingError(ValueError):
    pass


def _decimal(value: Number, name: str) -> Decimal:
    try:
        return Decimal(str(value))
    except (ArithmeticError, ValueError, TypeError):
        raise PricingError(f"{name} must be a number")


@dataclass(frozen=True)
class SaleTotals:
    subtotal: Decimal
    tax_amount: Decimal
    total_price: Decimal

    def rounded(self) -> "SaleTotals":
        """Totals rounded half-up to cents, as stored on the sale."""
        return SaleTotals(
            subtotal=self.subtotal.quantize(CENT, rounding=ROUND_HALF_UP),
            tax_amount=self.tax_amount.quantize(CENT, rounding=ROUND_HALF_UP),
            total_price=self.total_price.quantize(CENT, rounding=ROUND_HALF_UP),
        )


def compute_sale_totals(quantity: Number, price_per_unit: Number, tax_rate: Optional[Number] = None) -> SaleTotals:
    """subtotal = quantity * price; tax = subtotal * rate / 100; total = subtotal + tax.

    Quantity and price must be strictly positive and the tax rate (0 when
    omitted) must not be negative. The result is exact; use `rounded()`
    for storage.
    """
    quantity = _decimal(quantity, "Quantity")
    price_per_unit = _decimal(price_per_unit, "Price per unit")
    tax_rate = Decimal("0") if tax_rate in (None, "") else _decimal(tax_rate, "Tax rate")

    if not quantity.is_finite() or quantity <= 0:
        raise PricingError("Quantity must be greater than 0")
    if not price_per_unit.is_finite() or price_per_unit <= 0:
        raise PricingError("Price per unit must be greater than 0")
    if not tax_rate.is_finite() or tax_rate < 0:
        raise PricingError("Tax rate cannot be negative")

    subtotal = quantity * price_per_unit
    tax_amount = subtotal * tax_rate / Decimal("100")
    return SaleTotals(subtotal=subtotal, tax_amount=tax_amount, total_price=subtotal + tax_amount)
