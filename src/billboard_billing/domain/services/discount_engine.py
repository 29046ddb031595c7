"""Contract discount calculation."""

from decimal import Decimal
from typing import Any

from billboard_billing.core.money import ZERO, clamp, to_decimal
from billboard_billing.domain.entities.contracts import DiscountType

HUNDRED = Decimal("100")


class DiscountEngine:
    """
    Turn a discount type and value into an amount.

    Discounts apply to the rental only, never to installation. Out-of-range
    values are clamped, never rejected: percentages to [0, 100] and fixed
    amounts to >= 0.
    """

    def compute_discount(
        self,
        rental_before_discount: Any,
        discount_type: DiscountType | str,
        value: Any,
    ) -> Decimal:
        """
        Compute the discount amount.

        Args:
            rental_before_discount: Rental cost the discount applies to
            discount_type: ``"percent"`` or ``"fixed"``
            value: Percentage or fixed amount

        Returns:
            Discount amount (never negative)
        """
        rental = to_decimal(rental_before_discount)
        amount = to_decimal(value)
        if not amount:
            return ZERO

        if discount_type == DiscountType.PERCENT:
            return rental * clamp(amount, ZERO, HUNDRED) / HUNDRED
        return max(ZERO, amount)

    def apply(self, rental_before_discount: Any, discount_amount: Any) -> Decimal:
        """Rental after discount, floored at zero."""
        return max(ZERO, to_decimal(rental_before_discount) - to_decimal(discount_amount))
