"""Operating fee calculation."""

from decimal import Decimal
from typing import Any

from billboard_billing.core.money import round_money, to_decimal

HUNDRED = Decimal("100")


class OperatingFeeCalculator:
    """Derive the operating fee from a contract's cost base."""

    def fee_base(self, rental_cost_only: Any, total_after_discount: Any, installation_enabled: bool) -> Decimal:
        """Rental only when installation is billed separately, the whole total otherwise."""
        if installation_enabled:
            return to_decimal(rental_cost_only)
        return to_decimal(total_after_discount)

    def compute_fee(
        self,
        rental_cost_only: Any,
        total_after_discount: Any,
        installation_enabled: bool,
        fee_rate_percent: Any,
    ) -> Decimal:
        """
        Compute the operating fee, rounded to cents.

        Args:
            rental_cost_only: Rental after discount
            total_after_discount: Rental after discount plus installation
            installation_enabled: Whether installation is part of the contract
            fee_rate_percent: Fee rate as a percentage

        Returns:
            ``round(base × rate / 100, 2)``
        """
        base = self.fee_base(rental_cost_only, total_after_discount, installation_enabled)
        return round_money(base * to_decimal(fee_rate_percent) / HUNDRED)
