"""Contract cost pipeline: estimate, discount, installation and operating fee."""

from decimal import Decimal
from typing import Any, Iterable, Optional

from billboard_billing.core.config import get_settings
from billboard_billing.core.logging import get_logger
from billboard_billing.core.money import ZERO, to_decimal
from billboard_billing.domain.entities.billboards import Billboard
from billboard_billing.domain.entities.billing import ContractCostBreakdown, RentCostSync
from billboard_billing.domain.entities.contracts import Contract, PricingMode
from billboard_billing.domain.services.discount_engine import DiscountEngine
from billboard_billing.domain.services.operating_fee import OperatingFeeCalculator
from billboard_billing.domain.services.pricing_resolver import PricingResolver

logger = get_logger(__name__)


def sync_rent_cost(estimated_total: Any, current_rent_cost: Any, user_edited: bool) -> RentCostSync:
    """
    Decide the rent-cost field value after a recomputation.

    While ``user_edited`` is False the estimate replaces the field. Once the
    caller has set the flag (the user typed a rent cost), the current value
    is kept for the rest of the editing session.
    """
    if user_edited:
        return RentCostSync(rent_cost=to_decimal(current_rent_cost), user_edited=True, synced=False)
    return RentCostSync(rent_cost=to_decimal(estimated_total), user_edited=False, synced=True)


class CostAggregator:
    """Sum resolved billboard prices across a contract's selected billboards."""

    def __init__(self, resolver: PricingResolver) -> None:
        self.resolver = resolver

    def selected_billboards(self, contract: Contract, billboards: Iterable[Billboard]) -> list[Billboard]:
        """Billboards whose ID is in the contract's selection."""
        selected = set(contract.billboard_ids)
        return [b for b in billboards if b.id in selected]

    def estimate_total(self, contract: Contract, billboards: Iterable[Billboard]) -> Decimal:
        """
        Estimate the rental total for the contract's duration and pricing mode.

        Months mode: Σ resolved price, falling back to the billboard's own
        monthly price × months when no tier resolves. Days mode: Σ daily
        price × days. Zero or negative durations give zero.
        """
        selected = self.selected_billboards(contract, billboards)

        if contract.pricing_mode == PricingMode.MONTHS:
            months = max(0, contract.duration_months)
            if not months:
                return ZERO

            total = ZERO
            for billboard in selected:
                price = self.resolver.resolve_monthly(
                    billboard.size,
                    billboard.level,
                    contract.pricing_category,
                    months,
                    billboard.size_id,
                )
                if price is None:
                    price = billboard.monthly_price * months
                total += price
            return total

        days = max(0, contract.duration_days)
        if not days:
            return ZERO

        total = ZERO
        for billboard in selected:
            daily = self.resolver.resolve_daily(
                billboard.size,
                billboard.level,
                contract.pricing_category,
                billboard.size_id,
            )
            total += daily * days
        return total


class ContractCostCalculator:
    """
    Chain the cost pipeline for a contract.

    estimate → base total → minus installation → discount → rental only →
    plus installation → final total, with the operating fee on the side.
    """

    def __init__(
        self,
        resolver: PricingResolver,
        discount_engine: Optional[DiscountEngine] = None,
        fee_calculator: Optional[OperatingFeeCalculator] = None,
        default_operating_fee_rate: Optional[Decimal] = None,
    ) -> None:
        self.aggregator = CostAggregator(resolver)
        self.discount_engine = discount_engine or DiscountEngine()
        self.fee_calculator = fee_calculator or OperatingFeeCalculator()
        if default_operating_fee_rate is None:
            default_operating_fee_rate = get_settings().default_operating_fee_rate
        self.default_operating_fee_rate = to_decimal(default_operating_fee_rate)

    def calculate(self, contract: Contract, billboards: Iterable[Billboard]) -> ContractCostBreakdown:
        """
        Compute every cost figure for a contract.

        The rent cost on the contract wins over the estimate when it is
        positive; callers keep it in sync with :func:`sync_rent_cost`.
        """
        estimated_total = self.aggregator.estimate_total(contract, billboards)
        base_total = contract.rent_cost if contract.rent_cost > 0 else estimated_total

        actual_installation_cost = contract.installation_cost if contract.installation_enabled else ZERO
        rental_before_discount = max(ZERO, base_total - actual_installation_cost)

        discount_amount = self.discount_engine.compute_discount(
            rental_before_discount, contract.discount_type, contract.discount_value
        )
        rental_cost_only = self.discount_engine.apply(rental_before_discount, discount_amount)
        total_after_discount = rental_cost_only + actual_installation_cost
        final_total = rental_cost_only + actual_installation_cost

        fee_rate = contract.operating_fee_rate
        if fee_rate is None:
            fee_rate = self.default_operating_fee_rate
        operating_fee = self.fee_calculator.compute_fee(
            rental_cost_only, total_after_discount, contract.installation_enabled, fee_rate
        )

        logger.debug(
            "Contract cost calculated",
            contract_number=contract.contract_number,
            estimated_total=str(estimated_total),
            final_total=str(final_total),
            operating_fee=str(operating_fee),
        )

        return ContractCostBreakdown(
            estimated_total=estimated_total,
            base_total=base_total,
            actual_installation_cost=actual_installation_cost,
            rental_before_discount=rental_before_discount,
            discount_amount=discount_amount,
            rental_cost_only=rental_cost_only,
            total_after_discount=total_after_discount,
            final_total=final_total,
            operating_fee=operating_fee,
        )

    def recalculate(
        self,
        contract: Contract,
        billboards: Iterable[Billboard],
        user_edited_rent_cost: bool,
    ) -> tuple[Contract, ContractCostBreakdown]:
        """
        Recompute after an edit to billboards, duration or category.

        The estimate is synced into ``rent_cost`` unless the user has edited
        it, then the full breakdown is computed from the synced contract.

        Returns:
            (contract with synced rent cost, cost breakdown)
        """
        billboards = list(billboards)
        estimated_total = self.aggregator.estimate_total(contract, billboards)
        sync = sync_rent_cost(estimated_total, contract.rent_cost, user_edited_rent_cost)
        synced_contract = contract.model_copy(update={"rent_cost": sync.rent_cost})
        return synced_contract, self.calculate(synced_contract, billboards)
