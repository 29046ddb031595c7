"""Domain services."""

from billboard_billing.domain.services.contract_lifecycle import ContractLifecycleClassifier
from billboard_billing.domain.services.cost_calculator import (
    ContractCostCalculator,
    CostAggregator,
    sync_rent_cost,
)
from billboard_billing.domain.services.discount_engine import DiscountEngine
from billboard_billing.domain.services.installment_service import InstallmentScheduler, parse_schedule
from billboard_billing.domain.services.operating_fee import OperatingFeeCalculator
from billboard_billing.domain.services.overdue_service import OverdueReconciler, group_payments_by_contract
from billboard_billing.domain.services.pricing_resolver import PricingResolver
from billboard_billing.domain.services.pricing_store import PricingCache, PricingStore

__all__ = [
    "PricingResolver",
    "PricingStore",
    "PricingCache",
    "CostAggregator",
    "ContractCostCalculator",
    "sync_rent_cost",
    "DiscountEngine",
    "OperatingFeeCalculator",
    "InstallmentScheduler",
    "parse_schedule",
    "OverdueReconciler",
    "group_payments_by_contract",
    "ContractLifecycleClassifier",
]
