"""Domain entities and DTOs."""

from billboard_billing.domain.entities.billboards import Billboard, PricingEntry, SizeEntry
from billboard_billing.domain.entities.billing import (
    BillboardStatus,
    ContractCostBreakdown,
    FleetOverdueRecord,
    InstallmentAllocation,
    OverdueInstallment,
    OverdueSummary,
    RentCostSync,
)
from billboard_billing.domain.entities.contracts import (
    Contract,
    DiscountType,
    Installment,
    Payment,
    PricingMode,
)

__all__ = [
    "Billboard",
    "PricingEntry",
    "SizeEntry",
    "Contract",
    "Installment",
    "Payment",
    "PricingMode",
    "DiscountType",
    "BillboardStatus",
    "ContractCostBreakdown",
    "RentCostSync",
    "InstallmentAllocation",
    "OverdueInstallment",
    "OverdueSummary",
    "FleetOverdueRecord",
]
