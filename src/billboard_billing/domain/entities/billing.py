"""Derived billing results: cost breakdowns, allocations and overdue views."""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from billboard_billing.core.money import ZERO


class BillboardStatus(str, Enum):
    """Availability classification of a billboard."""

    AVAILABLE = "available"
    RENTED = "rented"
    MAINTENANCE = "maintenance"


class RentCostSync(BaseModel):
    """Outcome of syncing the rent-cost field with the estimated total."""

    rent_cost: Decimal = Field(..., description="Rent cost to show in the editor")
    user_edited: bool = Field(..., description="Whether the user has manually edited the field")
    synced: bool = Field(..., description="True when the estimate replaced the field value")


class ContractCostBreakdown(BaseModel):
    """Every intermediate of the contract cost pipeline."""

    estimated_total: Decimal = Field(default=ZERO, description="Sum of resolved billboard prices")
    base_total: Decimal = Field(default=ZERO, description="Rent cost if set, else the estimate")
    actual_installation_cost: Decimal = Field(default=ZERO, description="Installation cost when enabled")
    rental_before_discount: Decimal = Field(default=ZERO, description="Base total minus installation")
    discount_amount: Decimal = Field(default=ZERO, description="Discount applied to rental only")
    rental_cost_only: Decimal = Field(default=ZERO, description="Rental after discount")
    total_after_discount: Decimal = Field(default=ZERO, description="Rental after discount plus installation")
    final_total: Decimal = Field(default=ZERO, description="Amount the customer owes")
    operating_fee: Decimal = Field(default=ZERO, description="Operating fee, rounded to cents")


class InstallmentAllocation(BaseModel):
    """FIFO allocation of a contract's cumulative payments to one installment."""

    amount: Decimal
    due_date: date
    description: str
    days_overdue: int = Field(..., description="Days past due; zero or negative when not yet due")
    allocated: Decimal = Field(default=ZERO, description="Part of the payments pool applied")
    outstanding: Decimal = Field(default=ZERO, description="Amount still unpaid")

    @property
    def is_due(self) -> bool:
        """Whether the installment's due date has passed."""
        return self.days_overdue > 0

    @property
    def is_overdue(self) -> bool:
        """Due and not fully covered by payments."""
        return self.is_due and self.outstanding > 0


class OverdueInstallment(BaseModel):
    """Unpaid part of an installment whose due date has passed."""

    contract_number: int
    customer_name: str
    customer_id: Optional[str] = None
    installment_amount: Decimal = Field(..., description="Overdue (unallocated) amount")
    due_date: date
    description: str
    days_overdue: int


class OverdueSummary(BaseModel):
    """Per-customer rollup of overdue installments."""

    has_overdue: bool = False
    oldest_due_date: Optional[date] = None
    oldest_days_overdue: int = 0
    total_overdue_amount: Decimal = ZERO
    overdue_count: int = 0


class FleetOverdueRecord(BaseModel):
    """Expired contract with an outstanding balance (coarse dashboard view)."""

    customer_id: str = ""
    customer_name: str
    contract_number: int
    amount: Decimal = Field(..., description="Total minus total paid")
    days_overdue: int = Field(..., description="Days since the contract end date")
    due_date: date = Field(..., description="Contract end date")
