"""Contract, installment and payment entities."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from billboard_billing.core.date_helpers import parse_date
from billboard_billing.core.money import ZERO, to_decimal


class PricingMode(str, Enum):
    """How a contract's duration is expressed."""

    MONTHS = "months"
    DAYS = "days"


class DiscountType(str, Enum):
    """Discount kinds."""

    PERCENT = "percent"
    FIXED = "fixed"


def _parse_amount(v: Any) -> Decimal:
    return to_decimal(v)


def _parse_count(v: Any) -> int:
    return int(to_decimal(v))


class Installment(BaseModel):
    """Scheduled partial payment obligation."""

    model_config = ConfigDict(populate_by_name=True)

    amount: Decimal = Field(default=ZERO, description="Amount due")
    due_date: Optional[date] = Field(
        None, validation_alias=AliasChoices("due_date", "dueDate"), description="Due date"
    )
    description: Optional[str] = Field(None, description="Label shown on statements")
    payment_type: Optional[str] = Field(
        None, validation_alias=AliasChoices("payment_type", "paymentType"), description="Payment cadence label"
    )

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Decimal:
        """Coerce amount, non-finite values become zero."""
        return _parse_amount(v)

    @field_validator("description", "payment_type", mode="before")
    @classmethod
    def stringify_labels(cls, v: Any) -> Optional[str]:
        """Labels are free text."""
        if v is None:
            return None
        return str(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def parse_due_date(cls, v: Any) -> Optional[date]:
        """Unparseable due dates are treated as missing."""
        return parse_date(v)


class Payment(BaseModel):
    """Customer payment row. Payments are not linked to a specific installment."""

    model_config = ConfigDict(populate_by_name=True)

    contract_number: int = Field(..., validation_alias=AliasChoices("contract_number", "Contract_Number"))
    amount: Decimal = Field(default=ZERO)
    paid_at: Optional[datetime | date] = None

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Decimal:
        """Coerce amount, non-finite values become zero."""
        return _parse_amount(v)


class Contract(BaseModel):
    """Advertising contract with its pricing inputs and installment schedule."""

    model_config = ConfigDict(populate_by_name=True)

    contract_number: int = Field(
        ..., validation_alias=AliasChoices("contract_number", "Contract_Number", "contractNumber")
    )
    customer_id: Optional[str] = Field(None, validation_alias=AliasChoices("customer_id", "customerId"))
    customer_name: Optional[str] = Field(
        None, validation_alias=AliasChoices("customer_name", "Customer Name", "customerName")
    )
    billboard_ids: list[str] = Field(default_factory=list, description="Selected billboard IDs")

    pricing_mode: PricingMode = PricingMode.MONTHS
    duration_months: int = 0
    duration_days: int = 0
    pricing_category: str = "عادي"

    rent_cost: Decimal = Field(default=ZERO, description="Rent cost field (may be user-edited)")
    discount_type: DiscountType = DiscountType.PERCENT
    discount_value: Decimal = ZERO
    installation_cost: Decimal = ZERO
    installation_enabled: bool = True
    operating_fee_rate: Optional[Decimal] = Field(None, description="Operating fee percent; None uses the default")

    installments_schedule: Any = Field(
        default=None,
        validation_alias=AliasChoices("installments_schedule", "installments_data", "installments"),
        description="Installment schedule as JSON text or a list",
    )
    total: Decimal = Field(default=ZERO, validation_alias=AliasChoices("total", "Total"))
    total_paid: Decimal = Field(default=ZERO, validation_alias=AliasChoices("total_paid", "Total Paid"))
    start_date: Optional[date] = Field(
        None, validation_alias=AliasChoices("start_date", "Contract Date", "Start Date")
    )
    end_date: Optional[date] = Field(None, validation_alias=AliasChoices("end_date", "End Date"))

    @field_validator("customer_id", mode="before")
    @classmethod
    def stringify_customer_id(cls, v: Any) -> Optional[str]:
        """Customer IDs are opaque strings."""
        if v is None or v == "":
            return None
        return str(v)

    @field_validator("billboard_ids", mode="before")
    @classmethod
    def stringify_billboard_ids(cls, v: Any) -> list[str]:
        """Accept numeric IDs."""
        return [str(x) for x in (v or [])]

    @field_validator("duration_months", "duration_days", mode="before")
    @classmethod
    def parse_duration(cls, v: Any) -> int:
        """Coerce durations, non-finite values become zero."""
        return _parse_count(v)

    @field_validator(
        "rent_cost", "discount_value", "installation_cost", "total", "total_paid", mode="before"
    )
    @classmethod
    def parse_amounts(cls, v: Any) -> Decimal:
        """Coerce amounts, non-finite values become zero."""
        return _parse_amount(v)

    @field_validator("operating_fee_rate", mode="before")
    @classmethod
    def parse_fee_rate(cls, v: Any) -> Optional[Decimal]:
        """Keep None as "use default"."""
        if v is None or v == "":
            return None
        return _parse_amount(v)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_dates(cls, v: Any) -> Optional[date]:
        """Unparseable dates are treated as missing."""
        return parse_date(v)

    @property
    def remaining(self) -> Decimal:
        """Outstanding balance from the contract totals (total - total paid)."""
        return self.total - self.total_paid
