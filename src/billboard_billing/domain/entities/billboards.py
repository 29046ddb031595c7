"""Billboard and pricing table entities."""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from billboard_billing.core.date_helpers import parse_date
from billboard_billing.core.money import ZERO, to_decimal

# Month durations that have a dedicated column in the pricing table.
MONTH_COLUMNS = {
    1: "one_month",
    2: "two_months",
    3: "three_months",
    6: "six_months",
    12: "full_year",
}


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class Billboard(BaseModel):
    """Billboard record as fetched from the inventory."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., validation_alias=AliasChoices("id", "ID"), description="Billboard ID")
    name: Optional[str] = Field(
        None, validation_alias=AliasChoices("name", "Billboard_Name"), description="Display name"
    )
    size: str = Field("", validation_alias=AliasChoices("size", "Size"), description="Size label, e.g. 4x12")
    size_id: Optional[int] = Field(
        None, validation_alias=AliasChoices("size_id", "Size_ID"), description="Size table ID"
    )
    level: Optional[str] = Field(
        None, validation_alias=AliasChoices("level", "Level"), description="Billboard level"
    )
    monthly_price: Decimal = Field(
        default=ZERO,
        validation_alias=AliasChoices("monthly_price", "price", "Price"),
        description="Billboard's own monthly price",
    )
    municipality: Optional[str] = Field(
        None, validation_alias=AliasChoices("municipality", "Municipality"), description="Municipality"
    )
    contract_number: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("contract_number", "Contract_Number", "contractNumber"),
        description="Current contract number",
    )
    start_date: Optional[date] = Field(
        None,
        validation_alias=AliasChoices("start_date", "Rent_Start_Date", "rent_start_date"),
        description="Current rental start",
    )
    end_date: Optional[date] = Field(
        None,
        validation_alias=AliasChoices("end_date", "Rent_End_Date", "rent_end_date"),
        description="Current rental end",
    )
    status: Optional[str] = Field(None, validation_alias=AliasChoices("status", "Status"))
    maintenance_status: Optional[str] = Field(None)
    maintenance_type: Optional[str] = Field(None)

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> str:
        """Accept numeric IDs."""
        return str(v)

    @field_validator("size", mode="before")
    @classmethod
    def default_size(cls, v: Any) -> str:
        """Treat a missing size as empty."""
        return "" if v is None else str(v)

    @field_validator("size_id", "contract_number", mode="before")
    @classmethod
    def blank_int(cls, v: Any) -> Any:
        """Empty strings mean no value."""
        return _blank_to_none(v)

    @field_validator("monthly_price", mode="before")
    @classmethod
    def parse_price(cls, v: Any) -> Decimal:
        """Coerce the price, non-finite values become zero."""
        return to_decimal(v)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_dates(cls, v: Any) -> Optional[date]:
        """Parse dates; unparseable values mean no date."""
        return parse_date(v)


class PricingEntry(BaseModel):
    """One row of the persisted pricing table: every duration for a (size, level, category) key."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    size: str = Field("", description="Size label")
    size_id: Optional[int] = Field(None, description="Size table ID")
    level: str = Field(..., validation_alias=AliasChoices("level", "billboard_level"))
    customer_category: str = Field(..., description="Customer pricing category")
    one_month: Optional[Decimal] = None
    two_months: Optional[Decimal] = Field(None, validation_alias=AliasChoices("two_months", "2_months"))
    three_months: Optional[Decimal] = Field(None, validation_alias=AliasChoices("three_months", "3_months"))
    six_months: Optional[Decimal] = Field(None, validation_alias=AliasChoices("six_months", "6_months"))
    full_year: Optional[Decimal] = None
    one_day: Optional[Decimal] = None

    @field_validator("size", mode="before")
    @classmethod
    def default_size(cls, v: Any) -> str:
        """Treat a missing size as empty."""
        return "" if v is None else str(v)

    @field_validator("size_id", mode="before")
    @classmethod
    def blank_size_id(cls, v: Any) -> Any:
        """Empty strings mean no size ID."""
        return _blank_to_none(v)

    @field_validator("level", "customer_category", mode="before")
    @classmethod
    def strip_key(cls, v: Any) -> str:
        """Trim key columns."""
        return str(v or "").strip()

    @field_validator(
        "one_month", "two_months", "three_months", "six_months", "full_year", "one_day", mode="before"
    )
    @classmethod
    def parse_price(cls, v: Any) -> Optional[Decimal]:
        """Null stays null (a lookup miss); anything else is coerced."""
        if v is None:
            return None
        return to_decimal(v)

    def price_for_months(self, months: int) -> Optional[Decimal]:
        """Price column for a month duration, None if there is no such column or it is empty."""
        column = MONTH_COLUMNS.get(months)
        if column is None:
            return None
        return getattr(self, column)


class SizeEntry(BaseModel):
    """Row of the sizes table."""

    id: int
    name: str
