"""Unit tests for domain entities."""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from billboard_billing.domain.entities.billboards import Billboard, PricingEntry
from billboard_billing.domain.entities.billing import InstallmentAllocation
from billboard_billing.domain.entities.contracts import (
    Contract,
    DiscountType,
    Installment,
    PricingMode,
)


class TestBillboard:
    """Tests for Billboard entity."""

    def test_from_inventory_row(self):
        """Test creating a billboard from stored column names."""
        billboard = Billboard.model_validate(
            {
                "ID": 17,
                "Billboard_Name": "طريق المطار",
                "Size": "4x12",
                "Size_ID": "1",
                "Level": "ممتاز",
                "Price": "1,200",
                "Contract_Number": "321",
                "Rent_Start_Date": "2024-01-01",
                "Rent_End_Date": "2024-12-31T00:00:00",
            }
        )

        assert billboard.id == "17"
        assert billboard.size_id == 1
        assert billboard.monthly_price == Decimal("1200")
        assert billboard.contract_number == 321
        assert billboard.start_date == date(2024, 1, 1)
        assert billboard.end_date == date(2024, 12, 31)

    def test_defaults(self):
        """Test missing fields."""
        billboard = Billboard(ID="a-1", Size=None, Price="NaN")

        assert billboard.size == ""
        assert billboard.monthly_price == Decimal("0")
        assert billboard.contract_number is None
        assert billboard.end_date is None

    def test_frozen(self):
        """Test billboards are immutable."""
        billboard = Billboard(ID=1)

        with pytest.raises(ValidationError):
            billboard.size = "4x12"


class TestPricingEntry:
    """Tests for PricingEntry entity."""

    @pytest.mark.parametrize(
        "months,expected",
        [
            (1, Decimal("100")),
            (2, Decimal("180")),
            (3, Decimal("250")),
            (6, None),
            (12, Decimal("800")),
            (5, None),
        ],
    )
    def test_price_for_months(self, months, expected):
        """Test duration columns."""
        entry = PricingEntry(
            size="4x12",
            level="A",
            customer_category="عادي",
            one_month=100,
            two_months=180,
            three_months=250,
            full_year=800,
        )

        assert entry.price_for_months(months) == expected


class TestContract:
    """Tests for Contract entity."""

    def test_from_stored_row(self):
        """Test creating a contract from stored column names."""
        contract = Contract.model_validate(
            {
                "Contract_Number": 12,
                "Customer Name": "مؤسسة الأفق",
                "customer_id": 99,
                "billboard_ids": [101, 102],
                "Total": "5,000",
                "Total Paid": 1250.5,
                "End Date": "2024-09-30",
                "installments_data": "[]",
            }
        )

        assert contract.contract_number == 12
        assert contract.customer_name == "مؤسسة الأفق"
        assert contract.customer_id == "99"
        assert contract.billboard_ids == ["101", "102"]
        assert contract.remaining == Decimal("3749.5")
        assert contract.end_date == date(2024, 9, 30)
        assert contract.installments_schedule == "[]"

    def test_defaults(self):
        """Test default pricing inputs."""
        contract = Contract(contract_number=1)

        assert contract.pricing_mode == PricingMode.MONTHS
        assert contract.discount_type == DiscountType.PERCENT
        assert contract.installation_enabled
        assert contract.operating_fee_rate is None
        assert contract.pricing_category == "عادي"

    def test_non_finite_inputs(self):
        """Test non-finite numbers become zero."""
        contract = Contract(
            contract_number=1,
            duration_months=float("nan"),
            rent_cost="Infinity",
            discount_value=None,
        )

        assert contract.duration_months == 0
        assert contract.rent_cost == Decimal("0")
        assert contract.discount_value == Decimal("0")

    def test_blank_fee_rate_uses_default(self):
        """Test a blank fee rate means "use the default"."""
        assert Contract(contract_number=1, operating_fee_rate="").operating_fee_rate is None
        assert Contract(contract_number=1, operating_fee_rate="2.5").operating_fee_rate == Decimal("2.5")


class TestInstallment:
    """Tests for Installment and allocation entities."""

    def test_labels_are_text(self):
        """Test numeric labels are stored as text."""
        installment = Installment(amount=100, due_date="2024-01-01", description=3, payment_type=None)

        assert installment.description == "3"
        assert installment.payment_type is None

    def test_allocation_flags(self):
        """Test due and overdue flags."""
        paid = InstallmentAllocation(
            amount=Decimal("100"),
            due_date=date(2024, 1, 1),
            description="دفعة",
            days_overdue=10,
            allocated=Decimal("100"),
            outstanding=Decimal("0"),
        )
        upcoming = paid.model_copy(
            update={"days_overdue": -5, "allocated": Decimal("0"), "outstanding": Decimal("100")}
        )
        late = paid.model_copy(update={"allocated": Decimal("40"), "outstanding": Decimal("60")})

        assert paid.is_due and not paid.is_overdue
        assert not upcoming.is_due and not upcoming.is_overdue
        assert late.is_overdue
