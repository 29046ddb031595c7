"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal
from typing import Generator

import pytest

from billboard_billing.core.config import get_settings
from billboard_billing.core.config_loader import ReferenceData, load_reference_data
from billboard_billing.domain.entities.billboards import Billboard, PricingEntry, SizeEntry
from billboard_billing.domain.services.pricing_resolver import PricingResolver
from billboard_billing.domain.services.pricing_store import PricingStore


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch) -> Generator[None, None, None]:
    """Isolate tests from the host environment and the settings cache."""
    monkeypatch.delenv("BILLING_REFERENCE_DATA_PATH", raising=False)
    monkeypatch.delenv("BILLING_DEFAULT_OPERATING_FEE_RATE", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Reference Data Fixtures
# =============================================================================

@pytest.fixture
def today() -> date:
    """Fixed reference date."""
    return date(2024, 6, 15)


@pytest.fixture
def reference_data() -> ReferenceData:
    """Reference data packaged with the engine."""
    return load_reference_data()


@pytest.fixture
def sizes() -> list[SizeEntry]:
    """Size table rows."""
    return [
        SizeEntry(id=1, name="4x12"),
        SizeEntry(id=2, name="6x18"),
        SizeEntry(id=3, name="3x9"),
    ]


@pytest.fixture
def pricing_entries() -> list[PricingEntry]:
    """Persisted custom pricing rows."""
    return [
        PricingEntry(
            size="3x9",
            size_id=3,
            level="A",
            customer_category="عادي",
            one_month=Decimal("450"),
            three_months=Decimal("1200"),
            one_day=Decimal("20"),
        ),
        PricingEntry(
            size="6x18",
            size_id=2,
            level="ممتاز",
            customer_category="شركات",
            one_month=Decimal("2000"),
            six_months=Decimal("10000"),
        ),
    ]


@pytest.fixture
def pricing_store(pricing_entries, sizes) -> PricingStore:
    """Store over the custom pricing rows."""
    return PricingStore(pricing_entries, sizes)


@pytest.fixture
def resolver(reference_data, pricing_store) -> PricingResolver:
    """Resolver with custom and static tiers."""
    return PricingResolver(reference_data, pricing_store)


# =============================================================================
# Billboard Fixtures
# =============================================================================

@pytest.fixture
def billboards() -> list[Billboard]:
    """Billboards covering static, custom and unpriced keys."""
    return [
        Billboard(ID=101, Size="4x12", Level="عادي", Price=700),
        Billboard(ID=102, Size="3x9", Size_ID=3, Level="A", Price=400),
        Billboard(ID=103, Size="4x12", Level="A", Price=500),
    ]
