"""Unit tests for settings and the reference data loader."""

import logging
from decimal import Decimal

import pytest
from pydantic import ValidationError

from billboard_billing.core.config import Settings, get_settings
from billboard_billing.core.config_loader import (
    ReferenceData,
    flip_size,
    load_reference_data,
    normalize_size_name,
)
from billboard_billing.core.exceptions import ReferenceDataError
from billboard_billing.core.logging import configure_logging, get_logger


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        """Test default values."""
        settings = Settings()

        assert settings.default_operating_fee_rate == Decimal("3")
        assert settings.top_overdue_limit == 5
        assert settings.pricing_cache_ttl_seconds == 300
        assert settings.unknown_customer_name == "غير معروف"
        assert settings.is_development

    def test_env_prefix(self, monkeypatch):
        """Test settings are read from BILLING_ variables."""
        monkeypatch.setenv("BILLING_TOP_OVERDUE_LIMIT", "10")
        monkeypatch.setenv("BILLING_LOG_LEVEL", "debug")
        monkeypatch.setenv("BILLING_ENVIRONMENT", "production")

        settings = Settings()

        assert settings.top_overdue_limit == 10
        assert settings.log_level == "DEBUG"
        assert settings.is_production

    def test_negative_limit_rejected(self, monkeypatch):
        """Test negative counters fail validation."""
        monkeypatch.setenv("BILLING_TOP_OVERDUE_LIMIT", "-1")

        with pytest.raises(ValidationError):
            Settings()

    def test_get_settings_is_cached(self):
        """Test the same instance is returned until the cache is cleared."""
        assert get_settings() is get_settings()


class TestSizeNames:
    """Tests for size label normalization."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("4x12", "4x12"),
            (" 4 X 12 ", "4x12"),
            ("12×4", "12x4"),
            ("3*9", "3x9"),
            (None, ""),
        ],
    )
    def test_normalize_size_name(self, raw, expected):
        """Test separators, case and whitespace are normalized."""
        assert normalize_size_name(raw) == expected

    def test_flip_size(self):
        """Test dimensions are swapped."""
        assert flip_size("4x12") == "12x4"
        assert flip_size("2.5x5") == "5x2.5"
        assert flip_size("large") is None


class TestReferenceData:
    """Tests for the packaged reference data."""

    def test_canonical_size(self, reference_data):
        """Test sizes are matched in either dimension order."""
        assert reference_data.canonical_size("12x4") == "4x12"
        assert reference_data.canonical_size("4 × 12") == "4x12"
        assert reference_data.canonical_size("") == "4x12"
        assert reference_data.canonical_size("5x5") == "5x5"

    def test_canonical_level(self, reference_data):
        """Test level aliases."""
        assert reference_data.canonical_level("vip") == "VIP"
        assert reference_data.canonical_level("VIP") == "VIP"
        assert reference_data.canonical_level("Premium") == "ممتاز"
        assert reference_data.canonical_level(None) == "عادي"
        assert reference_data.canonical_level("A") == "A"

    def test_static_price_one_month(self, reference_data):
        """Test one-month base price."""
        assert reference_data.static_price("4x12", "عادي", "عادي", 1) == Decimal("800")

    def test_static_price_applies_multiplier(self, reference_data):
        """Test duration multipliers and whole-unit rounding."""
        assert reference_data.static_price("4x12", "عادي", "عادي", 3) == Decimal("2000")
        assert reference_data.static_price("6x18", "VIP", "شركات", 6) == Decimal("12654")

    def test_unlisted_duration_multiplies_by_months(self, reference_data):
        """Test durations without a multiplier scale linearly."""
        assert reference_data.static_price("4x12", "عادي", "عادي", 4) == Decimal("3200")

    def test_static_price_miss(self, reference_data):
        """Test unknown keys return None."""
        assert reference_data.static_price("4x12", "A", "company", 6) is None
        assert reference_data.static_price("9x9", "عادي", "عادي", 1) is None

    def test_static_daily_price_empty_by_default(self, reference_data):
        """Test the packaged daily table has no entries."""
        assert reference_data.static_daily_price("4x12", "عادي", "عادي") is None

    @pytest.mark.parametrize(
        "status,maintenance_status,maintenance_type",
        [
            ("صيانة", None, None),
            ("  Maintenance ", None, None),
            (None, "repair_needed", None),
            (None, "OUT_OF_SERVICE", None),
            (None, None, "تمت الإزالة"),
        ],
    )
    def test_unavailable_flags(self, reference_data, status, maintenance_status, maintenance_type):
        """Test flags are matched trimmed and case-insensitively."""
        assert reference_data.is_unavailable_flag(status, maintenance_status, maintenance_type)

    def test_operational_flags(self, reference_data):
        """Test ordinary statuses do not block a billboard."""
        assert not reference_data.is_unavailable_flag("available", "operational", None)
        assert not reference_data.is_unavailable_flag()

    @pytest.mark.parametrize("status", ["rented", "  RENTED ", "مؤجر"])
    def test_rented_statuses_are_unavailable(self, reference_data, status):
        """Test rented status labels block availability and are flagged as rented."""
        assert reference_data.is_unavailable_flag(status, None, None)
        assert reference_data.is_rented_status(status)
        assert not reference_data.is_rented_status("maintenance")

    def test_maintenance_type_matched_case_insensitively(self):
        """Test maintenance types are trimmed and lower-cased like the other flags."""
        reference = ReferenceData({"unavailable": {"maintenance_types": ["Not Installed"]}})

        assert reference.is_unavailable_flag(None, None, "  not INSTALLED ")
        assert not reference.is_unavailable_flag(None, None, "installed")

    def test_empty_reference_data(self):
        """Test an empty mapping falls back to defaults."""
        reference = ReferenceData({})

        assert reference.default_size == "4x12"
        assert reference.static_price("4x12", "عادي", "عادي", 1) is None
        assert reference.duration_multiplier(6) == Decimal("6")
        assert not reference.is_unavailable_flag("maintenance")


class TestLoadReferenceData:
    """Tests for load_reference_data."""

    def test_load_packaged_file(self):
        """Test the packaged file loads."""
        reference = load_reference_data()

        assert "4x12" in reference.canonical_sizes
        assert reference.source is not None

    def test_load_from_settings_path(self, tmp_path, monkeypatch):
        """Test the settings path is used when no path is given."""
        path = tmp_path / "reference.yaml"
        path.write_text('default_size: "3x9"\n', encoding="utf-8")
        monkeypatch.setenv("BILLING_REFERENCE_DATA_PATH", str(path))
        get_settings.cache_clear()

        reference = load_reference_data()

        assert reference.default_size == "3x9"
        assert reference.source == path

    def test_missing_file(self, tmp_path):
        """Test a missing file raises ReferenceDataError."""
        with pytest.raises(ReferenceDataError):
            load_reference_data(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Test malformed YAML raises ReferenceDataError."""
        path = tmp_path / "broken.yaml"
        path.write_text("static_pricing: [unclosed\n", encoding="utf-8")

        with pytest.raises(ReferenceDataError):
            load_reference_data(path)

    def test_non_mapping(self, tmp_path):
        """Test a YAML list is rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")

        with pytest.raises(ReferenceDataError):
            load_reference_data(path)


class TestLogging:
    """Tests for logging configuration."""

    def test_configure_json_logging(self, caplog):
        """Test JSON output renders structured fields."""
        configure_logging(level="info", json_output=True)
        caplog.set_level(logging.INFO)

        get_logger("billboard_billing.tests").info("Pricing cache refreshed", pricing_rows=3)

        assert '"event": "Pricing cache refreshed"' in caplog.text
        assert '"pricing_rows": 3' in caplog.text
