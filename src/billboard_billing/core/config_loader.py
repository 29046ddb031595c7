"""Reference data loader for static pricing and billboard status sets."""

import re
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Union

import yaml

from billboard_billing.core.config import get_settings
from billboard_billing.core.exceptions import ReferenceDataError
from billboard_billing.core.logging import get_logger
from billboard_billing.core.money import round_units, to_decimal

logger = get_logger(__name__)

DEFAULT_REFERENCE_PATH = Path(__file__).parent.parent / "data" / "reference_data.yaml"

_SIZE_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)x(\d+(?:\.\d+)?)(.*)$")


def normalize_size_name(value: Any) -> str:
    """
    Normalize a size label for comparison.

    Examples:
        >>> normalize_size_name(" 12 × 4 ")
        '12x4'
    """
    text = str(value or "").strip().lower()
    text = re.sub(r"\s+", "", text)
    return text.replace("×", "x").replace("*", "x")


def flip_size(size: str) -> Optional[str]:
    """Swap the dimensions of a normalized size label (``"4x12"`` -> ``"12x4"``)."""
    match = _SIZE_PATTERN.match(size)
    if not match:
        return None
    return f"{match.group(2)}x{match.group(1)}{match.group(3)}"


def _normalize_flag(value: Any) -> str:
    return str(value or "").strip().lower()


class ReferenceData:
    """
    Read-only view over the reference YAML.

    Instances are plain objects passed to the services that need them; nothing
    here is cached at module level.
    """

    def __init__(self, raw: Dict[str, Any], source: Optional[Path] = None):
        self._config = raw or {}
        self.source = source

        unavailable = self._config.get("unavailable", {}) or {}
        self.rented_statuses: FrozenSet[str] = frozenset(
            _normalize_flag(s) for s in unavailable.get("rented_statuses", []) or []
        )
        self.unavailable_statuses: FrozenSet[str] = (
            frozenset(_normalize_flag(s) for s in unavailable.get("statuses", []) or [])
            | self.rented_statuses
        )
        self.unavailable_maintenance_statuses: FrozenSet[str] = frozenset(
            _normalize_flag(s) for s in unavailable.get("maintenance_statuses", []) or []
        )
        self.unavailable_maintenance_types: FrozenSet[str] = frozenset(
            _normalize_flag(s) for s in unavailable.get("maintenance_types", []) or []
        )

    # ============================================
    # Sizes & Levels
    # ============================================

    @property
    def canonical_sizes(self) -> List[str]:
        """Known canonical size names (e.g. ``"4x12"``)."""
        return [str(s) for s in self._config.get("canonical_sizes", [])]

    @property
    def default_size(self) -> str:
        """Size assumed when a billboard has none."""
        return str(self._config.get("default_size", "4x12"))

    @property
    def default_level(self) -> str:
        """Level assumed when a billboard has none."""
        return str(self._config.get("default_level", "عادي"))

    def canonical_size(self, size: Any) -> str:
        """
        Canonicalize a size label against the known sizes.

        Separators and dimension order are normalized, so ``"12*4"`` and
        ``"4×12"`` both become ``"4x12"``. Unknown sizes come back normalized.
        """
        text = normalize_size_name(size)
        if not text:
            return self.default_size

        known = self.canonical_sizes
        if text in known:
            return text
        flipped = flip_size(text)
        if flipped and flipped in known:
            return flipped
        return text

    def canonical_level(self, level: Any) -> str:
        """Map a raw level through the alias table; unknown levels pass through trimmed."""
        text = str(level or "").strip()
        if not text:
            return self.default_level

        aliases = self._config.get("level_aliases", {}) or {}
        if text in aliases:
            return str(aliases[text])
        lowered = text.lower()
        if lowered in aliases:
            return str(aliases[lowered])
        return text

    @property
    def customer_categories(self) -> List[str]:
        """Built-in customer pricing categories."""
        return [str(c) for c in self._config.get("customer_categories", [])]

    # ============================================
    # Static Pricing
    # ============================================

    def duration_multiplier(self, months: int) -> Decimal:
        """Multiplier applied to the one-month base price for ``months``."""
        multipliers = self._config.get("duration_multipliers", {}) or {}
        if months in multipliers:
            return to_decimal(multipliers[months])
        return Decimal(months)

    def base_monthly_price(self, size: str, level: str, customer_category: str) -> Optional[Decimal]:
        """One-month static price for an exact (size, level, category) key."""
        table = self._config.get("static_pricing", {}) or {}
        by_level = table.get(size) or {}
        by_category = by_level.get(level) or {}
        price = by_category.get(customer_category)
        if not price:
            return None
        return to_decimal(price)

    def static_price(self, size: str, level: str, customer_category: str, months: int) -> Optional[Decimal]:
        """
        Static price for a duration in months.

        Returns:
            ``round(base × multiplier)``, or None when the key is not in the table
        """
        base = self.base_monthly_price(size, level, customer_category)
        if base is None:
            return None
        return round_units(base * self.duration_multiplier(months))

    def static_daily_price(self, size: str, level: str, customer_category: str) -> Optional[Decimal]:
        """Daily static price for an exact key, None when not listed."""
        table = self._config.get("static_daily_pricing", {}) or {}
        price = ((table.get(size) or {}).get(level) or {}).get(customer_category)
        if price is None:
            return None
        return to_decimal(price)

    # ============================================
    # Billboard Status
    # ============================================

    def is_unavailable_flag(
        self,
        status: Any = None,
        maintenance_status: Any = None,
        maintenance_type: Any = None,
    ) -> bool:
        """
        Check whether any status flag makes the billboard unavailable.

        All three flags are compared trimmed and lower-cased, including
        ``maintenance_type``, so stored English labels match in any case.
        """
        return (
            _normalize_flag(status) in self.unavailable_statuses
            or _normalize_flag(maintenance_status) in self.unavailable_maintenance_statuses
            or _normalize_flag(maintenance_type) in self.unavailable_maintenance_types
        )

    def is_rented_status(self, status: Any = None) -> bool:
        """Whether the status label itself marks the billboard as rented."""
        return _normalize_flag(status) in self.rented_statuses


def load_reference_data(path: Optional[Union[str, Path]] = None) -> ReferenceData:
    """
    Load reference data from YAML.

    Args:
        path: YAML file path. If None, uses ``Settings.reference_data_path``
            and then the file packaged with the engine.

    Returns:
        ReferenceData instance

    Raises:
        ReferenceDataError: If the file is missing or is not a YAML mapping
    """
    if path is None:
        path = get_settings().reference_data_path or DEFAULT_REFERENCE_PATH

    config_path = Path(path)
    if not config_path.exists():
        raise ReferenceDataError(f"Reference data file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ReferenceDataError(f"Invalid reference data file {config_path}: {e}") from e

    if not isinstance(raw, dict):
        raise ReferenceDataError(f"Reference data file {config_path} must contain a mapping")

    logger.debug("Reference data loaded", path=str(config_path))
    return ReferenceData(raw, source=config_path)
