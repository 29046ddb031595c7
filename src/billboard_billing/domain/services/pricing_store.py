"""Persisted custom pricing lookup and its explicit cache."""

import time
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional, Tuple

from billboard_billing.core.config_loader import flip_size, normalize_size_name
from billboard_billing.core.logging import get_logger
from billboard_billing.domain.entities.billboards import PricingEntry, SizeEntry

logger = get_logger(__name__)

PricingLoader = Callable[[], Tuple[Iterable[PricingEntry], Iterable[SizeEntry]]]


def _size_ref(value: Any) -> Tuple[Optional[int], Optional[str]]:
    """Split a size reference into (size_id, normalized size name)."""
    if value is None or isinstance(value, bool):
        return None, None
    if isinstance(value, int):
        return value, None

    text = str(value).strip()
    if not text:
        return None, None
    try:
        return int(text), None
    except ValueError:
        return None, normalize_size_name(text)


class PricingStore:
    """
    In-memory index over the persisted pricing rows.

    A row matches a lookup when its size (by ID, then by name), level and
    customer category all match. Rows are consulted in the order given, the
    first match wins.
    """

    def __init__(
        self,
        entries: Iterable[PricingEntry] = (),
        sizes: Iterable[SizeEntry] = (),
    ) -> None:
        self.entries: list[PricingEntry] = list(entries)
        self.sizes: list[SizeEntry] = list(sizes)

    def __len__(self) -> int:
        return len(self.entries)

    def resolve_size_id(self, size_name: str) -> Optional[int]:
        """Find the size ID for a normalized size name, trying flipped dimensions too."""
        flipped = flip_size(size_name)
        for size in self.sizes:
            name = normalize_size_name(size.name)
            if name == size_name or (flipped is not None and name == flipped):
                return size.id
        return None

    def _find_by_id(self, size_id: int, level: str, category: str) -> Optional[PricingEntry]:
        for entry in self.entries:
            if entry.size_id == size_id and entry.level == level and entry.customer_category == category:
                return entry
        return None

    def _find_by_name(self, size_name: str, level: str, category: str) -> Optional[PricingEntry]:
        for entry in self.entries:
            if (
                normalize_size_name(entry.size) == size_name
                and entry.level == level
                and entry.customer_category == category
            ):
                return entry
        return None

    def candidates(self, size_ref: Any, level: Any, customer_category: Any) -> list[PricingEntry]:
        """
        All rows matching a key, in lookup order.

        Order: by size ID, by size name, by the size ID resolved from the
        name through the sizes table, by flipped size name.
        """
        size_id, size_name = _size_ref(size_ref)
        norm_level = str(level or "").strip()
        norm_category = str(customer_category or "").strip()

        found: list[PricingEntry] = []

        def add(entry: Optional[PricingEntry]) -> None:
            if entry is not None and entry not in found:
                found.append(entry)

        if size_id is not None:
            add(self._find_by_id(size_id, norm_level, norm_category))

        if size_name:
            add(self._find_by_name(size_name, norm_level, norm_category))

            resolved_id = self.resolve_size_id(size_name)
            if resolved_id is not None:
                add(self._find_by_id(resolved_id, norm_level, norm_category))

            flipped = flip_size(size_name)
            if flipped:
                add(self._find_by_name(flipped, norm_level, norm_category))

        return found

    def monthly_price(self, size_ref: Any, level: Any, customer_category: Any, months: int) -> Optional[Decimal]:
        """Price for a month duration, or None when no matching row has that column."""
        for entry in self.candidates(size_ref, level, customer_category):
            price = entry.price_for_months(months)
            if price is not None:
                return price
        return None

    def daily_price(self, size_ref: Any, level: Any, customer_category: Any) -> Optional[Decimal]:
        """Daily price, or None when no matching row has one."""
        for entry in self.candidates(size_ref, level, customer_category):
            if entry.one_day is not None:
                return entry.one_day
        return None


class PricingCache:
    """
    Time-bounded holder for a PricingStore built by a loader.

    The loader is the data-access layer's fetch function; the clock is
    injectable so expiry can be tested without sleeping.
    """

    def __init__(
        self,
        loader: PricingLoader,
        ttl_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self._ttl = ttl_seconds
        self._clock = clock
        self._store: Optional[PricingStore] = None
        self._loaded_at: Optional[float] = None

    @property
    def is_stale(self) -> bool:
        """Whether the next ``get()`` will reload."""
        if self._store is None or self._loaded_at is None:
            return True
        return self._clock() - self._loaded_at >= self._ttl

    def get(self) -> PricingStore:
        """Return the cached store, reloading it when stale."""
        if self._store is None or self.is_stale:
            return self.refresh()
        return self._store

    def refresh(self) -> PricingStore:
        """Reload pricing rows now."""
        entries, sizes = self._loader()
        self._store = PricingStore(entries, sizes)
        self._loaded_at = self._clock()
        logger.info(
            "Pricing cache refreshed",
            pricing_rows=len(self._store.entries),
            sizes=len(self._store.sizes),
        )
        return self._store

    def invalidate(self) -> None:
        """Drop the cached store."""
        self._store = None
        self._loaded_at = None
