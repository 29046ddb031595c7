"""Layered price resolution for a single billboard."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Optional, Sequence

from billboard_billing.core.config_loader import ReferenceData
from billboard_billing.core.logging import get_logger
from billboard_billing.core.money import ZERO, round_money, to_decimal
from billboard_billing.domain.entities.billboards import Billboard
from billboard_billing.domain.entities.contracts import PricingMode
from billboard_billing.domain.services.pricing_store import PricingStore

logger = get_logger(__name__)

DAYS_PER_MONTH = Decimal("30")


@dataclass(frozen=True)
class PriceQuery:
    """Lookup key for one billboard price."""

    size: str
    level: Any
    customer_category: str
    months: int = 1
    size_id: Optional[int] = None


PriceTier = Callable[[PriceQuery], Optional[Decimal]]


class PricingResolver:
    """
    Resolve billboard prices by trying pricing tiers in order.

    Monthly tiers default to: persisted custom pricing, then the static
    reference table. Daily tiers default to: persisted daily price, static
    daily price, then a price derived from the one-month price / 30. A tier
    returns None on a miss and the next tier is tried; misses never raise.

    Custom tier lists can be passed in to add or reorder tiers without
    changing callers.
    """

    def __init__(
        self,
        reference: ReferenceData,
        store: Optional[PricingStore] = None,
        monthly_tiers: Optional[Sequence[PriceTier]] = None,
        daily_tiers: Optional[Sequence[PriceTier]] = None,
    ) -> None:
        self.reference = reference
        self.store = store if store is not None else PricingStore()
        self.monthly_tiers: list[PriceTier] = list(
            monthly_tiers if monthly_tiers is not None else (self.custom_monthly, self.static_monthly)
        )
        self.daily_tiers: list[PriceTier] = list(
            daily_tiers
            if daily_tiers is not None
            else (self.custom_daily, self.static_daily, self.derived_daily)
        )

    # ============================================
    # Tiers
    # ============================================

    def _store_refs(self, query: PriceQuery) -> list[Any]:
        refs: list[Any] = []
        if query.size_id is not None:
            refs.append(query.size_id)
        if query.size:
            refs.append(query.size)
        return refs

    def custom_monthly(self, query: PriceQuery) -> Optional[Decimal]:
        """Persisted custom price for an exact key."""
        for ref in self._store_refs(query):
            price = self.store.monthly_price(ref, query.level, query.customer_category, query.months)
            if price is not None:
                return price
        return None

    def static_monthly(self, query: PriceQuery) -> Optional[Decimal]:
        """
        Reference price keyed by canonical size and level.

        Persisted rows are checked again under the canonical key (so a ``VIP``
        row serves a billboard stored as ``vip``) before the static table.
        """
        size = self.reference.canonical_size(query.size)
        level = self.reference.canonical_level(query.level)
        category = str(query.customer_category).strip()

        price = self.store.monthly_price(size, level, category, query.months)
        if price is not None:
            return price
        return self.reference.static_price(size, level, category, query.months)

    def custom_daily(self, query: PriceQuery) -> Optional[Decimal]:
        """Persisted daily price for an exact key."""
        for ref in self._store_refs(query):
            price = self.store.daily_price(ref, query.level, query.customer_category)
            if price is not None:
                return price
        return None

    def static_daily(self, query: PriceQuery) -> Optional[Decimal]:
        """Daily reference price: persisted rows under the canonical key, then the static daily table."""
        size = self.reference.canonical_size(query.size)
        level = self.reference.canonical_level(query.level)
        category = str(query.customer_category).strip()

        price = self.store.daily_price(size, level, category)
        if price is not None:
            return price
        return self.reference.static_daily_price(size, level, category)

    def derived_daily(self, query: PriceQuery) -> Optional[Decimal]:
        """One-month price (custom, then static) / 30, rounded to cents."""
        one_month = PriceQuery(
            size=query.size,
            level=query.level,
            customer_category=query.customer_category,
            months=1,
            size_id=query.size_id,
        )
        monthly = self.custom_monthly(one_month)
        if monthly is None:
            monthly = self.static_monthly(one_month)
        if not monthly:
            return None
        return round_money(monthly / DAYS_PER_MONTH)

    # ============================================
    # Resolution
    # ============================================

    def resolve_monthly(
        self,
        size: str,
        level: Any,
        customer_category: str,
        months: int,
        size_id: Optional[int] = None,
    ) -> Optional[Decimal]:
        """
        Price of a billboard for a whole month-based duration.

        Returns:
            The first tier's price, or None when every tier misses (callers
            then fall back to the billboard's own monthly price × months)
        """
        query = PriceQuery(size, level, customer_category, months, size_id)
        for tier in self.monthly_tiers:
            price = tier(query)
            if price is not None:
                logger.debug(
                    "Monthly price resolved",
                    tier=getattr(tier, "__name__", repr(tier)),
                    size=size,
                    level=level,
                    customer_category=customer_category,
                    months=months,
                    price=str(price),
                )
                return to_decimal(price)

        logger.debug(
            "No monthly price found",
            size=size,
            size_id=size_id,
            level=level,
            customer_category=customer_category,
            months=months,
        )
        return None

    def resolve_daily(
        self,
        size: str,
        level: Any,
        customer_category: str,
        size_id: Optional[int] = None,
    ) -> Decimal:
        """Daily price of a billboard; zero when nothing resolves."""
        query = PriceQuery(size, level, customer_category, 1, size_id)
        for tier in self.daily_tiers:
            price = tier(query)
            if price is not None:
                return to_decimal(price)

        logger.debug(
            "No daily price found",
            size=size,
            size_id=size_id,
            level=level,
            customer_category=customer_category,
        )
        return ZERO

    def resolve_price(
        self,
        size: str,
        level: Any,
        customer_category: str,
        duration: int,
        mode: PricingMode | str,
        size_id: Optional[int] = None,
    ) -> Optional[Decimal]:
        """
        Resolve a price in either pricing mode.

        Args:
            size: Size label
            level: Billboard level
            customer_category: Customer pricing category
            duration: Months (months mode); ignored in days mode
            mode: ``"months"`` or ``"days"``
            size_id: Optional size table ID, tried before the label

        Returns:
            months mode: price for the whole duration or None;
            days mode: daily price (zero when nothing resolves)
        """
        if mode == PricingMode.DAYS:
            return self.resolve_daily(size, level, customer_category, size_id)
        return self.resolve_monthly(size, level, customer_category, duration, size_id)

    def price_billboard(
        self,
        billboard: Billboard,
        mode: PricingMode | str,
        duration_months: int,
        duration_days: int,
        customer_category: str,
    ) -> Decimal:
        """
        Price one billboard for a contract duration, as shown per line in the editor.

        Months mode returns the resolved price or zero (no billboard-price
        fallback); days mode returns daily price × days.
        """
        if mode != PricingMode.DAYS:
            months = max(0, int(duration_months or 0))
            price = self.resolve_monthly(
                billboard.size, billboard.level, customer_category, months, billboard.size_id
            )
            return price if price is not None else ZERO

        days = max(0, int(duration_days or 0))
        daily = self.resolve_daily(billboard.size, billboard.level, customer_category, billboard.size_id)
        return daily * days
