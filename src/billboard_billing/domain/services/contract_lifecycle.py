"""Contract expiry and billboard availability rules."""

from datetime import date, datetime
from typing import Any, Optional

from billboard_billing.core.config_loader import ReferenceData
from billboard_billing.core.date_helpers import (
    as_date,
    ceil_days,
    end_of_day,
    noon,
    parse_date,
    start_of_day,
)
from billboard_billing.domain.entities.billboards import Billboard
from billboard_billing.domain.entities.billing import BillboardStatus


class ContractLifecycleClassifier:
    """
    Classify contracts and billboards relative to a reference date.

    A contract is expired once the whole of its end day has passed, so a
    contract ending today is still live. Maintenance flags always win over
    contract dates.
    """

    def __init__(self, reference: ReferenceData) -> None:
        self.reference = reference

    def is_expired(self, end_date: Any, today: date | datetime | None = None) -> bool:
        """True when the end day is before today; missing or unparseable dates are never expired."""
        end = parse_date(end_date)
        if end is None:
            return False
        return end_of_day(end) < start_of_day(as_date(today))

    def is_active(self, start_date: Any, end_date: Any, today: date | datetime | None = None) -> bool:
        """True when today (taken at noon) falls within [start 00:00, end 23:59:59]."""
        start = parse_date(start_date)
        end = parse_date(end_date)
        if start is None or end is None:
            return False
        return start_of_day(start) <= noon(as_date(today)) <= end_of_day(end)

    def days_until_expiry(self, end_date: Any, today: date | datetime | None = None) -> Optional[int]:
        """
        Whole days left until the contract ends.

        Counts from the start of today to the end of the end day, rounded up:
        1 when the contract ends today, 0 when it ended yesterday, negative
        further back. None without an end date.
        """
        end = parse_date(end_date)
        if end is None:
            return None
        return ceil_days(end_of_day(end) - start_of_day(as_date(today)))

    def is_under_maintenance(self, billboard: Billboard) -> bool:
        """Whether a status flag takes the billboard out of service."""
        status = None if self.reference.is_rented_status(billboard.status) else billboard.status
        return self.reference.is_unavailable_flag(
            status, billboard.maintenance_status, billboard.maintenance_type
        )

    def is_billboard_available(self, billboard: Billboard, today: date | datetime | None = None) -> bool:
        """
        Whether the billboard can be booked.

        Out-of-service flags and a rented status label make it unavailable
        regardless of dates. Without a contract it is available. With a
        contract but no end date it is treated as rented. Otherwise it is
        available once the contract has expired.
        """
        if self.reference.is_unavailable_flag(
            billboard.status, billboard.maintenance_status, billboard.maintenance_type
        ):
            return False
        if billboard.contract_number is None:
            return True
        if billboard.end_date is None:
            return False
        return self.is_expired(billboard.end_date, today)

    def should_show_contract_info(self, billboard: Billboard, today: date | datetime | None = None) -> bool:
        """Show contract details while a contract is attached and not expired."""
        if billboard.contract_number is None:
            return False
        return billboard.end_date is None or not self.is_expired(billboard.end_date, today)

    def classify_billboard(self, billboard: Billboard, today: date | datetime | None = None) -> BillboardStatus:
        """Map a billboard to maintenance, available or rented."""
        if self.is_under_maintenance(billboard):
            return BillboardStatus.MAINTENANCE
        if self.is_billboard_available(billboard, today):
            return BillboardStatus.AVAILABLE
        return BillboardStatus.RENTED
