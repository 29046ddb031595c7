"""Overdue installment reconciliation and collections rollups."""

from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from billboard_billing.core.config import get_settings
from billboard_billing.core.date_helpers import as_date, days_between
from billboard_billing.core.exceptions import MalformedScheduleError
from billboard_billing.core.logging import get_logger
from billboard_billing.core.money import ZERO
from billboard_billing.domain.entities.billing import (
    FleetOverdueRecord,
    InstallmentAllocation,
    OverdueInstallment,
    OverdueSummary,
)
from billboard_billing.domain.entities.contracts import Contract, Installment, Payment
from billboard_billing.domain.services.installment_service import parse_schedule, sort_by_due_date

logger = get_logger(__name__)


def group_payments_by_contract(payments: Iterable[Payment]) -> Dict[int, List[Payment]]:
    """Group a flat list of payment rows by contract number."""
    grouped: Dict[int, List[Payment]] = defaultdict(list)
    for payment in payments:
        grouped[payment.contract_number].append(payment)
    return dict(grouped)


def summarize(records: Sequence[OverdueInstallment]) -> OverdueSummary:
    """
    Roll up overdue records into a single summary.

    The oldest record is the one with the most days overdue; on ties the
    first one seen wins.
    """
    if not records:
        return OverdueSummary()

    oldest = records[0]
    for record in records[1:]:
        if record.days_overdue > oldest.days_overdue:
            oldest = record

    return OverdueSummary(
        has_overdue=True,
        oldest_due_date=oldest.due_date,
        oldest_days_overdue=oldest.days_overdue,
        total_overdue_amount=sum((r.installment_amount for r in records), ZERO),
        overdue_count=len(records),
    )


def summarize_by_customer(records: Iterable[OverdueInstallment]) -> Dict[str, OverdueSummary]:
    """
    Roll up overdue records per customer.

    Records are keyed by customer ID, or by customer name when the contract
    has no customer ID.
    """
    grouped: Dict[str, List[OverdueInstallment]] = defaultdict(list)
    for record in records:
        grouped[record.customer_id or record.customer_name].append(record)
    return {customer: summarize(items) for customer, items in grouped.items()}


class OverdueReconciler:
    """
    Match cumulative payments against installment schedules.

    Payments are not linked to specific installments: each contract's total
    paid is applied to its installments in due-date order (FIFO). Only
    installments whose due date has passed consume the pool.

    All operations are pure given their inputs and ``today``.
    """

    def __init__(
        self,
        unknown_customer_name: Optional[str] = None,
        default_description: Optional[str] = None,
        top_overdue_limit: Optional[int] = None,
    ) -> None:
        settings = get_settings()
        self.unknown_customer_name = unknown_customer_name or settings.unknown_customer_name
        self.default_description = default_description or settings.default_installment_description
        self.top_overdue_limit = (
            top_overdue_limit if top_overdue_limit is not None else settings.top_overdue_limit
        )

    def allocate(
        self,
        installments: Iterable[Installment],
        total_paid: Decimal,
        today: date | datetime | None = None,
    ) -> List[InstallmentAllocation]:
        """
        Allocate a contract's total paid to its installments, oldest first.

        Args:
            installments: Parsed schedule (any order; undated entries are dropped)
            total_paid: Sum of the contract's payments
            today: Reference date (defaults to today)

        Returns:
            One allocation per dated installment, in due-date order. Installments
            not yet due get ``allocated=0`` and their full amount outstanding.
        """
        today = as_date(today)
        remaining = total_paid

        allocations = []
        for installment in sort_by_due_date(list(installments)):
            days_overdue = days_between(installment.due_date, today)
            allocated = ZERO
            if days_overdue > 0:
                allocated = min(installment.amount, max(ZERO, remaining))
                remaining = max(ZERO, remaining - allocated)

            allocations.append(
                InstallmentAllocation(
                    amount=installment.amount,
                    due_date=installment.due_date,
                    description=installment.description or self.default_description,
                    days_overdue=days_overdue,
                    allocated=allocated,
                    outstanding=max(ZERO, installment.amount - allocated),
                )
            )

        return allocations

    def reconcile_contract(
        self,
        contract: Contract,
        payments: Iterable[Payment],
        today: date | datetime | None = None,
    ) -> List[OverdueInstallment]:
        """
        Overdue records for one contract.

        Raises:
            MalformedScheduleError: If the contract's schedule cannot be decoded
        """
        installments = parse_schedule(contract.installments_schedule)
        total_paid = sum((p.amount for p in payments), ZERO)

        records = []
        for allocation in self.allocate(installments, total_paid, today):
            if not allocation.is_overdue:
                continue
            records.append(
                OverdueInstallment(
                    contract_number=contract.contract_number,
                    customer_name=contract.customer_name or self.unknown_customer_name,
                    customer_id=contract.customer_id,
                    installment_amount=allocation.outstanding,
                    due_date=allocation.due_date,
                    description=allocation.description,
                    days_overdue=allocation.days_overdue,
                )
            )
        return records

    def reconcile(
        self,
        contracts: Iterable[Contract],
        payments_by_contract: Mapping[int, Iterable[Payment]],
        today: date | datetime | None = None,
    ) -> List[OverdueInstallment]:
        """
        Overdue installment records across a batch of contracts.

        A contract whose schedule cannot be decoded is logged and skipped;
        the rest of the batch is still reconciled.

        Args:
            contracts: Contracts with their installment schedules
            payments_by_contract: Payments keyed by contract number
            today: Reference date (defaults to today)

        Returns:
            Overdue records, grouped by contract in input order and by due
            date within a contract
        """
        today = as_date(today)
        records: List[OverdueInstallment] = []

        for contract in contracts:
            payments = payments_by_contract.get(contract.contract_number, [])
            try:
                records.extend(self.reconcile_contract(contract, payments, today))
            except MalformedScheduleError as e:
                logger.warning(
                    "Skipping contract with malformed installment schedule",
                    contract_number=contract.contract_number,
                    error=str(e),
                )

        logger.debug("Overdue reconciliation complete", overdue_records=len(records), today=str(today))
        return records

    def summarize(self, records: Sequence[OverdueInstallment]) -> OverdueSummary:
        """See :func:`summarize`."""
        return summarize(records)

    def summarize_by_customer(self, records: Iterable[OverdueInstallment]) -> Dict[str, OverdueSummary]:
        """See :func:`summarize_by_customer`."""
        return summarize_by_customer(records)

    def top_overdue_contracts(
        self,
        contracts: Iterable[Contract],
        today: date | datetime | None = None,
        limit: Optional[int] = None,
    ) -> List[FleetOverdueRecord]:
        """
        Expired contracts that still carry an outstanding balance.

        This is a coarse dashboard view based on contract totals and end
        dates only; it ignores the installment schedule and can disagree
        with :meth:`reconcile`.

        Args:
            contracts: Contracts to scan
            today: Reference date (defaults to today)
            limit: Maximum number of records (defaults to the configured limit)

        Returns:
            Records sorted by days overdue, most overdue first
        """
        today = as_date(today)
        limit = self.top_overdue_limit if limit is None else limit

        records = []
        for contract in contracts:
            if contract.end_date is None:
                continue

            days_overdue = days_between(contract.end_date, today)
            remaining = contract.remaining
            if days_overdue <= 0 or remaining <= 0:
                continue

            records.append(
                FleetOverdueRecord(
                    customer_id=contract.customer_id or "",
                    customer_name=contract.customer_name or self.unknown_customer_name,
                    contract_number=contract.contract_number,
                    amount=remaining,
                    days_overdue=days_overdue,
                    due_date=contract.end_date,
                )
            )

        records.sort(key=lambda r: r.days_overdue, reverse=True)
        return records[: max(0, limit)]
