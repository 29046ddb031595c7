"""Installment schedule parsing, generation and validation."""

import json
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Literal, Optional

from pydantic import ValidationError

from billboard_billing.core.date_helpers import add_months, as_date, days_between
from billboard_billing.core.exceptions import InstallmentScheduleError, MalformedScheduleError
from billboard_billing.core.logging import get_logger
from billboard_billing.core.money import ZERO, clamp, floor_money, round_money, to_decimal
from billboard_billing.domain.entities.contracts import Installment

logger = get_logger(__name__)

MAX_INSTALLMENTS = 12
DEFAULT_HORIZON_MONTHS = 6
SCHEDULE_TOLERANCE = Decimal("1")

AT_SIGNING = "عند التوقيع"
MONTHLY = "شهري"
FIRST_PAYMENT = "الدفعة الأولى"
FIRST_PAYMENT_AT_SIGNING = "دفعة أولى عند التوقيع"
INTERVAL_LABELS = {
    1: "شهري",
    2: "شهرين",
    3: "ثلاثة أشهر",
    4: "4 أشهر",
}


def installment_label(number: int) -> str:
    """Statement label for the n-th installment."""
    return f"الدفعة {number}"


def parse_schedule(payload: Any) -> list[Installment]:
    """
    Decode a stored installment schedule.

    Args:
        payload: JSON text, a list of dicts, a list of Installment, or None

    Returns:
        Installments in stored order (not sorted, due dates may be missing)

    Raises:
        MalformedScheduleError: If the payload cannot be decoded into a list
    """
    if payload is None:
        return []

    data = payload
    if isinstance(payload, (str, bytes)):
        try:
            data = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedScheduleError(f"Installment schedule is not valid JSON: {e}", payload) from e

    if not isinstance(data, list):
        raise MalformedScheduleError(
            f"Installment schedule must be a list, got {type(data).__name__}", payload
        )

    installments: list[Installment] = []
    for item in data:
        if isinstance(item, Installment):
            installments.append(item)
        elif isinstance(item, dict):
            try:
                installments.append(Installment.model_validate(item))
            except ValidationError as e:
                raise MalformedScheduleError(f"Invalid installment entry: {e}", payload) from e
        # Scalars carry no due date and are dropped like undated entries.

    return installments


def sort_by_due_date(installments: list[Installment]) -> list[Installment]:
    """Drop undated installments and sort the rest by due date (stable)."""
    dated = [i for i in installments if i.due_date is not None]
    return sorted(dated, key=lambda i: i.due_date)


def schedule_total(installments: list[Installment]) -> Decimal:
    """Sum of installment amounts."""
    return sum((i.amount for i in installments), ZERO)


@dataclass(frozen=True)
class ScheduleValidation:
    """Result of checking a schedule against the contract total."""

    is_valid: bool
    message: str = ""


class InstallmentScheduler:
    """Generate installment schedules for a contract's final total."""

    def parse_schedule(self, payload: Any) -> list[Installment]:
        """See :func:`parse_schedule`."""
        return parse_schedule(payload)

    def distribute_evenly(
        self,
        final_total: Any,
        count: int,
        start_date: Optional[date] = None,
    ) -> list[Installment]:
        """
        Split the total into equal monthly installments.

        The count is clamped to [1, 12]. Each share is truncated to cents and
        the last installment takes the remainder. The first one is due at
        signing (``start_date``), then one per month.

        Raises:
            InstallmentScheduleError: If the total is not positive
        """
        total = to_decimal(final_total)
        if total <= 0:
            raise InstallmentScheduleError("Cannot distribute installments without a positive total")

        count = max(1, min(MAX_INSTALLMENTS, int(count)))
        first_date = as_date(start_date)
        even = floor_money(total / count)

        installments = []
        for i in range(count):
            is_last = i == count - 1
            amount = round_money(total - even * (count - 1)) if is_last else even
            installments.append(
                Installment(
                    amount=amount,
                    due_date=add_months(first_date, i),
                    description=FIRST_PAYMENT_AT_SIGNING if i == 0 else installment_label(i + 1),
                    payment_type=AT_SIGNING if i == 0 else MONTHLY,
                )
            )

        logger.debug("Installments distributed evenly", count=count, total=str(total))
        return installments

    def distribute_with_interval(
        self,
        final_total: Any,
        first_payment: Any,
        first_payment_type: Literal["amount", "percent"] = "amount",
        interval_months: int = 1,
        num_payments: Optional[int] = None,
        last_payment_date: Optional[date] = None,
        first_payment_date: Optional[date] = None,
        start_date: Optional[date] = None,
    ) -> list[Installment]:
        """
        Build a schedule of an optional first payment plus recurring payments.

        Args:
            final_total: Contract final total
            first_payment: First payment amount, or percentage of the total
            first_payment_type: ``"amount"`` or ``"percent"``
            interval_months: Months between recurring payments (1-4)
            num_payments: Number of recurring payments, clamped to [1, 12]
            last_payment_date: Alternative to ``num_payments``: count payments
                that fit between the first date and this date
            first_payment_date: Due date of the first payment
            start_date: Contract start, used when ``first_payment_date`` is unset

        Returns:
            Installments summing exactly to the total

        Raises:
            InstallmentScheduleError: On a non-positive total, an unsupported
                interval, or a first payment that is negative or above the total
        """
        total = to_decimal(final_total)
        if total <= 0:
            raise InstallmentScheduleError("Cannot distribute installments without a positive total")
        if interval_months not in INTERVAL_LABELS:
            raise InstallmentScheduleError(f"Unsupported interval: {interval_months} months")

        first_amount = to_decimal(first_payment)
        if first_payment_type == "percent":
            first_amount = round_money(total * clamp(first_amount, ZERO, Decimal("100")) / Decimal("100"))

        if first_amount > total:
            raise InstallmentScheduleError("First payment is larger than the total")
        if first_amount < 0:
            raise InstallmentScheduleError("First payment cannot be negative")

        first_date = first_payment_date or as_date(start_date)
        has_first_payment = first_amount > 0

        installments: list[Installment] = []
        if has_first_payment:
            installments.append(
                Installment(
                    amount=first_amount,
                    due_date=first_date,
                    description=FIRST_PAYMENT,
                    payment_type=AT_SIGNING,
                )
            )

        remaining = total - first_amount
        if remaining <= 0:
            return installments

        if num_payments and num_payments > 0:
            recurring_count = max(1, min(MAX_INSTALLMENTS, int(num_payments)))
        elif last_payment_date:
            months_span = max(1, round(days_between(first_date, last_payment_date) / 30))
            recurring_count = max(1, months_span // interval_months)
        else:
            recurring_count = max(1, DEFAULT_HORIZON_MONTHS // interval_months)

        recurring_amount = round_money(remaining / recurring_count)
        label = INTERVAL_LABELS[interval_months]

        running_total = first_amount
        for i in range(recurring_count):
            is_last = i == recurring_count - 1
            amount = total - running_total if is_last else recurring_amount
            month_offset = i + 1 if has_first_payment else i
            number = i + 2 if has_first_payment else i + 1

            installments.append(
                Installment(
                    amount=round_money(amount),
                    due_date=add_months(first_date, month_offset * interval_months),
                    description=installment_label(number),
                    payment_type=label,
                )
            )
            running_total += amount

        logger.debug(
            "Installments distributed with interval",
            first_payment=str(first_amount),
            recurring_count=recurring_count,
            interval_months=interval_months,
        )
        return installments

    def validate_schedule(self, installments: list[Installment], final_total: Any) -> ScheduleValidation:
        """Check the schedule is non-empty and sums to the total within one unit."""
        if not installments:
            return ScheduleValidation(False, "Schedule has no installments")

        difference = abs(schedule_total(installments) - to_decimal(final_total))
        if difference > SCHEDULE_TOLERANCE:
            return ScheduleValidation(False, "Installments do not add up to the contract total")

        return ScheduleValidation(True)
