"""Billing engine exceptions."""


class BillingError(Exception):
    """Base class for billing engine errors."""


class MalformedScheduleError(BillingError):
    """Installment schedule payload could not be decoded."""

    def __init__(self, message: str, payload: object = None) -> None:
        super().__init__(message)
        self.payload = payload


class InstallmentScheduleError(BillingError):
    """Installment schedule could not be generated from the given inputs."""


class ReferenceDataError(BillingError):
    """Reference data file is missing or invalid."""
