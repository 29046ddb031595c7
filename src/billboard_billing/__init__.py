"""Billboard contract billing and installment reconciliation engine."""

__version__ = "0.1.0"
