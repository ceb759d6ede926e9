# accounting/services/exceptions.py

"""
ACCOUNTING SERVICE ERRORS

Centralized domain errors for accounting services.
"""


class AccountingServiceError(Exception):
    """Base exception for all accounting service failures."""


class AccountResolutionError(AccountingServiceError):
    """Raised when an expected account cannot be found or provisioned."""


class TransactionCreationError(AccountingServiceError):
    """Raised when a transaction cannot be created or does not balance."""


class IdempotencyError(AccountingServiceError):
    """Raised on duplicate or retried accounting events."""
