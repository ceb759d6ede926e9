# impairment/services/exceptions.py

"""
IMPAIRMENT SERVICE ERRORS

Every error carries the HTTP status the API answers with.
"""

from __future__ import annotations

from accounting.services.exceptions import (
    AccountingServiceError,
    AccountResolutionError,
)


class ImpairmentError(AccountingServiceError):
    """Base exception for impairment engine failures."""

    status_code = 400
    default_message = "Impairment request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotAuthenticated(ImpairmentError):
    status_code = 401
    default_message = "Not authenticated"


class TenantNotFound(ImpairmentError):
    status_code = 403
    default_message = "No active company is linked to this user"


class ValidationFailure(ImpairmentError):
    status_code = 400
    default_message = "Invalid request"


class AlreadyPosted(ImpairmentError):
    status_code = 409
    default_message = "Already posted for this period"


class PeriodLocked(ImpairmentError):
    status_code = 423
    default_message = "Period is locked"


class AccountResolutionFailure(ImpairmentError, AccountResolutionError):
    status_code = 500
    default_message = "Required ledger account could not be resolved"


class PostingFailure(ImpairmentError):
    status_code = 500
    default_message = "Impairment transaction could not be written"
