"""Error taxonomy for the marketplace API.

Every error carries the HTTP status it maps to and a short, client-safe
message. The FastAPI exception handlers in `marketplace.api.main` turn these
into `{"error": message}` responses.
"""

from __future__ import annotations


class MarketplaceError(Exception):
    status_code: int = 400
    message: str = "Request could not be processed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message

    def __str__(self) -> str:
        return self.message


# Authorization guard
class MissingIdentity(MarketplaceError):
    status_code = 400
    message = "Profile ID is missing in the request header"


class UnknownIdentity(MarketplaceError):
    status_code = 404
    message = "Profile not found"


class Unauthorized(MarketplaceError):
    status_code = 403
    message = "Unauthorized: Access denied"


# Lookups
class JobNotFound(MarketplaceError):
    status_code = 404
    message = "Job not found"


class ContractNotFound(MarketplaceError):
    status_code = 404
    message = "Contract not found"


# Payments
class AlreadyPaid(MarketplaceError):
    status_code = 409
    message = "Job has already been paid"


class ContractNotActive(MarketplaceError):
    status_code = 400
    message = "Job belongs to a contract that is not in progress"


class InsufficientBalance(MarketplaceError):
    status_code = 400
    message = "Insufficient balance"


# Deposits
class InvalidAmount(MarketplaceError):
    status_code = 400
    message = "Deposit amount must be a positive number"


class DepositLimitExceeded(MarketplaceError):
    status_code = 400
    message = "Deposit amount exceeds maximum allowed"


# Reports
class InvalidDateRange(MarketplaceError):
    status_code = 400
    message = "Invalid date range: start must not be after end"


class NoReportData(MarketplaceError):
    status_code = 404
    message = "No data for the given range"


# Store
class TransientStoreError(MarketplaceError):
    """Raised when a transaction keeps conflicting after its single retry."""

    status_code = 503
    message = "The request could not be completed, please retry"