# accounting/services/exceptions.py

"""
ACCOUNTING SERVICE ERRORS

Centralized domain errors for accounting services.

Each error carries a stable `code` the API layer returns next to `detail`.
"""


class AccountingServiceError(Exception):
    """Base exception for all accounting service failures."""

    code = "accounting_error"


class LedgerValidationError(AccountingServiceError):
    """Raised on malformed or missing input (dates, narration, amounts, items)."""

    code = "validation_error"


class InvalidAmount(LedgerValidationError):
    """Raised when an amount cannot be parsed as a finite decimal."""

    code = "invalid_amount"


class SameAccountError(LedgerValidationError):
    """Raised when a transfer's source and destination are the same account."""

    code = "same_account"


class UnbalancedEntryError(AccountingServiceError):
    """Raised when posting a draft whose debits and credits differ."""

    code = "unbalanced_entry"


class InvalidStateError(AccountingServiceError):
    """Raised when a transition or delete is not allowed from the current status."""

    code = "invalid_state"


class NotFoundError(AccountingServiceError):
    """Raised when a referenced row does not exist or belongs to another business."""

    code = "not_found"


class ConcurrencyConflictError(AccountingServiceError):
    """Reserved for optimistic-lock conflicts. Nothing raises it yet."""

    code = "concurrency_conflict"
