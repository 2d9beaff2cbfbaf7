# accounting/api/views/__init__.py

"""
accounting.api.views package

Expose public API views cleanly without making routing/imports fragile.

Important:
- ViewSets are defined in accounting.api.view (singular) in this codebase.
- Do NOT import accounting.api.urls from here to avoid circular imports.
"""

from accounting.api.views.bank_transactions import DepositView, TransferView, WithdrawView
from accounting.api.views.trial_balance import TrialBalanceView

__all__ = [
    "DepositView",
    "WithdrawView",
    "TransferView",
    "TrialBalanceView",
]
