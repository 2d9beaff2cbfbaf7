# accounting/models/__init__.py

"""
ACCOUNTING MODELS PACKAGE EXPORTS

Note:
- Keep this file *imports-only* (no business logic).
- Do NOT import services from models anywhere (models must stay pure).
"""

from accounting.models.account import Account
from accounting.models.bank_account import BankAccount
from accounting.models.category import AccountCategory
from accounting.models.financial_year import FinancialYear
from accounting.models.journal import JournalEntry
from accounting.models.journal_item import JournalItem

__all__ = [
    "AccountCategory",
    "Account",
    "FinancialYear",
    "JournalEntry",
    "JournalItem",
    "BankAccount",
]
