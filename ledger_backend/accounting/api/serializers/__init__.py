# accounting/api/serializers/__init__.py

from accounting.api.serializers.accounts import (
    AccountCategorySerializer,
    AccountCreateSerializer,
    AccountSerializer,
    AccountUpdateSerializer,
)
from accounting.api.serializers.bank_accounts import (
    BankAccountCreateSerializer,
    BankAccountSerializer,
    BankAccountUpdateSerializer,
    ReconcileSerializer,
    StatementQuerySerializer,
)
from accounting.api.serializers.bank_transactions import (
    DepositSerializer,
    TransferSerializer,
    WithdrawSerializer,
)
from accounting.api.serializers.financial_years import (
    FinancialYearCreateSerializer,
    FinancialYearSerializer,
    FinancialYearUpdateSerializer,
)
from accounting.api.serializers.journal_entries import (
    JournalEntrySerializer,
    JournalEntryWriteSerializer,
    JournalItemSerializer,
)

__all__ = [
    "AccountCategorySerializer",
    "AccountSerializer",
    "AccountCreateSerializer",
    "AccountUpdateSerializer",
    "FinancialYearSerializer",
    "FinancialYearCreateSerializer",
    "FinancialYearUpdateSerializer",
    "JournalEntrySerializer",
    "JournalEntryWriteSerializer",
    "JournalItemSerializer",
    "BankAccountSerializer",
    "BankAccountCreateSerializer",
    "BankAccountUpdateSerializer",
    "ReconcileSerializer",
    "StatementQuerySerializer",
    "DepositSerializer",
    "WithdrawSerializer",
    "TransferSerializer",
]
