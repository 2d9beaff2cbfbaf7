# accounting/api/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

# Canonical ViewSets live in accounting/api/view.py (singular) in this project.
# We import directly to avoid circular imports through views/__init__.py.
from accounting.api.view import (
    AccountCategoryViewSet,
    AccountViewSet,
    BankAccountViewSet,
    FinancialYearViewSet,
    JournalEntryViewSet,
)
from accounting.api.views.bank_transactions import DepositView, TransferView, WithdrawView
from accounting.api.views.trial_balance import TrialBalanceView

router = DefaultRouter()
router.register("account-categories", AccountCategoryViewSet, basename="account-category")
router.register("accounts", AccountViewSet, basename="account")
router.register("financial-years", FinancialYearViewSet, basename="financial-year")
router.register("journal-entries", JournalEntryViewSet, basename="journal-entry")
router.register("bank-accounts", BankAccountViewSet, basename="bank-account")

urlpatterns = [
    # Router endpoints
    path("", include(router.urls)),
    # Bank transaction generators
    path("bank-transactions/deposit/", DepositView.as_view(), name="bank-deposit"),
    path("bank-transactions/withdraw/", WithdrawView.as_view(), name="bank-withdraw"),
    path("bank-transactions/transfer/", TransferView.as_view(), name="bank-transfer"),
    # Reports
    path("trial-balance/", TrialBalanceView.as_view(), name="trial-balance"),
]
