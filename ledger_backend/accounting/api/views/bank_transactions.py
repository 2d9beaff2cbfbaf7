# PATH: accounting/api/views/bank_transactions.py

"""
PATH: accounting/api/views/bank_transactions.py

BANK TRANSACTIONS API

POST /api/accounting/bank-transactions/deposit/
POST /api/accounting/bank-transactions/withdraw/
POST /api/accounting/bank-transactions/transfer/
    - Requires permission: accounting.add_journalentry
    - Creates + posts one balanced journal entry (atomic)

Transfers never fail for lack of funds: the ledger allows negative bank
balances. The response carries an `insufficient_funds` warning instead.
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.errors import service_error_response
from accounting.api.serializers.bank_transactions import (
    DepositSerializer,
    TransferSerializer,
    WithdrawSerializer,
)
from accounting.api.serializers.journal_entries import JournalEntrySerializer
from accounting.services import bank_transaction_service
from accounting.services.exceptions import AccountingServiceError
from accounting.services.money import money
from businesses.api.context import BusinessScopedMixin

BANK_TRANSACTION_PERMISSION = "accounting.add_journalentry"


class _BankTransactionView(BusinessScopedMixin, GenericAPIView):
    permission_classes = [IsAuthenticated]

    def _forbidden(self):
        return Response(
            {"detail": "You do not have permission to record bank transactions."},
            status=status.HTTP_403_FORBIDDEN,
        )

    def _created(self, entry, warnings=None):
        data = JournalEntrySerializer(entry, context=self.get_serializer_context()).data
        data["warnings"] = warnings or []
        return Response(data, status=status.HTTP_201_CREATED)


class DepositView(_BankTransactionView):
    serializer_class = DepositSerializer

    @extend_schema(
        tags=["banking"],
        request=DepositSerializer,
        responses={201: JournalEntrySerializer, 400: dict, 403: dict, 404: dict},
    )
    def post(self, request, *args, **kwargs):
        if not request.user.has_perm(BANK_TRANSACTION_PERMISSION):
            return self._forbidden()

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            entry = bank_transaction_service.deposit(
                business_id=self.get_business().id,
                created_by=request.user,
                **s.validated_data,
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return self._created(entry)


class WithdrawView(_BankTransactionView):
    serializer_class = WithdrawSerializer

    @extend_schema(
        tags=["banking"],
        request=WithdrawSerializer,
        responses={201: JournalEntrySerializer, 400: dict, 403: dict, 404: dict},
    )
    def post(self, request, *args, **kwargs):
        if not request.user.has_perm(BANK_TRANSACTION_PERMISSION):
            return self._forbidden()

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            entry = bank_transaction_service.withdraw(
                business_id=self.get_business().id,
                created_by=request.user,
                **s.validated_data,
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return self._created(entry)


class TransferView(_BankTransactionView):
    serializer_class = TransferSerializer

    @extend_schema(
        tags=["banking"],
        request=TransferSerializer,
        responses={201: JournalEntrySerializer, 400: dict, 403: dict, 404: dict},
    )
    def post(self, request, *args, **kwargs):
        if not request.user.has_perm(BANK_TRANSACTION_PERMISSION):
            return self._forbidden()

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data
        business_id = self.get_business().id

        warnings = []
        try:
            source = bank_transaction_service.get_bank_account(
                business_id, data["from_bank_account_id"]
            )
            available = bank_transaction_service.get_bank_balance(source)
            if available < money(data["amount"]):
                warnings.append(
                    {
                        "code": "insufficient_funds",
                        "detail": (
                            f"{source.account_name} balance {available} is lower than "
                            f"the transfer amount {money(data['amount'])}"
                        ),
                    }
                )

            entry = bank_transaction_service.transfer(
                business_id=business_id,
                created_by=request.user,
                **data,
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return self._created(entry, warnings)
