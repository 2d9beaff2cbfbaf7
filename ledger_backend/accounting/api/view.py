# PATH: accounting/api/view.py

"""
PATH: accounting/api/view.py

ACCOUNTING API VIEWSETS

Every viewset is business-scoped: the tenant comes from the X-Business-ID
header (BusinessScopedMixin) and the caller must be a member of it.

Security rules:
- Django model permissions per action (HasActionPermission)
- Querysets never leave the current business
- Service errors map to 400 / 404 / 409 via service_error_response()

Filtering (django-filter):
    /api/accounting/accounts/?is_active=true&category=3
    /api/accounting/journal-entries/?status=draft&financial_year=2
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.utils.dateparse import parse_date
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.errors import service_error_response
from accounting.api.permissions import HasActionPermission
from accounting.api.serializers import (
    AccountCategorySerializer,
    AccountCreateSerializer,
    AccountSerializer,
    AccountUpdateSerializer,
    BankAccountCreateSerializer,
    BankAccountSerializer,
    BankAccountUpdateSerializer,
    FinancialYearCreateSerializer,
    FinancialYearSerializer,
    FinancialYearUpdateSerializer,
    JournalEntrySerializer,
    JournalEntryWriteSerializer,
    ReconcileSerializer,
    StatementQuerySerializer,
)
from accounting.models.account import Account
from accounting.models.bank_account import BankAccount
from accounting.models.category import AccountCategory
from accounting.models.financial_year import FinancialYear
from accounting.models.journal import JournalEntry
from accounting.services import (
    account_service,
    bank_transaction_service,
    financial_year_service,
    journal_entry_service,
)
from accounting.services.balance_service import balance_of, get_account_statement
from accounting.services.exceptions import AccountingServiceError
from businesses.api.context import BusinessScopedMixin
from businesses.services.formatting import format_for_setting


def _amounts_as_str(row: dict) -> dict:
    return {k: str(v) if isinstance(v, Decimal) else v for k, v in row.items()}


def _formatted_statement(statement: dict, setting) -> dict:
    data = _amounts_as_str(statement)
    data["formatted_opening_balance"] = format_for_setting(statement["opening_balance"], setting)
    data["formatted_closing_balance"] = format_for_setting(statement["closing_balance"], setting)
    data["lines"] = [
        {**_amounts_as_str(line), "formatted_balance": format_for_setting(line["balance"], setting)}
        for line in statement["lines"]
    ]
    return data


# ==========================================================
# ACCOUNT CATEGORIES
# ==========================================================


@extend_schema(tags=["accounting"])
class AccountCategoryViewSet(
    BusinessScopedMixin,
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    permission_classes = [IsAuthenticated, HasActionPermission]
    serializer_class = AccountCategorySerializer
    filterset_fields = ["type"]
    required_permissions = {
        "list": "accounting.view_accountcategory",
        "create": "accounting.add_accountcategory",
        "update": "accounting.change_accountcategory",
        "partial_update": "accounting.change_accountcategory",
        "destroy": "accounting.delete_accountcategory",
    }

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return AccountCategory.objects.none()
        return AccountCategory.objects.filter(business=self.get_business())

    def perform_create(self, serializer):
        try:
            serializer.save(business=self.get_business())
        except DjangoValidationError as exc:
            raise ValidationError(
                exc.message_dict if hasattr(exc, "error_dict") else exc.messages
            ) from exc

    @extend_schema(request=AccountCategorySerializer, responses={200: AccountCategorySerializer})
    def update(self, request, *args, **kwargs):
        s = AccountCategorySerializer(data=request.data, partial=kwargs.pop("partial", False))
        s.is_valid(raise_exception=True)

        try:
            category = account_service.update_category(
                business_id=self.get_business().id,
                category_id=kwargs["pk"],
                **s.validated_data,
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)
        return Response(AccountCategorySerializer(category).data, status=status.HTTP_200_OK)

    def partial_update(self, request, *args, **kwargs):
        kwargs["partial"] = True
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        try:
            account_service.delete_category(
                business_id=self.get_business().id,
                category_id=kwargs["pk"],
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ==========================================================
# CHART OF ACCOUNTS
# ==========================================================


@extend_schema(tags=["accounting"])
class AccountViewSet(
    BusinessScopedMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    permission_classes = [IsAuthenticated, HasActionPermission]
    serializer_class = AccountSerializer
    filterset_fields = ["is_active", "category"]
    required_permissions = {
        "list": "accounting.view_account",
        "retrieve": "accounting.view_account",
        "balance": "accounting.view_account",
        "create": "accounting.add_account",
        "update": "accounting.change_account",
        "partial_update": "accounting.change_account",
        "toggle_status": "accounting.change_account",
        "destroy": "accounting.delete_account",
    }

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Account.objects.none()
        return (
            Account.objects.filter(business=self.get_business())
            .select_related("category")
            .order_by("code")
        )

    @extend_schema(request=AccountCreateSerializer, responses={201: AccountSerializer})
    def create(self, request, *args, **kwargs):
        s = AccountCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            account = account_service.create_account(
                business_id=self.get_business().id,
                created_by=request.user,
                **s.validated_data,
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(
            AccountSerializer(account, context=self.get_serializer_context()).data,
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(request=AccountUpdateSerializer, responses={200: AccountSerializer})
    def update(self, request, *args, **kwargs):
        s = AccountUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            account = account_service.update_account(
                business_id=self.get_business().id,
                account_id=kwargs["pk"],
                **s.validated_data,
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(
            AccountSerializer(account, context=self.get_serializer_context()).data,
            status=status.HTTP_200_OK,
        )

    @extend_schema(request=AccountUpdateSerializer, responses={200: AccountSerializer})
    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        try:
            account_service.delete_account(
                business_id=self.get_business().id,
                account_id=kwargs["pk"],
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="as_of",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Only count entries dated on or before this day (YYYY-MM-DD).",
            ),
        ],
        responses={200: dict},
    )
    @action(detail=True, methods=["get"], url_path="balance")
    def balance(self, request, pk=None):
        account = self.get_object()

        as_of = None
        raw = (request.query_params.get("as_of") or "").strip()
        if raw:
            as_of = parse_date(raw)
            if as_of is None:
                return Response(
                    {"detail": "Invalid as_of (expected YYYY-MM-DD)"},
                    status=status.HTTP_400_BAD_REQUEST,
                )

        value = balance_of(account, as_of=as_of)
        setting = self.get_serializer_context().get("company_setting")
        return Response(
            {
                "account_id": account.id,
                "code": account.code,
                "account_type": account.category.type,
                "as_of": as_of,
                "balance": str(value),
                "formatted_balance": format_for_setting(value, setting),
            },
            status=status.HTTP_200_OK,
        )

    @extend_schema(request=None, responses={200: AccountSerializer})
    @action(detail=True, methods=["post"], url_path="toggle-status")
    def toggle_status(self, request, pk=None):
        try:
            account = account_service.toggle_account_status(
                business_id=self.get_business().id,
                account_id=pk,
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)
        return Response(
            AccountSerializer(account, context=self.get_serializer_context()).data,
            status=status.HTTP_200_OK,
        )


# ==========================================================
# FINANCIAL YEARS
# ==========================================================


@extend_schema(tags=["accounting"])
class FinancialYearViewSet(
    BusinessScopedMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    permission_classes = [IsAuthenticated, HasActionPermission]
    serializer_class = FinancialYearSerializer
    filterset_fields = ["is_active"]
    required_permissions = {
        "list": "accounting.view_financialyear",
        "retrieve": "accounting.view_financialyear",
        "create": "accounting.add_financialyear",
        "update": "accounting.change_financialyear",
        "partial_update": "accounting.change_financialyear",
        "activate": "accounting.change_financialyear",
        "destroy": "accounting.delete_financialyear",
    }

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return FinancialYear.objects.none()
        return FinancialYear.objects.filter(business=self.get_business())

    @extend_schema(request=FinancialYearCreateSerializer, responses={201: FinancialYearSerializer})
    def create(self, request, *args, **kwargs):
        s = FinancialYearCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            year = financial_year_service.create_financial_year(
                business_id=self.get_business().id,
                **s.validated_data,
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(FinancialYearSerializer(year).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=FinancialYearUpdateSerializer, responses={200: FinancialYearSerializer})
    def update(self, request, *args, **kwargs):
        s = FinancialYearUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            year = financial_year_service.update_financial_year(
                business_id=self.get_business().id,
                financial_year_id=kwargs["pk"],
                **s.validated_data,
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(FinancialYearSerializer(year).data, status=status.HTTP_200_OK)

    @extend_schema(request=FinancialYearUpdateSerializer, responses={200: FinancialYearSerializer})
    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        try:
            financial_year_service.delete_financial_year(
                business_id=self.get_business().id,
                financial_year_id=kwargs["pk"],
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=None, responses={200: FinancialYearSerializer})
    @action(detail=True, methods=["post"], url_path="activate")
    def activate(self, request, pk=None):
        year = self.get_object()
        try:
            year = financial_year_service.activate_financial_year(
                business_id=self.get_business().id,
                financial_year_id=year.id,
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)
        return Response(FinancialYearSerializer(year).data, status=status.HTTP_200_OK)


# ==========================================================
# JOURNAL ENTRIES
# ==========================================================


@extend_schema(tags=["accounting"])
class JournalEntryViewSet(
    BusinessScopedMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Drafts are created, edited and deleted here; post/cancel move them
    through the lifecycle. Posted and cancelled entries are read-only.
    """

    permission_classes = [IsAuthenticated, HasActionPermission]
    serializer_class = JournalEntrySerializer
    filterset_fields = ["status", "financial_year"]
    http_method_names = ["get", "post", "put", "delete", "head", "options"]
    required_permissions = {
        "list": "accounting.view_journalentry",
        "retrieve": "accounting.view_journalentry",
        "create": "accounting.add_journalentry",
        "update": "accounting.change_journalentry",
        "post_entry": "accounting.change_journalentry",
        "cancel": "accounting.change_journalentry",
        "destroy": "accounting.delete_journalentry",
    }

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return JournalEntry.objects.none()
        return (
            JournalEntry.objects.filter(business=self.get_business())
            .select_related("financial_year")
            .prefetch_related("items__account")
        )

    def _entry_response(self, entry, http_status=status.HTTP_200_OK):
        entry = self.get_queryset().get(pk=entry.pk)
        return Response(
            JournalEntrySerializer(entry, context=self.get_serializer_context()).data,
            status=http_status,
        )

    @extend_schema(request=JournalEntryWriteSerializer, responses={201: JournalEntrySerializer})
    def create(self, request, *args, **kwargs):
        s = JournalEntryWriteSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            entry = journal_entry_service.create_journal_entry(
                business_id=self.get_business().id,
                entry_date=data["entry_date"],
                narration=data["narration"],
                items=[dict(line) for line in data["items"]],
                financial_year_id=data.get("financial_year_id"),
                reference_number=data.get("reference_number"),
                created_by=request.user,
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return self._entry_response(entry, status.HTTP_201_CREATED)

    @extend_schema(request=JournalEntryWriteSerializer, responses={200: JournalEntrySerializer})
    def update(self, request, *args, **kwargs):
        s = JournalEntryWriteSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            entry = journal_entry_service.update_draft_journal_entry(
                business_id=self.get_business().id,
                entry_id=kwargs["pk"],
                entry_date=data["entry_date"],
                narration=data["narration"],
                items=[dict(line) for line in data["items"]],
                financial_year_id=data.get("financial_year_id"),
                reference_number=data.get("reference_number"),
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return self._entry_response(entry)

    def destroy(self, request, *args, **kwargs):
        try:
            journal_entry_service.delete_journal_entry(
                business_id=self.get_business().id,
                entry_id=kwargs["pk"],
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=None, responses={200: JournalEntrySerializer, 409: dict})
    @action(detail=True, methods=["post"], url_path="post")
    def post_entry(self, request, pk=None):
        try:
            entry = journal_entry_service.post_journal_entry(
                business_id=self.get_business().id,
                entry_id=pk,
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)
        return self._entry_response(entry)

    @extend_schema(request=None, responses={200: JournalEntrySerializer, 409: dict})
    @action(detail=True, methods=["post"], url_path="cancel")
    def cancel(self, request, pk=None):
        try:
            entry = journal_entry_service.cancel_journal_entry(
                business_id=self.get_business().id,
                entry_id=pk,
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)
        return self._entry_response(entry)


# ==========================================================
# BANK ACCOUNTS
# ==========================================================


@extend_schema(tags=["banking"])
class BankAccountViewSet(
    BusinessScopedMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    permission_classes = [IsAuthenticated, HasActionPermission]
    serializer_class = BankAccountSerializer
    filterset_fields = ["is_active"]
    required_permissions = {
        "list": "accounting.view_bankaccount",
        "retrieve": "accounting.view_bankaccount",
        "statement": "accounting.view_bankaccount",
        "create": "accounting.add_bankaccount",
        "update": "accounting.change_bankaccount",
        "partial_update": "accounting.change_bankaccount",
        "destroy": "accounting.delete_bankaccount",
        "reconcile": "accounting.change_bankaccount",
    }

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return BankAccount.objects.none()
        return BankAccount.objects.filter(business=self.get_business()).select_related(
            "account", "account__category"
        )

    @extend_schema(request=BankAccountCreateSerializer, responses={201: BankAccountSerializer})
    def create(self, request, *args, **kwargs):
        s = BankAccountCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = dict(s.validated_data)

        try:
            bank = bank_transaction_service.open_bank_account(
                business_id=self.get_business().id,
                account_id=data.pop("account_id"),
                account_name=data.pop("account_name"),
                account_number=data.pop("account_number"),
                bank_name=data.pop("bank_name"),
                initial_balance=data.pop("initial_balance", None),
                opening_date=data.pop("opening_date", None),
                created_by=request.user,
                **data,
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(
            BankAccountSerializer(bank, context=self.get_serializer_context()).data,
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(request=BankAccountUpdateSerializer, responses={200: BankAccountSerializer})
    def update(self, request, *args, **kwargs):
        s = BankAccountUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            bank = bank_transaction_service.update_bank_account(
                business_id=self.get_business().id,
                bank_account_id=kwargs["pk"],
                **s.validated_data,
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(
            BankAccountSerializer(bank, context=self.get_serializer_context()).data,
            status=status.HTTP_200_OK,
        )

    @extend_schema(request=BankAccountUpdateSerializer, responses={200: BankAccountSerializer})
    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        try:
            bank_transaction_service.delete_bank_account(
                business_id=self.get_business().id,
                bank_account_id=kwargs["pk"],
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        parameters=[
            OpenApiParameter(name="start_date", type=str, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="end_date", type=str, location=OpenApiParameter.QUERY, required=False),
        ],
        responses={200: dict},
    )
    @action(detail=True, methods=["get"], url_path="statement")
    def statement(self, request, pk=None):
        bank = self.get_object()

        q = StatementQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)

        try:
            data = get_account_statement(
                bank.account,
                start_date=q.validated_data.get("start_date"),
                end_date=q.validated_data.get("end_date"),
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)

        data = _formatted_statement(data, self.get_serializer_context().get("company_setting"))
        data["bank_account_id"] = bank.id
        return Response(data, status=status.HTTP_200_OK)

    @extend_schema(request=ReconcileSerializer, responses={200: dict})
    @action(detail=True, methods=["post"], url_path="reconcile")
    def reconcile(self, request, pk=None):
        bank = self.get_object()

        s = ReconcileSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            result = bank_transaction_service.reconcile(
                business_id=self.get_business().id,
                bank_account_id=bank.id,
                statement_balance=data["statement_balance"],
                reconciliation_date=data.get("reconciliation_date"),
                adjustment_account_id=data.get("adjustment_account_id"),
                description=data.get("description", ""),
                created_by=request.user,
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)

        entry = result["journal_entry"]
        setting = self.get_serializer_context().get("company_setting")
        return Response(
            {
                "bank_account_id": bank.id,
                "statement_balance": str(result["statement_balance"]),
                "system_balance": str(result["system_balance"]),
                "adjustment": str(result["adjustment"]),
                "formatted_adjustment": format_for_setting(result["adjustment"], setting),
                "journal_entry_id": entry.id if entry else None,
                "reference_number": entry.reference_number if entry else None,
                "last_reconciled_at": result["bank_account"].last_reconciled_at,
            },
            status=status.HTTP_200_OK,
        )
