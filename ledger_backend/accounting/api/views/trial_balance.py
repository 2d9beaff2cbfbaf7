"""
PATH: accounting/api/views/trial_balance.py

TRIAL BALANCE API VIEW (READ-ONLY)

- Permission-gated: requires accounting.view_journalentry
- Business isolation: the tenant comes from X-Business-ID only, so callers
  cannot query another business's ledger
"""

from __future__ import annotations

from django.utils.dateparse import parse_date
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.services.balance_service import get_trial_balance
from businesses.api.context import BusinessScopedMixin
from businesses.services.formatting import format_for_setting
from businesses.services.settings_service import get_company_setting


@extend_schema(
    tags=["accounting"],
    parameters=[
        OpenApiParameter(
            name="as_of",
            type=str,
            location=OpenApiParameter.QUERY,
            required=False,
            description="Snapshot date (YYYY-MM-DD). Entries dated after it are ignored.",
        ),
    ],
    responses={200: dict},
)
class TrialBalanceView(BusinessScopedMixin, GenericAPIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        if not request.user.has_perm("accounting.view_journalentry"):
            return Response(
                {"detail": "You do not have permission to view trial balance."},
                status=status.HTTP_403_FORBIDDEN,
            )

        business = self.get_business()

        as_of = None
        raw = (request.query_params.get("as_of") or "").strip()
        if raw:
            as_of = parse_date(raw)
            if as_of is None:
                return Response(
                    {"detail": "Invalid as_of (expected YYYY-MM-DD)"},
                    status=status.HTTP_400_BAD_REQUEST,
                )

        data = get_trial_balance(business.id, as_of=as_of)
        setting = get_company_setting(business.id)

        accounts = [
            {
                **row,
                "debit_total": str(row["debit_total"]),
                "credit_total": str(row["credit_total"]),
                "balance": str(row["balance"]),
                "formatted_balance": format_for_setting(row["balance"], setting),
            }
            for row in data["accounts"]
        ]
        totals = data["totals"]

        return Response(
            {
                "business": {"id": business.id, "name": business.name},
                "as_of": as_of,
                "accounts": accounts,
                "totals": {
                    "debit": str(totals["debit"]),
                    "credit": str(totals["credit"]),
                    "formatted_debit": format_for_setting(totals["debit"], setting),
                    "formatted_credit": format_for_setting(totals["credit"], setting),
                    "balanced": totals["balanced"],
                },
            },
            status=status.HTTP_200_OK,
        )
