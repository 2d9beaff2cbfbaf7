# accounting/services/balance_service.py

"""
BALANCE & REPORTING SERVICE (AUTHORITATIVE)

Read-only ledger aggregation helpers.

RULES:
- READ-ONLY: no writes, ever
- JournalItem is the single source of truth; balances are never stored
- Accounting timeline uses JournalEntry.entry_date
- Only POSTED journals count (draft and cancelled are ignored)
- Business-aware: never mix businesses
- Sign convention lives in signed_balance() and nowhere else
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.db.models import Case, F, Sum, When
from django.db.models.functions import Coalesce

from accounting.models.account import Account
from accounting.models.category import AccountCategory
from accounting.models.journal import JournalEntry
from accounting.models.journal_item import JournalItem
from accounting.services.exceptions import LedgerValidationError
from accounting.services.money import ZERO, amounts_match, quantize


def signed_balance(account_type: str, debit, credit) -> Decimal:
    """
    Balance rule:
    - Assets & Expenses → Debit balance  (debits - credits)
    - Liabilities, Equity & Revenue → Credit balance (credits - debits)
    """
    debit = quantize(Decimal(debit or 0))
    credit = quantize(Decimal(credit or 0))

    if account_type in AccountCategory.DEBIT_NORMAL_TYPES:
        return quantize(debit - credit)
    return quantize(credit - debit)


def _posted_items(*, as_of: date | None = None):
    qs = JournalItem.objects.filter(journal_entry__status=JournalEntry.POSTED)
    if as_of is not None:
        qs = qs.filter(journal_entry__entry_date__lte=as_of)
    return qs


def _debit_credit_totals(qs) -> tuple[Decimal, Decimal]:
    aggregates = qs.aggregate(
        debit_total=Coalesce(
            Sum(Case(When(entry_type=JournalItem.DEBIT, then=F("amount")))),
            Decimal("0.00"),
        ),
        credit_total=Coalesce(
            Sum(Case(When(entry_type=JournalItem.CREDIT, then=F("amount")))),
            Decimal("0.00"),
        ),
    )
    return quantize(aggregates["debit_total"]), quantize(aggregates["credit_total"])


def balance_of(account: Account, *, as_of: date | None = None) -> Decimal:
    if account is None:
        raise LedgerValidationError("Account is required")

    debit, credit = _debit_credit_totals(
        _posted_items(as_of=as_of).filter(
            account=account,
            journal_entry__business_id=account.business_id,
        )
    )
    return signed_balance(account.category.type, debit, credit)


def get_trial_balance(business_id, *, as_of: date | None = None) -> dict:
    """
    Bulk trial balance (no N+1). Accounts without posted activity are left out.
    """
    accounts = list(
        Account.objects.filter(business_id=business_id)
        .select_related("category")
        .order_by("code")
    )

    debit_by: dict = {}
    credit_by: dict = {}

    rows = (
        _posted_items(as_of=as_of)
        .filter(journal_entry__business_id=business_id)
        .values("account_id", "entry_type")
        .annotate(total=Coalesce(Sum("amount"), Decimal("0.00")))
    )
    for r in rows:
        total = quantize(r["total"])
        if r["entry_type"] == JournalItem.DEBIT:
            debit_by[r["account_id"]] = total
        else:
            credit_by[r["account_id"]] = total

    results = []
    total_debit = ZERO
    total_credit = ZERO

    for acc in accounts:
        debit = debit_by.get(acc.id, ZERO)
        credit = credit_by.get(acc.id, ZERO)
        if debit == ZERO and credit == ZERO:
            continue

        results.append(
            {
                "account_id": acc.id,
                "code": acc.code,
                "name": acc.name,
                "account_type": acc.category.type,
                "debit_total": debit,
                "credit_total": credit,
                "balance": signed_balance(acc.category.type, debit, credit),
            }
        )
        total_debit += debit
        total_credit += credit

    return {
        "as_of": as_of,
        "accounts": results,
        "totals": {
            "debit": quantize(total_debit),
            "credit": quantize(total_credit),
            "balanced": amounts_match(total_debit, total_credit),
        },
    }


def get_account_statement(
    account: Account,
    *,
    start_date: date | None = None,
    end_date: date | None = None,
) -> dict:
    """
    Opening balance, chronological posted lines with a running balance, and
    the closing balance for one account.
    """
    if account is None:
        raise LedgerValidationError("Account is required")
    if start_date and end_date and start_date > end_date:
        raise LedgerValidationError("start_date must be on or before end_date")

    account_type = account.category.type
    scoped = _posted_items().filter(
        account=account,
        journal_entry__business_id=account.business_id,
    )

    opening = ZERO
    if start_date is not None:
        debit, credit = _debit_credit_totals(
            scoped.filter(journal_entry__entry_date__lt=start_date)
        )
        opening = signed_balance(account_type, debit, credit)

    lines_qs = scoped.select_related("journal_entry")
    if start_date is not None:
        lines_qs = lines_qs.filter(journal_entry__entry_date__gte=start_date)
    if end_date is not None:
        lines_qs = lines_qs.filter(journal_entry__entry_date__lte=end_date)
    lines_qs = lines_qs.order_by("journal_entry__entry_date", "journal_entry_id", "id")

    running = opening
    lines = []
    for item in lines_qs:
        debit = item.amount if item.entry_type == JournalItem.DEBIT else ZERO
        credit = item.amount if item.entry_type == JournalItem.CREDIT else ZERO
        running = quantize(running + signed_balance(account_type, debit, credit))

        entry = item.journal_entry
        lines.append(
            {
                "journal_entry_id": entry.id,
                "entry_date": entry.entry_date,
                "reference_number": entry.reference_number,
                "narration": entry.narration,
                "description": item.description,
                "debit": quantize(debit),
                "credit": quantize(credit),
                "balance": running,
            }
        )

    return {
        "account_id": account.id,
        "account_type": account_type,
        "start_date": start_date,
        "end_date": end_date,
        "opening_balance": opening,
        "lines": lines,
        "closing_balance": running,
    }
