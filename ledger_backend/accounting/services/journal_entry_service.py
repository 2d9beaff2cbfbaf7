# accounting/services/journal_entry_service.py

"""
======================================================
PATH: accounting/services/journal_entry_service.py
======================================================
JOURNAL ENTRY SERVICE (ACCOUNTING ENGINE)

This module is the ONLY place allowed to:
- Create JournalEntry / JournalItem rows
- Move an entry through draft -> posted -> cancelled
- Enforce debit == credit (at post time)
- Guarantee atomicity (entry + items in one transaction)

Everything else (bank deposits, transfers, reconciliation) must pass through
here. post_journal_entry() is the single code path that marks an entry posted.

Item input shape (dicts):
    {"account_id": 12, "entry_type": "debit", "amount": "500.00", "description": ""}
`account` (an Account instance) may be passed instead of `account_id`.
"""

from __future__ import annotations

import logging
from datetime import date

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Case, F, Sum, When
from django.db.models.functions import Coalesce
from django.utils import timezone

from accounting.models.account import Account
from accounting.models.journal import JournalEntry
from accounting.models.journal_item import JournalItem
from accounting.services.exceptions import (
    InvalidStateError,
    LedgerValidationError,
    NotFoundError,
    UnbalancedEntryError,
)
from accounting.services.financial_year_service import (
    get_active_financial_year,
    get_financial_year,
)
from accounting.services.money import ZERO, amounts_match, ledger_amount, quantize
from businesses.models.sequence import DocumentSequence
from businesses.services.sequence_service import next_reference

logger = logging.getLogger(__name__)

MIN_ITEMS = 2


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(exc.messages) if hasattr(exc, "messages") else str(exc)


def _resolve_account(*, business_id, line: dict) -> Account:
    account = line.get("account")
    account_id = line.get("account_id")

    if isinstance(account, Account):
        account_id = account.pk
    elif account is not None and account_id is None:
        account_id = account

    if account_id in (None, ""):
        raise LedgerValidationError("Journal item is missing an account")

    try:
        found = (
            Account.objects.select_related("category")
            .filter(pk=account_id, business_id=business_id)
            .first()
        )
    except (TypeError, ValueError) as exc:
        raise NotFoundError(f"Account {account_id!r} not found") from exc

    if found is None:
        raise NotFoundError(f"Account {account_id!r} not found")

    if not found.is_active:
        raise LedgerValidationError(f"Account {found.code} is inactive")

    return found


def _normalize_items(*, business_id, items) -> list[dict]:
    if not isinstance(items, (list, tuple)) or len(items) < MIN_ITEMS:
        raise LedgerValidationError(
            f"Journal entry must contain at least {MIN_ITEMS} items"
        )

    normalized: list[dict] = []
    for line in items:
        if not isinstance(line, dict):
            raise LedgerValidationError("Each journal item must be an object/dict")

        entry_type = str(line.get("entry_type") or line.get("type") or "").strip().lower()
        if entry_type not in (JournalItem.DEBIT, JournalItem.CREDIT):
            raise LedgerValidationError(f"Unknown journal item type: {entry_type!r}")

        amount = ledger_amount(line.get("amount"))
        if amount <= ZERO:
            raise LedgerValidationError("Journal item amount must be greater than zero")

        normalized.append(
            {
                "account": _resolve_account(business_id=business_id, line=line),
                "entry_type": entry_type,
                "amount": amount,
                "description": str(line.get("description") or "").strip(),
            }
        )

    types = {line["entry_type"] for line in normalized}
    if JournalItem.DEBIT not in types or JournalItem.CREDIT not in types:
        raise LedgerValidationError(
            "Journal entry needs at least one debit and one credit item"
        )

    return normalized


def _reference_taken(business_id, reference: str, *, exclude_pk=None) -> bool:
    qs = JournalEntry.objects.filter(business_id=business_id, reference_number=reference)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    return qs.exists()


def _resolve_reference(business_id, reference_number, *, exclude_pk=None) -> str:
    reference = (reference_number or "").strip()
    if not reference:
        return next_reference(
            business_id=business_id,
            document_type=DocumentSequence.JOURNAL,
            is_taken=lambda ref: _reference_taken(business_id, ref),
        )

    if _reference_taken(business_id, reference, exclude_pk=exclude_pk):
        raise LedgerValidationError(
            f"Reference number {reference} is already used in this business"
        )
    return reference


def _write_items(entry: JournalEntry, normalized: list[dict]) -> None:
    JournalItem.objects.bulk_create(
        [
            JournalItem(
                journal_entry=entry,
                account=line["account"],
                entry_type=line["entry_type"],
                amount=line["amount"],
                description=line["description"],
            )
            for line in normalized
        ]
    )


def _lock_entry(business_id, entry_id) -> JournalEntry:
    try:
        entry = (
            JournalEntry.objects.select_for_update()
            .filter(pk=entry_id, business_id=business_id)
            .first()
        )
    except (TypeError, ValueError) as exc:
        raise NotFoundError(f"Journal entry {entry_id!r} not found") from exc

    if entry is None:
        raise NotFoundError(f"Journal entry {entry_id} not found")
    return entry


def get_journal_entry(business_id, entry_id) -> JournalEntry:
    try:
        entry = (
            JournalEntry.objects.select_related("financial_year")
            .filter(pk=entry_id, business_id=business_id)
            .first()
        )
    except (TypeError, ValueError) as exc:
        raise NotFoundError(f"Journal entry {entry_id!r} not found") from exc

    if entry is None:
        raise NotFoundError(f"Journal entry {entry_id} not found")
    return entry


def get_entry_totals(entry: JournalEntry) -> tuple:
    """(total_debit, total_credit), always summed from the entry's items."""
    totals = entry.items.aggregate(
        debit=Coalesce(
            Sum(Case(When(entry_type=JournalItem.DEBIT, then=F("amount")))),
            ZERO,
        ),
        credit=Coalesce(
            Sum(Case(When(entry_type=JournalItem.CREDIT, then=F("amount")))),
            ZERO,
        ),
    )
    return quantize(totals["debit"]), quantize(totals["credit"])


@transaction.atomic
def create_journal_entry(
    *,
    business_id,
    entry_date: date,
    narration: str,
    items: list,
    financial_year_id=None,
    reference_number: str | None = None,
    created_by=None,
) -> JournalEntry:
    narration = (narration or "").strip()
    if not narration:
        raise LedgerValidationError("Journal entry narration is required")

    if entry_date is None:
        raise LedgerValidationError("entry_date is required")

    if financial_year_id is None:
        year = get_active_financial_year(business_id)
    else:
        year = get_financial_year(business_id, financial_year_id)

    if not year.contains(entry_date):
        raise LedgerValidationError(
            f"Entry date {entry_date} is outside financial year {year.name} "
            f"({year.start_date} to {year.end_date})"
        )

    normalized = _normalize_items(business_id=business_id, items=items)
    reference = _resolve_reference(business_id, reference_number)

    try:
        with transaction.atomic():
            entry = JournalEntry.objects.create(
                business_id=business_id,
                financial_year=year,
                reference_number=reference,
                entry_date=entry_date,
                narration=narration,
                status=JournalEntry.DRAFT,
                created_by=created_by,
            )
    except ValidationError as exc:
        raise LedgerValidationError(_validation_message(exc)) from exc
    except IntegrityError as exc:
        if _reference_taken(business_id, reference):
            raise LedgerValidationError(
                f"Reference number {reference} is already used in this business"
            ) from exc
        raise

    _write_items(entry, normalized)

    logger.info(
        "Journal entry created",
        extra={
            "business_id": business_id,
            "journal_entry_id": entry.id,
            "reference_number": entry.reference_number,
        },
    )
    return entry


@transaction.atomic
def update_draft_journal_entry(
    *,
    business_id,
    entry_id,
    entry_date: date | None = None,
    narration: str | None = None,
    items: list | None = None,
    financial_year_id=None,
    reference_number: str | None = None,
) -> JournalEntry:
    entry = _lock_entry(business_id, entry_id)
    if entry.status != JournalEntry.DRAFT:
        raise InvalidStateError(f"Only draft entries can be edited (status: {entry.status})")

    if financial_year_id is not None:
        entry.financial_year = get_financial_year(business_id, financial_year_id)
    if entry_date is not None:
        entry.entry_date = entry_date
    if narration is not None:
        entry.narration = narration.strip()
        if not entry.narration:
            raise LedgerValidationError("Journal entry narration is required")
    if reference_number is not None:
        entry.reference_number = _resolve_reference(
            business_id, reference_number, exclude_pk=entry.pk
        )

    if not entry.financial_year.contains(entry.entry_date):
        raise LedgerValidationError(
            f"Entry date {entry.entry_date} is outside financial year {entry.financial_year.name}"
        )

    normalized = None
    if items is not None:
        normalized = _normalize_items(business_id=business_id, items=items)

    try:
        entry.save()
    except ValidationError as exc:
        raise LedgerValidationError(_validation_message(exc)) from exc

    if normalized is not None:
        entry.items.all().delete()
        _write_items(entry, normalized)

    logger.info(
        "Draft journal entry updated",
        extra={"business_id": business_id, "journal_entry_id": entry.id},
    )
    return entry


@transaction.atomic
def post_journal_entry(*, business_id, entry_id) -> JournalEntry:
    entry = _lock_entry(business_id, entry_id)

    if entry.status != JournalEntry.DRAFT:
        logger.warning(
            "Refused to post non-draft journal entry",
            extra={"journal_entry_id": entry.id, "status": entry.status},
        )
        raise InvalidStateError(f"Only draft entries can be posted (status: {entry.status})")

    total_debit, total_credit = get_entry_totals(entry)
    if not amounts_match(total_debit, total_credit):
        logger.warning(
            "Refused to post unbalanced journal entry",
            extra={
                "journal_entry_id": entry.id,
                "total_debit": str(total_debit),
                "total_credit": str(total_credit),
            },
        )
        raise UnbalancedEntryError(
            f"Journal entry not balanced: debits={total_debit} credits={total_credit}"
        )

    entry.status = JournalEntry.POSTED
    entry.posted_at = timezone.now()
    entry.save(update_fields=["status", "posted_at", "updated_at"])

    logger.info(
        "Journal entry posted",
        extra={
            "business_id": business_id,
            "journal_entry_id": entry.id,
            "reference_number": entry.reference_number,
            "amount": str(total_debit),
        },
    )
    return entry


@transaction.atomic
def cancel_journal_entry(*, business_id, entry_id) -> JournalEntry:
    entry = _lock_entry(business_id, entry_id)

    if entry.status != JournalEntry.POSTED:
        logger.warning(
            "Refused to cancel non-posted journal entry",
            extra={"journal_entry_id": entry.id, "status": entry.status},
        )
        raise InvalidStateError(
            f"Only posted entries can be cancelled (status: {entry.status})"
        )

    entry.status = JournalEntry.CANCELLED
    entry.cancelled_at = timezone.now()
    entry.save(update_fields=["status", "cancelled_at", "updated_at"])

    logger.info(
        "Journal entry cancelled",
        extra={"business_id": business_id, "journal_entry_id": entry.id},
    )
    return entry


@transaction.atomic
def delete_journal_entry(*, business_id, entry_id) -> None:
    entry = _lock_entry(business_id, entry_id)

    if entry.status != JournalEntry.DRAFT:
        logger.warning(
            "Refused to delete non-draft journal entry",
            extra={"journal_entry_id": entry.id, "status": entry.status},
        )
        raise InvalidStateError(
            f"Only draft entries can be deleted (status: {entry.status})"
        )

    entry.delete()
    logger.info(
        "Draft journal entry deleted",
        extra={"business_id": business_id, "journal_entry_id": entry_id},
    )
