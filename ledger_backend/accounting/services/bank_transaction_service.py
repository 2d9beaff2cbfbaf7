# accounting/services/bank_transaction_service.py

"""
======================================================
PATH: accounting/services/bank_transaction_service.py
======================================================
BANK TRANSACTION GENERATORS

Each generator turns a bank action into one balanced journal entry and posts
it immediately, inside one transaction:

    deposit   Dr bank account        Cr income account
    withdraw  Dr expense/destination Cr bank account
    transfer  Dr destination bank    Cr source bank
    reconcile Dr/Cr bank vs adjustment account by |statement - ledger|
    open      Dr/Cr bank vs Opening Balance Equity (initial balance)

Bank account details can be edited; the wrapped account can only be swapped
and the bank account deleted while no posted entry touches it.

Entries are created through create_journal_entry() and posted through
post_journal_entry(); nothing here writes status directly.
"""

from __future__ import annotations

import logging
from datetime import date

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from accounting.models.bank_account import BankAccount
from accounting.models.category import AccountCategory
from accounting.models.journal import JournalEntry
from accounting.models.journal_item import JournalItem
from accounting.services.account_service import (
    OPENING_BALANCE_EQUITY,
    RECONCILIATION_SUSPENSE,
    get_account,
    get_or_create_system_account,
)
from accounting.services.balance_service import balance_of
from accounting.services.exceptions import (
    InvalidStateError,
    LedgerValidationError,
    NotFoundError,
    SameAccountError,
)
from accounting.services.journal_entry_service import (
    create_journal_entry,
    post_journal_entry,
)
from accounting.services.money import ZERO, ledger_amount, subtract_amounts

logger = logging.getLogger(__name__)


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(exc.messages) if hasattr(exc, "messages") else str(exc)


def _positive_amount(value):
    amount = ledger_amount(value)
    if amount <= ZERO:
        raise LedgerValidationError("Amount must be greater than zero")
    return amount


def _line(account, entry_type: str, amount, description: str = "") -> dict:
    return {
        "account": account,
        "entry_type": entry_type,
        "amount": amount,
        "description": description,
    }


def _create_and_post(
    *,
    business_id,
    entry_date: date,
    narration: str,
    items: list,
    reference_number: str | None = None,
    created_by=None,
):
    entry = create_journal_entry(
        business_id=business_id,
        entry_date=entry_date,
        narration=narration,
        items=items,
        reference_number=reference_number,
        created_by=created_by,
    )
    return post_journal_entry(business_id=business_id, entry_id=entry.id)


def get_bank_account(business_id, bank_account_id) -> BankAccount:
    try:
        bank = (
            BankAccount.objects.select_related("account", "account__category")
            .filter(pk=bank_account_id, business_id=business_id)
            .first()
        )
    except (TypeError, ValueError) as exc:
        raise NotFoundError(f"Bank account {bank_account_id!r} not found") from exc

    if bank is None:
        raise NotFoundError(f"Bank account {bank_account_id!r} not found")
    return bank


def get_bank_balance(bank: BankAccount, *, as_of: date | None = None):
    return balance_of(bank.account, as_of=as_of)


@transaction.atomic
def deposit(
    *,
    business_id,
    bank_account_id,
    income_account_id,
    amount,
    entry_date: date | None = None,
    description: str = "",
    reference_number: str | None = None,
    created_by=None,
):
    amount = _positive_amount(amount)
    bank = get_bank_account(business_id, bank_account_id)
    income = get_account(business_id, income_account_id)
    narration = (description or "").strip() or f"Deposit to {bank.account_name}"

    entry = _create_and_post(
        business_id=business_id,
        entry_date=entry_date or timezone.localdate(),
        narration=narration,
        items=[
            _line(bank.account, JournalItem.DEBIT, amount, "Bank deposit"),
            _line(income, JournalItem.CREDIT, amount, narration),
        ],
        reference_number=reference_number,
        created_by=created_by,
    )

    logger.info(
        "Bank deposit posted",
        extra={"business_id": business_id, "bank_account_id": bank.id, "journal_entry_id": entry.id},
    )
    return entry


@transaction.atomic
def withdraw(
    *,
    business_id,
    bank_account_id,
    expense_account_id,
    amount,
    entry_date: date | None = None,
    description: str = "",
    reference_number: str | None = None,
    created_by=None,
):
    amount = _positive_amount(amount)
    bank = get_bank_account(business_id, bank_account_id)
    expense = get_account(business_id, expense_account_id)
    narration = (description or "").strip() or f"Withdrawal from {bank.account_name}"

    entry = _create_and_post(
        business_id=business_id,
        entry_date=entry_date or timezone.localdate(),
        narration=narration,
        items=[
            _line(expense, JournalItem.DEBIT, amount, narration),
            _line(bank.account, JournalItem.CREDIT, amount, "Bank withdrawal"),
        ],
        reference_number=reference_number,
        created_by=created_by,
    )

    logger.info(
        "Bank withdrawal posted",
        extra={"business_id": business_id, "bank_account_id": bank.id, "journal_entry_id": entry.id},
    )
    return entry


@transaction.atomic
def transfer(
    *,
    business_id,
    from_bank_account_id,
    to_bank_account_id,
    amount,
    entry_date: date | None = None,
    description: str = "",
    reference_number: str | None = None,
    created_by=None,
):
    amount = _positive_amount(amount)
    source = get_bank_account(business_id, from_bank_account_id)
    destination = get_bank_account(business_id, to_bank_account_id)

    if source.pk == destination.pk or source.account_id == destination.account_id:
        raise SameAccountError("Source and destination bank accounts must differ")

    narration = (description or "").strip() or (
        f"Transfer from {source.account_name} to {destination.account_name}"
    )

    entry = _create_and_post(
        business_id=business_id,
        entry_date=entry_date or timezone.localdate(),
        narration=narration,
        items=[
            _line(destination.account, JournalItem.DEBIT, amount, "Transfer in"),
            _line(source.account, JournalItem.CREDIT, amount, "Transfer out"),
        ],
        reference_number=reference_number,
        created_by=created_by,
    )

    logger.info(
        "Bank transfer posted",
        extra={
            "business_id": business_id,
            "from_bank_account_id": source.id,
            "to_bank_account_id": destination.id,
            "journal_entry_id": entry.id,
        },
    )
    return entry


@transaction.atomic
def reconcile(
    *,
    business_id,
    bank_account_id,
    statement_balance,
    reconciliation_date: date | None = None,
    adjustment_account_id=None,
    description: str = "",
    created_by=None,
) -> dict:
    """
    adjustment = statement_balance - ledger balance as of reconciliation_date.

    Non-zero adjustments post one entry against the adjustment account
    (caller's choice, else the business's Reconciliation Suspense account).
    last_reconciled_at is stamped either way.
    """
    bank = get_bank_account(business_id, bank_account_id)
    reconciliation_date = reconciliation_date or timezone.localdate()

    statement = ledger_amount(statement_balance)
    system_balance = balance_of(bank.account, as_of=reconciliation_date)
    adjustment = subtract_amounts(statement, system_balance)

    entry = None
    if adjustment != ZERO:
        if adjustment_account_id is not None:
            offset = get_account(business_id, adjustment_account_id)
        else:
            offset = get_or_create_system_account(
                business_id=business_id,
                name=RECONCILIATION_SUSPENSE,
                category_type=AccountCategory.LIABILITY,
                description="Unexplained differences found during bank reconciliation",
                created_by=created_by,
            )

        if offset.pk == bank.account_id:
            raise SameAccountError("Adjustment account cannot be the bank's own account")

        amount = abs(adjustment)
        narration = (description or "").strip() or f"Reconciliation adjustment for {bank.account_name}"

        if adjustment > ZERO:
            items = [
                _line(bank.account, JournalItem.DEBIT, amount, "Reconciliation adjustment"),
                _line(offset, JournalItem.CREDIT, amount, narration),
            ]
        else:
            items = [
                _line(offset, JournalItem.DEBIT, amount, narration),
                _line(bank.account, JournalItem.CREDIT, amount, "Reconciliation adjustment"),
            ]

        entry = _create_and_post(
            business_id=business_id,
            entry_date=reconciliation_date,
            narration=narration,
            items=items,
            created_by=created_by,
        )

    bank.last_reconciled_at = timezone.now()
    bank.save(update_fields=["last_reconciled_at", "updated_at"])

    logger.info(
        "Bank account reconciled",
        extra={
            "business_id": business_id,
            "bank_account_id": bank.id,
            "adjustment": str(adjustment),
            "journal_entry_id": entry.id if entry else None,
        },
    )

    return {
        "bank_account": bank,
        "statement_balance": statement,
        "system_balance": system_balance,
        "adjustment": adjustment,
        "journal_entry": entry,
    }


@transaction.atomic
def open_bank_account(
    *,
    business_id,
    account_id,
    account_name: str,
    account_number: str,
    bank_name: str,
    initial_balance=None,
    opening_date: date | None = None,
    created_by=None,
    **details,
) -> BankAccount:
    """
    Create a bank account over an Asset account and, for a non-zero
    initial balance, post the opening entry against Opening Balance Equity.
    """
    account = get_account(business_id, account_id)
    opening = ledger_amount(initial_balance)

    try:
        bank = BankAccount.objects.create(
            business_id=business_id,
            account=account,
            account_name=account_name,
            account_number=account_number,
            bank_name=bank_name,
            created_by=created_by,
            **details,
        )
    except ValidationError as exc:
        raise LedgerValidationError(_validation_message(exc)) from exc

    if opening != ZERO:
        equity = get_or_create_system_account(
            business_id=business_id,
            name=OPENING_BALANCE_EQUITY,
            category_type=AccountCategory.EQUITY,
            description="Account for initial balances",
            created_by=created_by,
        )
        amount = abs(opening)
        bank_side = JournalItem.DEBIT if opening > ZERO else JournalItem.CREDIT
        equity_side = JournalItem.CREDIT if opening > ZERO else JournalItem.DEBIT

        _create_and_post(
            business_id=business_id,
            entry_date=opening_date or timezone.localdate(),
            narration=f"Initial balance for bank account: {bank.account_name}",
            items=[
                _line(account, bank_side, amount, "Initial balance"),
                _line(equity, equity_side, amount, f"Initial balance for {bank.account_name}"),
            ],
            created_by=created_by,
        )

    logger.info(
        "Bank account opened",
        extra={"business_id": business_id, "bank_account_id": bank.id, "initial_balance": str(opening)},
    )
    return bank


def _has_posted_items(bank: BankAccount) -> bool:
    return bank.account.journal_items.filter(
        journal_entry__status=JournalEntry.POSTED
    ).exists()


@transaction.atomic
def update_bank_account(
    *,
    business_id,
    bank_account_id,
    account_id=None,
    **details,
) -> BankAccount:
    bank = get_bank_account(business_id, bank_account_id)

    if account_id is not None and account_id != bank.account_id:
        if _has_posted_items(bank):
            logger.warning(
                "Refused to swap the account behind a bank account with posted entries",
                extra={"business_id": business_id, "bank_account_id": bank.id},
            )
            raise InvalidStateError(
                "Bank account has posted transactions; its ledger account cannot change"
            )
        bank.account = get_account(business_id, account_id)

    for field, value in details.items():
        setattr(bank, field, value)

    try:
        bank.save()
    except ValidationError as exc:
        raise LedgerValidationError(_validation_message(exc)) from exc

    logger.info(
        "Bank account updated",
        extra={"business_id": business_id, "bank_account_id": bank.id},
    )
    return bank


@transaction.atomic
def delete_bank_account(*, business_id, bank_account_id) -> None:
    """
    Removes the bank record only; the wrapped chart account stays.
    """
    bank = get_bank_account(business_id, bank_account_id)

    if _has_posted_items(bank):
        logger.warning(
            "Refused to delete bank account with posted transactions",
            extra={"business_id": business_id, "bank_account_id": bank.id},
        )
        raise InvalidStateError("Bank account has posted transactions and cannot be deleted")

    bank.delete()
    logger.info(
        "Bank account deleted",
        extra={"business_id": business_id, "bank_account_id": bank_account_id},
    )
