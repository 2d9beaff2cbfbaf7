# accounting/tests/utils.py

from __future__ import annotations

from datetime import date
from io import StringIO

from django.core.management import call_command

from accounting.models.account import Account
from accounting.models.category import AccountCategory
from accounting.models.journal_item import JournalItem
from accounting.services.account_service import create_account
from accounting.services.bank_transaction_service import open_bank_account
from accounting.services.journal_entry_service import (
    create_journal_entry,
    post_journal_entry,
)
from businesses.models.business import Business


def make_business(name="Acme Traders", code=None) -> Business:
    return Business.objects.create(name=name, code=code)


def seed_ledger(business, year=2025) -> dict:
    """
    Starter chart + an active Jan-Dec financial year.
    Returns {code: Account}.
    """
    call_command("seed_chart", business=business.id, year=year, stdout=StringIO())
    return {
        acc.code: acc
        for acc in Account.objects.filter(business=business).select_related("category")
    }


def line(account, entry_type, amount, description=""):
    return {
        "account_id": account.id,
        "entry_type": entry_type,
        "amount": amount,
        "description": description,
    }


def debit(account, amount):
    return line(account, JournalItem.DEBIT, amount)


def credit(account, amount):
    return line(account, JournalItem.CREDIT, amount)


def post_entry(business, items, *, entry_date=date(2025, 3, 1), narration="Test entry"):
    entry = create_journal_entry(
        business_id=business.id,
        entry_date=entry_date,
        narration=narration,
        items=items,
    )
    return post_journal_entry(business_id=business.id, entry_id=entry.id)


def extra_asset_account(business, code="1020", name="Second Bank"):
    category = AccountCategory.objects.get(business=business, type=AccountCategory.ASSET)
    return create_account(
        business_id=business.id,
        category_id=category.id,
        code=code,
        name=name,
    )


def open_bank(business, account, number="0001-2345", initial_balance=None, opening_date=None):
    return open_bank_account(
        business_id=business.id,
        account_id=account.id,
        account_name=account.name,
        account_number=number,
        bank_name="Sonali Bank",
        initial_balance=initial_balance,
        opening_date=opening_date or date(2025, 1, 1),
    )
