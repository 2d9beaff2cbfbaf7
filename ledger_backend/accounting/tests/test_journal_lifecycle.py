# accounting/tests/test_journal_lifecycle.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from accounting.models.journal import JournalEntry
from accounting.models.journal_item import JournalItem
from accounting.services.account_service import toggle_account_status
from accounting.services.balance_service import balance_of
from accounting.services.exceptions import (
    InvalidAmount,
    InvalidStateError,
    LedgerValidationError,
    NotFoundError,
    UnbalancedEntryError,
)
from accounting.services.journal_entry_service import (
    cancel_journal_entry,
    create_journal_entry,
    delete_journal_entry,
    get_entry_totals,
    get_journal_entry,
    post_journal_entry,
    update_draft_journal_entry,
)
from accounting.tests.utils import credit, debit, make_business, seed_ledger


class JournalLifecycleTests(TestCase):
    """
    GUARANTEES:
    - Entries are created as drafts with >= 2 items
    - Only balanced drafts can be posted
    - posted -> cancelled is terminal; only drafts can be edited or deleted
    """

    def setUp(self):
        self.business = make_business()
        self.accounts = seed_ledger(self.business)
        self.cash = self.accounts["1000"]
        self.sales = self.accounts["4000"]
        self.expenses = self.accounts["6000"]

    def _draft(self, items=None, **kwargs):
        kwargs.setdefault("entry_date", date(2025, 3, 1))
        kwargs.setdefault("narration", "Cash sale")
        return create_journal_entry(
            business_id=self.business.id,
            items=items or [debit(self.cash, "500.00"), credit(self.sales, "500.00")],
            **kwargs,
        )

    # --------------------------------------------------
    # CREATE
    # --------------------------------------------------

    def test_created_entry_is_draft_with_generated_reference(self):
        entry = self._draft()

        self.assertEqual(entry.status, JournalEntry.DRAFT)
        self.assertEqual(entry.reference_number, "JE-00001")
        self.assertEqual(entry.items.count(), 2)
        self.assertEqual(entry.financial_year.name, "2025-2025")

        second = self._draft()
        self.assertEqual(second.reference_number, "JE-00002")

    def test_generated_reference_skips_manual_ones(self):
        self._draft(reference_number="JE-00001")
        entry = self._draft()
        self.assertEqual(entry.reference_number, "JE-00002")

    def test_duplicate_manual_reference_rejected(self):
        self._draft(reference_number="MAN-1")
        with self.assertRaises(LedgerValidationError):
            self._draft(reference_number="MAN-1")

    def test_needs_two_items(self):
        with self.assertRaises(LedgerValidationError):
            self._draft(items=[debit(self.cash, "500.00")])

    def test_needs_both_sides(self):
        with self.assertRaises(LedgerValidationError):
            self._draft(items=[debit(self.cash, "250.00"), debit(self.expenses, "250.00")])

    def test_non_positive_amount_rejected(self):
        with self.assertRaises(LedgerValidationError):
            self._draft(items=[debit(self.cash, "0"), credit(self.sales, "0")])

    def test_oversized_amount_rejected_not_truncated(self):
        huge = "123456789012345678.91"
        with self.assertRaises(InvalidAmount):
            self._draft(items=[debit(self.cash, huge), credit(self.sales, huge)])

        self.assertFalse(JournalEntry.objects.filter(business=self.business).exists())
        self.assertEqual(balance_of(self.cash), Decimal("0.00"))

    def test_large_amount_posts_exactly(self):
        top = "98765432101.23"
        entry = self._draft(items=[debit(self.cash, top), credit(self.sales, top)])
        post_journal_entry(business_id=self.business.id, entry_id=entry.id)

        self.assertEqual(balance_of(self.cash), Decimal(top))
        self.assertEqual(balance_of(self.sales), Decimal(top))

    def test_sub_cent_amount_rejected_not_rounded(self):
        with self.assertRaises(InvalidAmount):
            self._draft(items=[debit(self.cash, "0.005"), credit(self.sales, "0.005")])
        self.assertFalse(JournalEntry.objects.filter(business=self.business).exists())

    def test_narration_required(self):
        with self.assertRaises(LedgerValidationError):
            self._draft(narration="   ")

    def test_entry_date_must_fall_inside_financial_year(self):
        with self.assertRaises(LedgerValidationError):
            self._draft(entry_date=date(2026, 1, 5))

    def test_inactive_account_rejected(self):
        toggle_account_status(business_id=self.business.id, account_id=self.sales.id)
        with self.assertRaises(LedgerValidationError):
            self._draft()

    def test_account_from_other_business_not_found(self):
        other = make_business(name="Other Co")
        other_accounts = seed_ledger(other)

        with self.assertRaises(NotFoundError):
            self._draft(items=[debit(other_accounts["1000"], "10"), credit(self.sales, "10")])

    # --------------------------------------------------
    # POST
    # --------------------------------------------------

    def test_balanced_entry_posts_and_moves_balances(self):
        entry = self._draft()
        posted = post_journal_entry(business_id=self.business.id, entry_id=entry.id)

        self.assertEqual(posted.status, JournalEntry.POSTED)
        self.assertIsNotNone(posted.posted_at)
        self.assertEqual(get_entry_totals(posted), (Decimal("500.00"), Decimal("500.00")))
        self.assertEqual(balance_of(self.cash), Decimal("500.00"))
        self.assertEqual(balance_of(self.sales), Decimal("500.00"))

    def test_unbalanced_entry_stays_draft(self):
        entry = self._draft(items=[debit(self.cash, "500.00"), credit(self.sales, "400.00")])

        with self.assertRaises(UnbalancedEntryError):
            post_journal_entry(business_id=self.business.id, entry_id=entry.id)

        entry.refresh_from_db()
        self.assertEqual(entry.status, JournalEntry.DRAFT)
        self.assertIsNone(entry.posted_at)
        self.assertEqual(balance_of(self.cash), Decimal("0.00"))

    def test_posting_twice_rejected(self):
        entry = self._draft()
        post_journal_entry(business_id=self.business.id, entry_id=entry.id)

        with self.assertRaises(InvalidStateError):
            post_journal_entry(business_id=self.business.id, entry_id=entry.id)

    # --------------------------------------------------
    # CANCEL / DELETE
    # --------------------------------------------------

    def test_cancel_posted_entry_removes_it_from_balances(self):
        entry = self._draft()
        post_journal_entry(business_id=self.business.id, entry_id=entry.id)

        cancelled = cancel_journal_entry(business_id=self.business.id, entry_id=entry.id)

        self.assertEqual(cancelled.status, JournalEntry.CANCELLED)
        self.assertIsNotNone(cancelled.cancelled_at)
        self.assertEqual(balance_of(self.cash), Decimal("0.00"))

    def test_cancel_draft_rejected(self):
        entry = self._draft()
        with self.assertRaises(InvalidStateError):
            cancel_journal_entry(business_id=self.business.id, entry_id=entry.id)

    def test_cancelled_is_terminal(self):
        entry = self._draft()
        post_journal_entry(business_id=self.business.id, entry_id=entry.id)
        cancel_journal_entry(business_id=self.business.id, entry_id=entry.id)

        with self.assertRaises(InvalidStateError):
            post_journal_entry(business_id=self.business.id, entry_id=entry.id)
        with self.assertRaises(InvalidStateError):
            cancel_journal_entry(business_id=self.business.id, entry_id=entry.id)

    def test_delete_draft_removes_items(self):
        entry = self._draft()
        delete_journal_entry(business_id=self.business.id, entry_id=entry.id)

        self.assertFalse(JournalEntry.objects.filter(pk=entry.id).exists())
        self.assertFalse(JournalItem.objects.filter(journal_entry_id=entry.id).exists())

    def test_delete_posted_rejected(self):
        entry = self._draft()
        post_journal_entry(business_id=self.business.id, entry_id=entry.id)

        with self.assertRaises(InvalidStateError):
            delete_journal_entry(business_id=self.business.id, entry_id=entry.id)

    def test_unknown_entry_not_found(self):
        with self.assertRaises(NotFoundError):
            post_journal_entry(business_id=self.business.id, entry_id=999999)

    def test_non_numeric_entry_id_not_found(self):
        entry = self._draft()
        for call in (post_journal_entry, cancel_journal_entry, delete_journal_entry):
            with self.subTest(call=call.__name__):
                with self.assertRaises(NotFoundError):
                    call(business_id=self.business.id, entry_id="abc")
        with self.assertRaises(NotFoundError):
            get_journal_entry(self.business.id, "abc")

        entry.refresh_from_db()
        self.assertEqual(entry.status, JournalEntry.DRAFT)

    # --------------------------------------------------
    # UPDATE
    # --------------------------------------------------

    def test_update_draft_replaces_items(self):
        entry = self._draft(items=[debit(self.cash, "500.00"), credit(self.sales, "400.00")])

        updated = update_draft_journal_entry(
            business_id=self.business.id,
            entry_id=entry.id,
            narration="Corrected sale",
            items=[debit(self.cash, "400.00"), credit(self.sales, "400.00")],
        )

        self.assertEqual(updated.narration, "Corrected sale")
        self.assertEqual(get_entry_totals(updated), (Decimal("400.00"), Decimal("400.00")))
        post_journal_entry(business_id=self.business.id, entry_id=entry.id)

    def test_update_posted_rejected(self):
        entry = self._draft()
        post_journal_entry(business_id=self.business.id, entry_id=entry.id)

        with self.assertRaises(InvalidStateError):
            update_draft_journal_entry(
                business_id=self.business.id, entry_id=entry.id, narration="Too late"
            )


class JournalModelGuardTests(TestCase):
    """Model-level guards hold even when the service layer is bypassed."""

    def setUp(self):
        self.business = make_business()
        accounts = seed_ledger(self.business)
        self.cash = accounts["1000"]
        self.sales = accounts["4000"]
        entry = create_journal_entry(
            business_id=self.business.id,
            entry_date=date(2025, 2, 1),
            narration="Guarded",
            items=[debit(self.cash, "100"), credit(self.sales, "100")],
        )
        self.entry = post_journal_entry(business_id=self.business.id, entry_id=entry.id)

    def test_posted_entry_cannot_return_to_draft(self):
        self.entry.status = JournalEntry.DRAFT
        with self.assertRaises(ValidationError):
            self.entry.save()

    def test_items_cannot_be_added_to_posted_entry(self):
        with self.assertRaises(ValidationError):
            JournalItem.objects.create(
                journal_entry=self.entry,
                account=self.cash,
                entry_type=JournalItem.DEBIT,
                amount=Decimal("5.00"),
            )

    def test_items_of_posted_entry_cannot_be_deleted(self):
        with self.assertRaises(ValidationError):
            self.entry.items.first().delete()

    def test_posted_entry_cannot_be_deleted(self):
        with self.assertRaises(ValidationError):
            self.entry.delete()

    def test_account_with_items_cannot_be_deleted(self):
        with self.assertRaises(ValidationError):
            self.cash.delete()

    def test_category_type_frozen_once_used(self):
        category = self.cash.category
        category.type = category.EXPENSE
        with self.assertRaises(ValidationError):
            category.save()
