# accounting/tests/test_financial_years.py

from __future__ import annotations

from datetime import date

from django.db import IntegrityError, transaction
from django.test import TestCase

from accounting.models.financial_year import FinancialYear
from accounting.services.exceptions import (
    InvalidStateError,
    LedgerValidationError,
    NotFoundError,
)
from accounting.services.financial_year_service import (
    activate_financial_year,
    create_financial_year,
    delete_financial_year,
    get_active_financial_year,
    is_date_within,
    update_financial_year,
)
from accounting.services.journal_entry_service import create_journal_entry
from accounting.tests.utils import credit, debit, make_business, seed_ledger


class FinancialYearServiceTests(TestCase):
    """
    GUARANTEES:
    - start < end
    - At most one active year per business
    - Active years and years with entries are never deleted
    """

    def setUp(self):
        self.business = make_business()

    def _year(self, start, end, **kwargs):
        return create_financial_year(
            business_id=self.business.id, start_date=start, end_date=end, **kwargs
        )

    def test_default_name_from_dates(self):
        year = self._year(date(2025, 7, 1), date(2026, 6, 30))
        self.assertEqual(year.name, "2025-2026")
        self.assertFalse(year.is_active)

    def test_end_must_follow_start(self):
        with self.assertRaises(LedgerValidationError):
            self._year(date(2025, 7, 1), date(2025, 7, 1))
        with self.assertRaises(LedgerValidationError):
            self._year(date(2025, 7, 1), date(2025, 1, 1))

    def test_duplicate_name_rejected(self):
        self._year(date(2025, 1, 1), date(2025, 12, 31), name="FY25")
        with self.assertRaises(LedgerValidationError):
            self._year(date(2026, 1, 1), date(2026, 12, 31), name="FY25")

    def test_activation_leaves_exactly_one_active(self):
        first = self._year(date(2024, 1, 1), date(2024, 12, 31), is_active=True)
        second = self._year(date(2025, 1, 1), date(2025, 12, 31), is_active=True)

        first.refresh_from_db()
        self.assertFalse(first.is_active)
        self.assertTrue(second.is_active)
        self.assertEqual(get_active_financial_year(self.business.id), second)

        activate_financial_year(business_id=self.business.id, financial_year_id=first.id)
        self.assertEqual(
            FinancialYear.objects.filter(business=self.business, is_active=True).count(), 1
        )
        self.assertEqual(get_active_financial_year(self.business.id), first)

    def test_activation_is_per_business(self):
        other = make_business(name="Other Co")
        mine = self._year(date(2025, 1, 1), date(2025, 12, 31), is_active=True)
        theirs = create_financial_year(
            business_id=other.id,
            start_date=date(2025, 1, 1),
            end_date=date(2025, 12, 31),
            is_active=True,
        )

        mine.refresh_from_db()
        self.assertTrue(mine.is_active)
        self.assertTrue(theirs.is_active)

        with self.assertRaises(NotFoundError):
            activate_financial_year(business_id=self.business.id, financial_year_id=theirs.id)

    def test_database_refuses_second_active_year(self):
        self._year(date(2024, 1, 1), date(2024, 12, 31), is_active=True)
        other = self._year(date(2025, 1, 1), date(2025, 12, 31))

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                FinancialYear.objects.filter(pk=other.pk).update(is_active=True)

    def test_no_active_year(self):
        with self.assertRaises(NotFoundError):
            get_active_financial_year(self.business.id)

    def test_overlap_is_logged_not_refused(self):
        self._year(date(2025, 1, 1), date(2025, 12, 31))

        with self.assertLogs("accounting.services.financial_year_service", level="WARNING") as logs:
            year = self._year(date(2025, 7, 1), date(2026, 6, 30))

        self.assertIsNotNone(year.pk)
        self.assertIn("overlaps", logs.output[0])

    def test_date_within(self):
        year = self._year(date(2025, 7, 1), date(2026, 6, 30))
        self.assertTrue(is_date_within(year, date(2025, 7, 1)))
        self.assertTrue(is_date_within(year, date(2026, 6, 30)))
        self.assertFalse(is_date_within(year, date(2026, 7, 1)))

    def test_delete_guards(self):
        accounts = seed_ledger(self.business, year=2025)
        active = get_active_financial_year(self.business.id)

        with self.assertRaises(InvalidStateError):
            delete_financial_year(business_id=self.business.id, financial_year_id=active.id)

        old = self._year(date(2024, 1, 1), date(2024, 12, 31))
        create_journal_entry(
            business_id=self.business.id,
            financial_year_id=old.id,
            entry_date=date(2024, 6, 1),
            narration="Back-dated",
            items=[debit(accounts["1000"], "10"), credit(accounts["4000"], "10")],
        )
        with self.assertRaises(InvalidStateError):
            delete_financial_year(business_id=self.business.id, financial_year_id=old.id)

        empty = self._year(date(2023, 1, 1), date(2023, 12, 31))
        delete_financial_year(business_id=self.business.id, financial_year_id=empty.id)
        self.assertFalse(FinancialYear.objects.filter(pk=empty.pk).exists())

    def test_non_numeric_id_not_found(self):
        with self.assertRaises(NotFoundError):
            activate_financial_year(business_id=self.business.id, financial_year_id="abc")
        with self.assertRaises(NotFoundError):
            delete_financial_year(business_id=self.business.id, financial_year_id="abc")


class FinancialYearUpdateTests(TestCase):
    """
    GUARANTEES:
    - Activation through update leaves exactly one active year
    - Dates never move so that existing entries fall outside the year
    - The active year is only replaced by activating another one
    """

    def setUp(self):
        self.business = make_business()
        self.accounts = seed_ledger(self.business, year=2025)
        self.current = get_active_financial_year(self.business.id)
        self.next_year = create_financial_year(
            business_id=self.business.id,
            start_date=date(2026, 1, 1),
            end_date=date(2026, 12, 31),
        )

    def _update(self, year, **kwargs):
        return update_financial_year(
            business_id=self.business.id, financial_year_id=year.id, **kwargs
        )

    def test_rename_and_move_dates(self):
        year = self._update(
            self.next_year, name="FY26", start_date=date(2026, 7, 1), end_date=date(2027, 6, 30)
        )

        self.assertEqual(year.name, "FY26")
        self.assertEqual((year.start_date, year.end_date), (date(2026, 7, 1), date(2027, 6, 30)))
        self.assertFalse(year.is_active)

    def test_end_must_follow_start(self):
        with self.assertRaises(LedgerValidationError):
            self._update(self.next_year, end_date=date(2025, 12, 31))

    def test_activate_through_update(self):
        year = self._update(self.next_year, is_active=True)

        self.assertTrue(year.is_active)
        self.assertEqual(
            FinancialYear.objects.filter(business=self.business, is_active=True).count(), 1
        )
        self.current.refresh_from_db()
        self.assertFalse(self.current.is_active)

    def test_active_year_cannot_be_switched_off(self):
        with self.assertRaises(InvalidStateError):
            self._update(self.current, is_active=False)

        self.current.refresh_from_db()
        self.assertTrue(self.current.is_active)

    def test_dates_cannot_strand_entries(self):
        create_journal_entry(
            business_id=self.business.id,
            entry_date=date(2025, 3, 1),
            narration="March sale",
            items=[debit(self.accounts["1000"], "10"), credit(self.accounts["4000"], "10")],
        )

        with self.assertRaises(InvalidStateError):
            self._update(self.current, start_date=date(2025, 4, 1))

        year = self._update(self.current, end_date=date(2025, 6, 30))
        self.assertEqual(year.end_date, date(2025, 6, 30))

    def test_overlap_on_update_is_logged(self):
        with self.assertLogs("accounting.services.financial_year_service", level="WARNING") as logs:
            self._update(self.next_year, start_date=date(2025, 12, 1))

        self.assertIn("overlaps", logs.output[0])
