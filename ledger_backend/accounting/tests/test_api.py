# accounting/tests/test_api.py

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Permission
from django.test import TestCase
from rest_framework.test import APIClient

from accounting.models.journal import JournalEntry
from accounting.tests.utils import extra_asset_account, make_business, open_bank, seed_ledger

User = get_user_model()

BASE = "/api/accounting"


class LedgerApiTestCase(TestCase):
    def setUp(self):
        self.business = make_business()
        self.accounts = seed_ledger(self.business)
        self.admin = User.objects.create_superuser(
            username="admin", email="admin@example.com", password="pass"
        )
        self.client = APIClient()
        self.client.force_authenticate(user=self.admin)

    def _headers(self, business=None):
        return {"HTTP_X_BUSINESS_ID": str((business or self.business).id)}

    def get(self, path, **kwargs):
        return self.client.get(f"{BASE}{path}", **self._headers(), **kwargs)

    def post(self, path, data=None):
        return self.client.post(f"{BASE}{path}", data or {}, format="json", **self._headers())

    def patch(self, path, data):
        return self.client.patch(f"{BASE}{path}", data, format="json", **self._headers())

    def delete(self, path):
        return self.client.delete(f"{BASE}{path}", **self._headers())

    def _entry_payload(self, debit_amount="500.00", credit_amount="500.00"):
        return {
            "entry_date": "2025-03-01",
            "narration": "Cash sale",
            "items": [
                {"account_id": self.accounts["1000"].id, "entry_type": "debit", "amount": debit_amount},
                {"account_id": self.accounts["4000"].id, "entry_type": "credit", "amount": credit_amount},
            ],
        }


class BusinessScopeApiTests(LedgerApiTestCase):
    """
    GUARANTEES:
    - X-Business-ID is required
    - Only members (or superusers) can act on a business
    - Model permissions gate each action
    """

    def test_header_required(self):
        response = self.client.get(f"{BASE}/accounts/")
        self.assertEqual(response.status_code, 400)

    def test_unknown_business(self):
        response = self.client.get(f"{BASE}/accounts/", HTTP_X_BUSINESS_ID="999999")
        self.assertEqual(response.status_code, 404)

    def test_anonymous_denied(self):
        client = APIClient()
        response = client.get(f"{BASE}/accounts/", **self._headers())
        self.assertIn(response.status_code, (401, 403))

    def test_membership_and_permission_required(self):
        clerk = User.objects.create_user(username="clerk", password="pass")
        clerk.user_permissions.add(Permission.objects.get(codename="view_account"))
        client = APIClient()
        client.force_authenticate(user=clerk)

        response = client.get(f"{BASE}/accounts/", **self._headers())
        self.assertEqual(response.status_code, 403)

        self.business.members.add(clerk)
        response = client.get(f"{BASE}/accounts/", **self._headers())
        self.assertEqual(response.status_code, 200)

        response = client.post(
            f"{BASE}/journal-entries/", self._entry_payload(), format="json", **self._headers()
        )
        self.assertEqual(response.status_code, 403)

    def test_accounts_listed_per_business(self):
        other = make_business(name="Other Co")
        seed_ledger(other)

        response = self.get("/accounts/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], len(self.accounts))
        codes = {row["code"] for row in response.data["results"]}
        self.assertIn("1000", codes)

    def test_health_check(self):
        response = APIClient().get("/api/health/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], "ok")


class ChartApiTests(LedgerApiTestCase):
    def test_create_account(self):
        category = self.accounts["1000"].category
        response = self.post(
            "/accounts/",
            {"category_id": category.id, "code": "1300", "name": "Prepaid Rent"},
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["account_type"], "Asset")

    def test_duplicate_code_is_400(self):
        category = self.accounts["1000"].category
        response = self.post(
            "/accounts/",
            {"category_id": category.id, "code": "1000", "name": "Duplicate"},
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "validation_error")

    def test_account_balance(self):
        self.post("/journal-entries/", self._entry_payload())
        entry = JournalEntry.objects.get(business=self.business)
        self.post(f"/journal-entries/{entry.id}/post/")

        response = self.get(f"/accounts/{self.accounts['1000'].id}/balance/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["balance"], "500.00")
        self.assertEqual(response.data["formatted_balance"], "৳ 500.00")

    def test_toggle_status_and_delete(self):
        account = extra_asset_account(self.business)

        response = self.post(f"/accounts/{account.id}/toggle-status/")
        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.data["is_active"])

        response = self.client.delete(f"{BASE}/accounts/{account.id}/", **self._headers())
        self.assertEqual(response.status_code, 204)

    def test_create_category(self):
        response = self.post("/account-categories/", {"name": "Current Assets", "type": "Asset"})
        self.assertEqual(response.status_code, 201)

        response = self.post("/account-categories/", {"name": "Current Assets", "type": "Asset"})
        self.assertEqual(response.status_code, 400)

    def test_financial_year_create_and_activate(self):
        response = self.post(
            "/financial-years/",
            {"start_date": "2026-01-01", "end_date": "2026-12-31"},
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["name"], "2026-2026")
        self.assertFalse(response.data["is_active"])

        response = self.post(f"/financial-years/{response.data['id']}/activate/")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["is_active"])

        response = self.get("/financial-years/", data={"is_active": "true"})
        self.assertEqual(response.data["count"], 1)

    def test_update_account(self):
        account = extra_asset_account(self.business)

        response = self.patch(
            f"/accounts/{account.id}/",
            {"name": "  Petty Cash  ", "description": "Front desk float"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["name"], "Petty Cash")
        self.assertEqual(response.data["code"], "1020")

        response = self.patch(f"/accounts/{account.id}/", {"code": "1000"})
        self.assertEqual(response.status_code, 400)

    def test_used_account_cannot_change_category_type(self):
        self.post("/journal-entries/", self._entry_payload())
        cash = self.accounts["1000"]
        liability = self.accounts["2000"].category

        response = self.patch(f"/accounts/{cash.id}/", {"category_id": liability.id})
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["code"], "invalid_state")

    def test_update_and_delete_category(self):
        response = self.post("/account-categories/", {"name": "Prepayments", "type": "Asset"})
        category_id = response.data["id"]

        response = self.patch(f"/account-categories/{category_id}/", {"name": "Prepaid Expenses"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["name"], "Prepaid Expenses")
        self.assertEqual(response.data["type"], "Asset")

        response = self.delete(f"/account-categories/{category_id}/")
        self.assertEqual(response.status_code, 204)

        response = self.delete(f"/account-categories/{category_id}/")
        self.assertEqual(response.status_code, 404)

    def test_category_with_accounts_cannot_be_deleted(self):
        category = self.accounts["1000"].category
        response = self.delete(f"/account-categories/{category.id}/")
        self.assertEqual(response.status_code, 409)

    def test_category_type_frozen_once_used(self):
        response = self.post("/journal-entries/", self._entry_payload())
        category = self.accounts["1000"].category

        response = self.patch(f"/account-categories/{category.id}/", {"type": "Liability"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "validation_error")

        category.refresh_from_db()
        self.assertEqual(category.type, "Asset")

    def test_update_financial_year(self):
        response = self.post(
            "/financial-years/",
            {"start_date": "2026-01-01", "end_date": "2026-12-31"},
        )
        year_id = response.data["id"]

        response = self.patch(
            f"/financial-years/{year_id}/",
            {"name": "FY 2026", "end_date": "2027-06-30"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["name"], "FY 2026")
        self.assertEqual(response.data["end_date"], "2027-06-30")
        self.assertFalse(response.data["is_active"])

        response = self.patch(f"/financial-years/{year_id}/", {"is_active": True})
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["is_active"])

        response = self.get("/financial-years/", data={"is_active": "true"})
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["id"], year_id)

    def test_financial_year_update_cannot_strand_entries(self):
        self.post("/journal-entries/", self._entry_payload())
        response = self.get("/financial-years/", data={"is_active": "true"})
        year_id = response.data["results"][0]["id"]

        response = self.patch(f"/financial-years/{year_id}/", {"start_date": "2025-06-01"})
        self.assertEqual(response.status_code, 409)

        response = self.patch(f"/financial-years/{year_id}/", {"is_active": False})
        self.assertEqual(response.status_code, 409)

    def test_active_financial_year_delete_is_409(self):
        response = self.get("/financial-years/", data={"is_active": "true"})
        year_id = response.data["results"][0]["id"]

        response = self.client.delete(f"{BASE}/financial-years/{year_id}/", **self._headers())
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["code"], "invalid_state")


class JournalEntryApiTests(LedgerApiTestCase):
    def test_create_post_cancel(self):
        response = self.post("/journal-entries/", self._entry_payload())
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["status"], "draft")
        self.assertEqual(response.data["reference_number"], "JE-00001")
        self.assertEqual(response.data["total_debit"], "500.00")
        self.assertEqual(len(response.data["items"]), 2)
        entry_id = response.data["id"]

        response = self.post(f"/journal-entries/{entry_id}/post/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], "posted")

        response = self.client.delete(f"{BASE}/journal-entries/{entry_id}/", **self._headers())
        self.assertEqual(response.status_code, 409)

        response = self.post(f"/journal-entries/{entry_id}/cancel/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], "cancelled")

    def test_unbalanced_post_is_409(self):
        response = self.post("/journal-entries/", self._entry_payload("500.00", "400.00"))
        entry_id = response.data["id"]

        response = self.post(f"/journal-entries/{entry_id}/post/")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["code"], "unbalanced_entry")
        self.assertEqual(JournalEntry.objects.get(pk=entry_id).status, JournalEntry.DRAFT)

    def test_update_draft(self):
        response = self.post("/journal-entries/", self._entry_payload("500.00", "400.00"))
        entry_id = response.data["id"]

        response = self.client.put(
            f"{BASE}/journal-entries/{entry_id}/",
            self._entry_payload("400.00", "400.00"),
            format="json",
            **self._headers(),
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["total_debit"], "400.00")
        self.assertEqual(response.data["total_credit"], "400.00")

    def test_cancel_draft_is_409(self):
        response = self.post("/journal-entries/", self._entry_payload())
        response = self.post(f"/journal-entries/{response.data['id']}/cancel/")
        self.assertEqual(response.status_code, 409)

    def test_single_item_rejected(self):
        payload = self._entry_payload()
        payload["items"] = payload["items"][:1]

        response = self.post("/journal-entries/", payload)
        self.assertEqual(response.status_code, 400)

    def test_non_numeric_ids_are_404(self):
        for path in ("/journal-entries/abc/post/", "/journal-entries/abc/cancel/"):
            with self.subTest(path=path):
                response = self.post(path)
                self.assertEqual(response.status_code, 404)
                self.assertEqual(response.data["code"], "not_found")

        for path in (
            "/journal-entries/abc/",
            "/financial-years/abc/",
            "/account-categories/abc/",
            "/bank-accounts/abc/",
        ):
            with self.subTest(path=path):
                self.assertEqual(self.delete(path).status_code, 404)

    def test_oversized_amount_is_400(self):
        response = self.post(
            "/journal-entries/",
            self._entry_payload("123456789012345678.91", "123456789012345678.91"),
        )
        self.assertEqual(response.status_code, 400)
        self.assertFalse(JournalEntry.objects.filter(business=self.business).exists())

    def test_other_business_entry_not_found(self):
        response = self.post("/journal-entries/", self._entry_payload())
        entry_id = response.data["id"]

        other = make_business(name="Other Co")
        seed_ledger(other)
        response = self.client.post(
            f"{BASE}/journal-entries/{entry_id}/post/", format="json", **self._headers(other)
        )
        self.assertEqual(response.status_code, 404)

    def test_trial_balance(self):
        response = self.post("/journal-entries/", self._entry_payload())
        self.post(f"/journal-entries/{response.data['id']}/post/")

        response = self.get("/trial-balance/")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["totals"]["balanced"])
        self.assertEqual(response.data["totals"]["debit"], "500.00")
        self.assertEqual(len(response.data["accounts"]), 2)

        response = self.get("/trial-balance/", data={"as_of": "2025-02-28"})
        self.assertEqual(response.data["accounts"], [])

        response = self.get("/trial-balance/", data={"as_of": "not-a-date"})
        self.assertEqual(response.status_code, 400)


class BankingApiTests(LedgerApiTestCase):
    def setUp(self):
        super().setUp()
        self.bank = open_bank(self.business, self.accounts["1010"])
        self.second = open_bank(self.business, extra_asset_account(self.business), number="9999")

    def test_open_bank_account_with_initial_balance(self):
        account = extra_asset_account(self.business, code="1030", name="Savings")
        response = self.post(
            "/bank-accounts/",
            {
                "account_id": account.id,
                "account_name": "Savings",
                "account_number": "SAV-1",
                "bank_name": "Dutch-Bangla Bank",
                "initial_balance": "1000.00",
                "opening_date": "2025-01-02",
            },
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["balance"], "1000.00")

    def test_deposit(self):
        response = self.post(
            "/bank-transactions/deposit/",
            {
                "bank_account_id": self.bank.id,
                "income_account_id": self.accounts["4000"].id,
                "amount": "1000.00",
                "entry_date": "2025-04-01",
            },
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["status"], "posted")
        self.assertEqual(len(response.data["items"]), 2)
        self.assertEqual(response.data["warnings"], [])

    def test_transfer_warns_on_insufficient_funds(self):
        response = self.post(
            "/bank-transactions/transfer/",
            {
                "from_bank_account_id": self.bank.id,
                "to_bank_account_id": self.second.id,
                "amount": "300.00",
                "entry_date": "2025-04-02",
            },
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["warnings"][0]["code"], "insufficient_funds")

        response = self.get(f"/bank-accounts/{self.bank.id}/")
        self.assertEqual(response.data["balance"], "-300.00")

    def test_transfer_same_account_is_400(self):
        response = self.post(
            "/bank-transactions/transfer/",
            {
                "from_bank_account_id": self.bank.id,
                "to_bank_account_id": self.bank.id,
                "amount": "10.00",
                "entry_date": "2025-04-02",
            },
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "same_account")

    def test_reconcile_and_statement(self):
        self.post(
            "/bank-transactions/deposit/",
            {
                "bank_account_id": self.bank.id,
                "income_account_id": self.accounts["4000"].id,
                "amount": "5000.00",
                "entry_date": "2025-04-01",
            },
        )

        response = self.post(
            f"/bank-accounts/{self.bank.id}/reconcile/",
            {"statement_balance": "5050.00", "reconciliation_date": "2025-04-30"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["adjustment"], "50.00")
        self.assertIsNotNone(response.data["journal_entry_id"])

        response = self.get(
            f"/bank-accounts/{self.bank.id}/statement/",
            data={"start_date": "2025-04-01", "end_date": "2025-04-30"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["opening_balance"], "0.00")
        self.assertEqual(response.data["closing_balance"], "5050.00")
        self.assertEqual(len(response.data["lines"]), 2)

    def _deposit(self, amount="1000.00"):
        return self.post(
            "/bank-transactions/deposit/",
            {
                "bank_account_id": self.bank.id,
                "income_account_id": self.accounts["4000"].id,
                "amount": amount,
                "entry_date": "2025-04-01",
            },
        )

    def test_update_bank_account(self):
        response = self.patch(
            f"/bank-accounts/{self.bank.id}/",
            {"bank_name": "Pubali Bank", "branch_name": "Motijheel"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["bank_name"], "Pubali Bank")
        self.assertEqual(response.data["branch_name"], "Motijheel")

        response = self.patch(f"/bank-accounts/{self.bank.id}/", {"account_number": "9999"})
        self.assertEqual(response.status_code, 400)

    def test_wrapped_account_locked_after_posting(self):
        spare = extra_asset_account(self.business, code="1030", name="Spare")
        self._deposit()

        response = self.patch(f"/bank-accounts/{self.bank.id}/", {"account_id": spare.id})
        self.assertEqual(response.status_code, 409)

        response = self.patch(f"/bank-accounts/{self.second.id}/", {"account_id": spare.id})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["account"], spare.id)

    def test_delete_bank_account(self):
        self._deposit()

        response = self.delete(f"/bank-accounts/{self.bank.id}/")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["code"], "invalid_state")

        account_id = self.second.account_id
        response = self.delete(f"/bank-accounts/{self.second.id}/")
        self.assertEqual(response.status_code, 204)
        self.assertEqual(self.get("/bank-accounts/").data["count"], 1)
        self.assertEqual(self.get(f"/accounts/{account_id}/").status_code, 200)
