# accounting/models/bank_account.py

"""
BANK ACCOUNT MODEL

A bank account wraps exactly one Asset-typed chart account. The balance is
never stored here; it is always the live ledger balance of `account`.
"""

from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from accounting.models.account import Account
from accounting.models.category import AccountCategory
from businesses.models.business import Business


class BankAccount(models.Model):
    business = models.ForeignKey(
        Business,
        on_delete=models.CASCADE,
        related_name="bank_accounts",
    )

    account = models.OneToOneField(
        Account,
        on_delete=models.PROTECT,
        related_name="bank_account",
    )

    account_name = models.CharField(max_length=150)
    account_number = models.CharField(max_length=50)
    bank_name = models.CharField(max_length=150)
    branch_name = models.CharField(max_length=150, blank=True, default="")
    swift_code = models.CharField(max_length=20, blank=True, default="")
    routing_number = models.CharField(max_length=20, blank=True, default="")
    address = models.TextField(blank=True, default="")
    contact_person = models.CharField(max_length=150, blank=True, default="")
    contact_number = models.CharField(max_length=50, blank=True, default="")

    is_active = models.BooleanField(default=True)
    last_reconciled_at = models.DateTimeField(null=True, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["bank_name", "account_name"]
        verbose_name = "Bank Account"
        verbose_name_plural = "Bank Accounts"
        constraints = [
            models.UniqueConstraint(
                fields=["business", "account_number"],
                name="uniq_bank_account_business_number",
            ),
        ]

    def __str__(self):
        return f"{self.bank_name} – {self.account_name} ({self.account_number})"

    def clean(self):
        self.account_name = (self.account_name or "").strip()
        self.account_number = (self.account_number or "").strip()
        self.bank_name = (self.bank_name or "").strip()

        if not self.account_number:
            raise ValidationError("Account number is required")

        if self.account_id:
            if self.business_id and self.account.business_id != self.business_id:
                raise ValidationError({"account": "Account belongs to a different business"})
            if self.account.category.type != AccountCategory.ASSET:
                raise ValidationError({"account": "Bank accounts must wrap an Asset account"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
