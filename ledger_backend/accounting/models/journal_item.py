# accounting/models/journal_item.py

"""
======================================================
PATH: accounting/models/journal_item.py
======================================================
JOURNAL ITEM MODEL

One debit or credit line of a journal entry.

Guarantees:
- Amount is always positive; direction is via entry_type
- Items can only be written while their entry is a draft
- Account must be active and belong to the entry's business
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q

from accounting.models.account import Account
from accounting.models.journal import JournalEntry


class JournalItem(models.Model):
    DEBIT = "debit"
    CREDIT = "credit"

    ENTRY_TYPES = [
        (DEBIT, "Debit"),
        (CREDIT, "Credit"),
    ]

    journal_entry = models.ForeignKey(
        JournalEntry,
        on_delete=models.CASCADE,
        related_name="items",
    )

    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="journal_items",
    )

    entry_type = models.CharField(
        max_length=6,
        choices=ENTRY_TYPES,
    )

    amount = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        help_text="Positive monetary value",
    )

    description = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Journal Item"
        verbose_name_plural = "Journal Items"
        ordering = ["id"]
        indexes = [
            models.Index(fields=["account", "entry_type"], name="idx_ji_account_type"),
            models.Index(fields=["journal_entry", "entry_type"], name="idx_ji_entry_type"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="chk_journal_item_amount_positive",
            ),
            models.CheckConstraint(
                condition=Q(entry_type__in=["debit", "credit"]),
                name="chk_journal_item_entry_type_valid",
            ),
        ]

    def __str__(self):
        return f"{self.entry_type} {self.amount} → {self.account}"

    def clean(self):
        if self.entry_type not in (self.DEBIT, self.CREDIT):
            raise ValidationError("Invalid entry_type")

        if self.amount is None or self.amount <= 0:
            raise ValidationError("Journal item amount must be > 0")

        if self.journal_entry_id and not self.journal_entry.is_draft:
            raise ValidationError("Journal items can only be added to draft entries")

        if self.account_id:
            if not self.account.is_active:
                raise ValidationError(f"Account {self.account.code} is inactive")
            if self.journal_entry_id and self.account.business_id != self.journal_entry.business_id:
                raise ValidationError("Account belongs to a different business")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if not self.journal_entry.is_draft:
            raise ValidationError("Items of a posted or cancelled entry cannot be deleted")
        return super().delete(*args, **kwargs)
