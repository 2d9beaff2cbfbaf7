# accounting/models/journal.py

"""
======================================================
PATH: accounting/models/journal.py
======================================================
JOURNAL ENTRY MODEL

Represents a single accounting transaction (journal header).

Lifecycle:
    draft  -> posted     (only when debits == credits)
    posted -> cancelled  (terminal)
    draft  -> deleted    (removal, not a state)

Guarantees:
- Reference number unique per business
- Debit/credit totals are never stored; they are summed from items
- Posted and cancelled entries cannot be deleted
- A posted entry never returns to draft
"""

from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from accounting.models.financial_year import FinancialYear
from businesses.models.business import Business


class JournalEntry(models.Model):
    DRAFT = "draft"
    POSTED = "posted"
    CANCELLED = "cancelled"

    STATUSES = [
        (DRAFT, "Draft"),
        (POSTED, "Posted"),
        (CANCELLED, "Cancelled"),
    ]

    # (stored status, new status) pairs a save() may perform
    ALLOWED_TRANSITIONS = {
        (DRAFT, DRAFT),
        (DRAFT, POSTED),
        (POSTED, CANCELLED),
    }

    business = models.ForeignKey(
        Business,
        on_delete=models.CASCADE,
        related_name="journal_entries",
    )

    financial_year = models.ForeignKey(
        FinancialYear,
        on_delete=models.PROTECT,
        related_name="journal_entries",
    )

    reference_number = models.CharField(max_length=50)
    entry_date = models.DateField()
    narration = models.TextField(help_text="Narrative description of the journal entry")

    status = models.CharField(
        max_length=10,
        choices=STATUSES,
        default=DRAFT,
        db_index=True,
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    posted_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-entry_date", "-id"]
        verbose_name = "Journal Entry"
        verbose_name_plural = "Journal Entries"
        indexes = [
            models.Index(fields=["business", "entry_date"], name="idx_je_business_date"),
            models.Index(fields=["business", "status"], name="idx_je_business_status"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["business", "reference_number"],
                name="uniq_journal_entry_business_reference",
            ),
            models.CheckConstraint(
                condition=Q(status__in=["draft", "posted", "cancelled"]),
                name="chk_journal_entry_status_valid",
            ),
        ]

    def __str__(self):
        return f"{self.reference_number} – {self.entry_date}"

    @property
    def is_draft(self) -> bool:
        return self.status == self.DRAFT

    def clean(self):
        self.reference_number = (self.reference_number or "").strip()
        if not self.reference_number:
            raise ValidationError("Reference number is required")

        self.narration = (self.narration or "").strip()
        if not self.narration:
            raise ValidationError("Journal entry narration is required")

        if self.financial_year_id and self.business_id:
            if self.financial_year.business_id != self.business_id:
                raise ValidationError(
                    {"financial_year": "Financial year belongs to a different business"}
                )

    def save(self, *args, **kwargs):
        if self.pk:
            stored = (
                type(self).objects.filter(pk=self.pk).values_list("status", flat=True).first()
            )
            if stored and (stored, self.status) not in self.ALLOWED_TRANSITIONS:
                raise ValidationError(
                    f"Journal entry cannot change from {stored} to {self.status}"
                )

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if self.status != self.DRAFT:
            raise ValidationError("Only draft journal entries can be deleted")
        return super().delete(*args, **kwargs)
