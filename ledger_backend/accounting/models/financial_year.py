# accounting/models/financial_year.py

"""
FINANCIAL YEAR MODEL

Every journal entry is scoped to exactly one financial year of its business.

Hard rules:
- start_date < end_date
- Name unique per business ("2025-2026" when not supplied)
- At most ONE active year per business (partial unique constraint)
- Active years and years with journal entries cannot be deleted
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q

from businesses.models.business import Business


class FinancialYear(models.Model):
    business = models.ForeignKey(
        Business,
        on_delete=models.CASCADE,
        related_name="financial_years",
    )

    name = models.CharField(max_length=50, blank=True)
    start_date = models.DateField()
    end_date = models.DateField()

    is_active = models.BooleanField(default=False, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-start_date"]
        verbose_name = "Financial Year"
        verbose_name_plural = "Financial Years"
        constraints = [
            models.UniqueConstraint(
                fields=["business", "name"],
                name="uniq_financial_year_business_name",
            ),
            models.UniqueConstraint(
                fields=["business"],
                condition=Q(is_active=True),
                name="uniq_active_financial_year_per_business",
            ),
            models.CheckConstraint(
                condition=Q(start_date__lt=F("end_date")),
                name="chk_financial_year_start_before_end",
            ),
        ]

    def __str__(self):
        return self.name

    @staticmethod
    def default_name(start_date, end_date) -> str:
        return f"{start_date.year}-{end_date.year}"

    def contains(self, value) -> bool:
        return self.start_date <= value <= self.end_date

    def clean(self):
        if not self.start_date or not self.end_date:
            raise ValidationError("Start date and end date are required")

        if self.start_date >= self.end_date:
            raise ValidationError({"end_date": "End date must be after start date"})

        self.name = (self.name or "").strip() or self.default_name(
            self.start_date, self.end_date
        )

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if self.is_active:
            raise ValidationError("The active financial year cannot be deleted")
        if self.journal_entries.exists():
            raise ValidationError(
                "Financial year has journal entries and cannot be deleted"
            )
        return super().delete(*args, **kwargs)
