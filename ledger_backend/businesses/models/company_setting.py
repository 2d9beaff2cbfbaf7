# businesses/models/company_setting.py

"""
COMPANY SETTING MODEL

Per-business presentation + numbering preferences.

- Currency formatting (symbol, decimal separator, thousands separator)
  is used only by the presentation adapter (businesses.services.formatting).
- Document prefixes feed the reference-number sequences.
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models

from businesses.models.business import Business


class CompanySetting(models.Model):
    business = models.OneToOneField(
        Business,
        on_delete=models.CASCADE,
        related_name="company_setting",
    )

    currency = models.CharField(max_length=10, default="BDT")
    currency_symbol = models.CharField(max_length=10, default="৳")
    decimal_separator = models.CharField(max_length=1, default=".")
    thousand_separator = models.CharField(max_length=1, default=",", blank=True)

    timezone = models.CharField(max_length=64, default="Asia/Dhaka")
    fiscal_year_start_month = models.CharField(max_length=20, default="January")

    journal_prefix = models.CharField(max_length=20, default="JE-")
    invoice_prefix = models.CharField(max_length=20, default="INV-")
    purchase_prefix = models.CharField(max_length=20, default="PO-")
    sales_prefix = models.CharField(max_length=20, default="SO-")
    receipt_prefix = models.CharField(max_length=20, default="REC-")
    payment_prefix = models.CharField(max_length=20, default="PAY-")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Company Setting"
        verbose_name_plural = "Company Settings"

    def __str__(self):
        return f"Settings for {self.business}"

    def clean(self):
        if self.decimal_separator and self.decimal_separator == self.thousand_separator:
            raise ValidationError(
                {"thousand_separator": "Thousands separator must differ from decimal separator"}
            )

    def prefix_for(self, document_type: str) -> str:
        from businesses.models.sequence import DocumentSequence

        field = DocumentSequence.PREFIX_FIELDS.get(document_type)
        if field is None:
            raise ValueError(f"Unknown document type: {document_type!r}")
        return getattr(self, field) or ""
