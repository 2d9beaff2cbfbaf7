# businesses/models/sequence.py

from __future__ import annotations

from django.db import models
from django.db.models import Q

from businesses.models.business import Business


class DocumentSequence(models.Model):
    """
    Monotonic counter per (business, document type).

    Only businesses.services.sequence_service increments this row, under a
    row lock.
    """

    JOURNAL = "journal"
    INVOICE = "invoice"
    PURCHASE = "purchase"
    SALES = "sales"
    RECEIPT = "receipt"
    PAYMENT = "payment"

    DOCUMENT_TYPES = [
        (JOURNAL, "Journal Entry"),
        (INVOICE, "Invoice"),
        (PURCHASE, "Purchase Order"),
        (SALES, "Sales Order"),
        (RECEIPT, "Receipt"),
        (PAYMENT, "Payment"),
    ]

    PREFIX_FIELDS = {
        JOURNAL: "journal_prefix",
        INVOICE: "invoice_prefix",
        PURCHASE: "purchase_prefix",
        SALES: "sales_prefix",
        RECEIPT: "receipt_prefix",
        PAYMENT: "payment_prefix",
    }

    business = models.ForeignKey(
        Business,
        on_delete=models.CASCADE,
        related_name="document_sequences",
    )
    document_type = models.CharField(max_length=20, choices=DOCUMENT_TYPES)
    last_number = models.PositiveIntegerField(default=0)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["business", "document_type"],
                name="uniq_document_sequence_business_type",
            ),
            models.CheckConstraint(
                condition=Q(last_number__gte=0),
                name="chk_document_sequence_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.business_id}:{self.document_type} @ {self.last_number}"
