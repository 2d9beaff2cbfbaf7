# accounting/models/category.py

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from businesses.models.business import Business


class AccountCategory(models.Model):
    """
    Groups accounts and fixes their normal balance side.

    - Asset / Expense are debit-normal
    - Liability / Equity / Revenue are credit-normal
    - type is frozen once any account in the category has journal items
    """

    ASSET = "Asset"
    LIABILITY = "Liability"
    EQUITY = "Equity"
    REVENUE = "Revenue"
    EXPENSE = "Expense"

    TYPES = [
        (ASSET, "Asset"),
        (LIABILITY, "Liability"),
        (EQUITY, "Equity"),
        (REVENUE, "Revenue"),
        (EXPENSE, "Expense"),
    ]

    DEBIT_NORMAL_TYPES = (ASSET, EXPENSE)

    business = models.ForeignKey(
        Business,
        on_delete=models.CASCADE,
        related_name="account_categories",
    )

    name = models.CharField(max_length=150)
    type = models.CharField(max_length=20, choices=TYPES)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["type", "name"]
        verbose_name = "Account Category"
        verbose_name_plural = "Account Categories"
        constraints = [
            models.UniqueConstraint(
                fields=["business", "name"],
                name="uniq_account_category_business_name",
            ),
            models.CheckConstraint(
                condition=Q(type__in=["Asset", "Liability", "Equity", "Revenue", "Expense"]),
                name="chk_account_category_type_valid",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.type})"

    @property
    def is_debit_normal(self) -> bool:
        return self.type in self.DEBIT_NORMAL_TYPES

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError("Category name is required")

        if not self.pk:
            return

        previous_type = (
            type(self).objects.filter(pk=self.pk).values_list("type", flat=True).first()
        )
        if previous_type and previous_type != self.type:
            in_use = self.accounts.filter(journal_items__isnull=False).exists()
            if in_use:
                raise ValidationError(
                    {"type": "Category type cannot change once its accounts have journal items"}
                )

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
