# accounting/models/account.py

from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from accounting.models.category import AccountCategory
from businesses.models.business import Business


class Account(models.Model):
    """
    A single chart-of-account line for one business.

    Guarantees:
    - Account codes are unique per business
    - Code + name are normalized (trimmed)
    - Category must belong to the same business
    - Accounts with journal items cannot be deleted (deactivate instead)
    """

    business = models.ForeignKey(
        Business,
        on_delete=models.CASCADE,
        related_name="accounts",
    )

    category = models.ForeignKey(
        AccountCategory,
        on_delete=models.PROTECT,
        related_name="accounts",
    )

    code = models.CharField(max_length=20)
    name = models.CharField(max_length=150)
    description = models.TextField(blank=True, default="")

    is_active = models.BooleanField(default=True)

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
        ordering = ["code"]
        verbose_name = "Account"
        verbose_name_plural = "Accounts"
        indexes = [
            models.Index(fields=["is_active"], name="idx_account_is_active"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["business", "code"],
                name="uniq_account_business_code",
            ),
            models.CheckConstraint(
                condition=~Q(code=""),
                name="chk_account_code_not_blank",
            ),
            models.CheckConstraint(
                condition=~Q(name=""),
                name="chk_account_name_not_blank",
            ),
        ]

    def __str__(self):
        return f"{self.code} – {self.name}"

    @property
    def account_type(self) -> str:
        return self.category.type

    def clean(self):
        self.code = (self.code or "").strip()
        self.name = (self.name or "").strip()

        if not self.code:
            raise ValidationError("Account code is required")
        if not self.name:
            raise ValidationError("Account name is required")

        if self.category_id and self.business_id:
            if self.category.business_id != self.business_id:
                raise ValidationError(
                    {"category": "Category belongs to a different business"}
                )

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if self.journal_items.exists():
            raise ValidationError(
                "Account has journal items and cannot be deleted. Deactivate it instead."
            )
        return super().delete(*args, **kwargs)
