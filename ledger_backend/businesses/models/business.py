# businesses/models/business.py

from django.conf import settings
from django.db import models
from django.db.models import Q


class Business(models.Model):
    """
    A tenant. Every ledger row (categories, accounts, financial years,
    journal entries, bank accounts) belongs to exactly one business.

    - code is optional, but if provided it must be unique
    - members are the users allowed to act on this business
    """

    name = models.CharField(max_length=255)

    code = models.CharField(
        max_length=50,
        null=True,
        blank=True,
        help_text="Unique business code (optional). If set, must be unique.",
        db_index=True,
    )

    legal_name = models.CharField(max_length=255, blank=True, default="")
    address = models.TextField(blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")
    email = models.EmailField(blank=True, default="")

    members = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        blank=True,
        related_name="businesses",
    )

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "Businesses"
        constraints = [
            models.UniqueConstraint(
                fields=["code"],
                condition=Q(code__isnull=False) & ~Q(code=""),
                name="uniq_business_code_when_present",
            ),
        ]

    def __str__(self):
        c = (self.code or "").strip()
        if c:
            return f"{self.name} ({c})"
        return self.name

    def has_member(self, user) -> bool:
        if user is None or not getattr(user, "is_authenticated", False):
            return False
        if user.is_superuser:
            return True
        return self.members.filter(pk=user.pk).exists()
