# businesses/apps.py

"""
BUSINESSES APP CONFIG

Tenant master data:
- Business (the tenant every ledger row belongs to)
- Company settings (currency formatting + document prefixes)
- Document sequences (reference number counters)
"""

from django.apps import AppConfig


class BusinessesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "businesses"
    verbose_name = "Businesses"
