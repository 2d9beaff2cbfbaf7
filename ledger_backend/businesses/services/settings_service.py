# businesses/services/settings_service.py

from __future__ import annotations

from businesses.models.business import Business
from businesses.models.company_setting import CompanySetting


class BusinessNotFound(LookupError):
    pass


def get_business(business_id) -> Business:
    try:
        return Business.objects.get(pk=business_id)
    except (Business.DoesNotExist, ValueError, TypeError) as exc:
        raise BusinessNotFound(f"Business {business_id!r} not found") from exc


def get_company_setting(business_id) -> CompanySetting:
    """
    Return the business's settings row, creating it with the defaults
    (৳, '.', ',', JE-/INV-/PO-/SO-/REC-/PAY-) on first use.
    """
    business = get_business(business_id)
    setting, _ = CompanySetting.objects.get_or_create(business=business)
    return setting
