# businesses/api/context.py

"""
CURRENT BUSINESS RESOLUTION (API layer only)

The ledger core never reads ambient state. Views resolve the tenant once,
here, from the X-Business-ID header and pass business_id explicitly.
"""

from __future__ import annotations

from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from businesses.models.business import Business
from businesses.services.settings_service import get_company_setting

BUSINESS_HEADER = "HTTP_X_BUSINESS_ID"


def get_request_business(request) -> Business:
    raw = (request.META.get(BUSINESS_HEADER) or "").strip()
    if not raw:
        raise ValidationError({"detail": "X-Business-ID header is required."})

    try:
        business_id = int(raw)
    except (TypeError, ValueError):
        raise ValidationError({"detail": "X-Business-ID must be an integer."})

    business = Business.objects.filter(pk=business_id, is_active=True).first()
    if business is None:
        raise NotFound("Business not found.")

    if not business.has_member(request.user):
        raise PermissionDenied("You are not a member of this business.")

    return business


class BusinessScopedMixin:
    """
    Resolves the request's business once per request. Querysets and service
    calls must be scoped with self.get_business().
    """

    def get_business(self) -> Business:
        business = getattr(self.request, "_ledger_business", None)
        if business is None:
            business = get_request_business(self.request)
            self.request._ledger_business = business
        return business

    def get_serializer_context(self):
        context = super().get_serializer_context()
        if getattr(self, "swagger_fake_view", False):
            return context
        context["company_setting"] = get_company_setting(self.get_business().id)
        return context
