# accounting/api/serializers/fields.py

from rest_framework import serializers

from businesses.services.formatting import format_for_setting


class FormattedAmountField(serializers.ReadOnlyField):
    """
    Renders a Decimal with the business's currency symbol and separators.
    The view puts the CompanySetting in the serializer context.
    """

    def to_representation(self, value):
        return format_for_setting(value, self.context.get("company_setting"))
