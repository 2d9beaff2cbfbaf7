# accounting/api/serializers/journal_entries.py

from rest_framework import serializers

from accounting.api.serializers.fields import FormattedAmountField
from accounting.models.journal import JournalEntry
from accounting.models.journal_item import JournalItem
from accounting.services.journal_entry_service import get_entry_totals
from businesses.services.formatting import format_for_setting


class JournalItemSerializer(serializers.ModelSerializer):
    account_code = serializers.CharField(source="account.code", read_only=True)
    account_name = serializers.CharField(source="account.name", read_only=True)
    formatted_amount = FormattedAmountField(source="amount")

    class Meta:
        model = JournalItem
        fields = (
            "id",
            "account",
            "account_code",
            "account_name",
            "entry_type",
            "amount",
            "formatted_amount",
            "description",
        )
        read_only_fields = fields


class JournalEntrySerializer(serializers.ModelSerializer):
    """
    Output serializer. Totals are summed from items on every read.
    """

    financial_year_name = serializers.CharField(source="financial_year.name", read_only=True)
    items = JournalItemSerializer(many=True, read_only=True)
    total_debit = serializers.SerializerMethodField()
    total_credit = serializers.SerializerMethodField()
    formatted_total_debit = serializers.SerializerMethodField()
    formatted_total_credit = serializers.SerializerMethodField()

    class Meta:
        model = JournalEntry
        fields = (
            "id",
            "reference_number",
            "financial_year",
            "financial_year_name",
            "entry_date",
            "narration",
            "status",
            "posted_at",
            "cancelled_at",
            "created_at",
            "items",
            "total_debit",
            "total_credit",
            "formatted_total_debit",
            "formatted_total_credit",
        )
        read_only_fields = fields

    def _totals(self, obj):
        cache = self.context.setdefault("_entry_totals", {})
        if obj.pk not in cache:
            cache[obj.pk] = get_entry_totals(obj)
        return cache[obj.pk]

    def get_total_debit(self, obj):
        return str(self._totals(obj)[0])

    def get_total_credit(self, obj):
        return str(self._totals(obj)[1])

    def get_formatted_total_debit(self, obj):
        return format_for_setting(self._totals(obj)[0], self.context.get("company_setting"))

    def get_formatted_total_credit(self, obj):
        return format_for_setting(self._totals(obj)[1], self.context.get("company_setting"))


class JournalItemInputSerializer(serializers.Serializer):
    account_id = serializers.IntegerField()
    entry_type = serializers.ChoiceField(choices=[JournalItem.DEBIT, JournalItem.CREDIT])
    amount = serializers.DecimalField(max_digits=15, decimal_places=2)
    description = serializers.CharField(required=False, allow_blank=True, default="")


class JournalEntryWriteSerializer(serializers.Serializer):
    """
    Input serializer for creating / editing a draft.
    Balance is not required here; it is enforced when posting.
    """

    financial_year_id = serializers.IntegerField(required=False, allow_null=True)
    entry_date = serializers.DateField()
    narration = serializers.CharField()
    reference_number = serializers.CharField(
        max_length=50, required=False, allow_blank=True, allow_null=True
    )
    items = JournalItemInputSerializer(many=True)
