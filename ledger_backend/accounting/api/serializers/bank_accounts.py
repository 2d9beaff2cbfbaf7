# accounting/api/serializers/bank_accounts.py

from rest_framework import serializers

from accounting.models.bank_account import BankAccount
from accounting.services.balance_service import balance_of
from businesses.services.formatting import format_for_setting


class BankAccountSerializer(serializers.ModelSerializer):
    """
    Output serializer. `balance` is the live ledger balance of the wrapped
    account; it is never read from a stored column.
    """

    account_code = serializers.CharField(source="account.code", read_only=True)
    balance = serializers.SerializerMethodField()
    formatted_balance = serializers.SerializerMethodField()

    class Meta:
        model = BankAccount
        fields = (
            "id",
            "account",
            "account_code",
            "account_name",
            "account_number",
            "bank_name",
            "branch_name",
            "swift_code",
            "routing_number",
            "address",
            "contact_person",
            "contact_number",
            "is_active",
            "last_reconciled_at",
            "balance",
            "formatted_balance",
            "created_at",
        )
        read_only_fields = fields

    def _balance(self, obj):
        cache = self.context.setdefault("_bank_balances", {})
        if obj.pk not in cache:
            cache[obj.pk] = balance_of(obj.account)
        return cache[obj.pk]

    def get_balance(self, obj):
        return str(self._balance(obj))

    def get_formatted_balance(self, obj):
        return format_for_setting(self._balance(obj), self.context.get("company_setting"))


class BankAccountCreateSerializer(serializers.Serializer):
    account_id = serializers.IntegerField()
    account_name = serializers.CharField(max_length=150)
    account_number = serializers.CharField(max_length=50)
    bank_name = serializers.CharField(max_length=150)
    branch_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    swift_code = serializers.CharField(max_length=20, required=False, allow_blank=True, default="")
    routing_number = serializers.CharField(max_length=20, required=False, allow_blank=True, default="")
    address = serializers.CharField(required=False, allow_blank=True, default="")
    contact_person = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    contact_number = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    is_active = serializers.BooleanField(required=False, default=True)

    initial_balance = serializers.DecimalField(
        max_digits=15, decimal_places=2, required=False, allow_null=True
    )
    opening_date = serializers.DateField(required=False, allow_null=True)


class ReconcileSerializer(serializers.Serializer):
    statement_balance = serializers.DecimalField(max_digits=15, decimal_places=2)
    reconciliation_date = serializers.DateField(required=False, allow_null=True)
    adjustment_account_id = serializers.IntegerField(required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, default="")


class StatementQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start, end = attrs.get("start_date"), attrs.get("end_date")
        if start and end and start > end:
            raise serializers.ValidationError({"end_date": "end_date must be on or after start_date"})
        return attrs


class BankAccountUpdateSerializer(serializers.Serializer):
    account_id = serializers.IntegerField(required=False)
    account_name = serializers.CharField(max_length=150, required=False)
    account_number = serializers.CharField(max_length=50, required=False)
    bank_name = serializers.CharField(max_length=150, required=False)
    branch_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    swift_code = serializers.CharField(max_length=20, required=False, allow_blank=True)
    routing_number = serializers.CharField(max_length=20, required=False, allow_blank=True)
    address = serializers.CharField(required=False, allow_blank=True)
    contact_person = serializers.CharField(max_length=150, required=False, allow_blank=True)
    contact_number = serializers.CharField(max_length=50, required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)
