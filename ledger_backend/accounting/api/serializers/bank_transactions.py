# accounting/api/serializers/bank_transactions.py

from decimal import Decimal

from rest_framework import serializers


class _BankTransactionSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=15, decimal_places=2)
    entry_date = serializers.DateField(required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    reference_number = serializers.CharField(
        max_length=50, required=False, allow_blank=True, allow_null=True
    )

    def validate_amount(self, value):
        if value is None or value <= Decimal("0"):
            raise serializers.ValidationError("amount must be > 0")
        return value


class DepositSerializer(_BankTransactionSerializer):
    bank_account_id = serializers.IntegerField()
    income_account_id = serializers.IntegerField()


class WithdrawSerializer(_BankTransactionSerializer):
    bank_account_id = serializers.IntegerField()
    expense_account_id = serializers.IntegerField()


class TransferSerializer(_BankTransactionSerializer):
    from_bank_account_id = serializers.IntegerField()
    to_bank_account_id = serializers.IntegerField()
