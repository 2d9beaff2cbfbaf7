# accounting/api/serializers/accounts.py

from rest_framework import serializers

from accounting.models.account import Account
from accounting.models.category import AccountCategory


class AccountCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = AccountCategory
        fields = ("id", "name", "type", "created_at")
        read_only_fields = ("id", "created_at")


class AccountSerializer(serializers.ModelSerializer):
    """
    Output serializer for chart-of-account rows.
    UI needs: code, name, type (and id for keys).
    """

    category_name = serializers.CharField(source="category.name", read_only=True)
    account_type = serializers.CharField(source="category.type", read_only=True)

    class Meta:
        model = Account
        fields = (
            "id",
            "code",
            "name",
            "description",
            "category",
            "category_name",
            "account_type",
            "is_active",
            "created_at",
        )
        read_only_fields = fields


class AccountCreateSerializer(serializers.Serializer):
    category_id = serializers.IntegerField()
    code = serializers.CharField(max_length=20)
    name = serializers.CharField(max_length=150)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    is_active = serializers.BooleanField(required=False, default=True)

    def validate_code(self, value):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("code is required")
        return v

    def validate_name(self, value):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("name is required")
        return v


class AccountUpdateSerializer(serializers.Serializer):
    """Every field optional; omitted fields keep their current value."""

    category_id = serializers.IntegerField(required=False)
    code = serializers.CharField(max_length=20, required=False)
    name = serializers.CharField(max_length=150, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)

    def validate_code(self, value):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("code cannot be blank")
        return v

    def validate_name(self, value):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("name cannot be blank")
        return v
