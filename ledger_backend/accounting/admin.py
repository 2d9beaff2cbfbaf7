# accounting/admin.py

from django.contrib import admin

from accounting.models.account import Account
from accounting.models.bank_account import BankAccount
from accounting.models.category import AccountCategory
from accounting.models.financial_year import FinancialYear
from accounting.models.journal import JournalEntry
from accounting.models.journal_item import JournalItem

# ============================================================
# ACCOUNT CATEGORY
# ============================================================


@admin.register(AccountCategory)
class AccountCategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "business", "created_at")
    list_filter = ("type", "business")
    search_fields = ("name",)
    readonly_fields = ("created_at", "updated_at")


# ============================================================
# ACCOUNT
# ============================================================


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = (
        "code",
        "name",
        "category",
        "business",
        "is_active",
    )
    list_filter = ("category__type", "is_active", "business")
    search_fields = ("code", "name")
    ordering = ("business", "code")
    readonly_fields = ("created_by", "created_at", "updated_at")

    fieldsets = (
        (
            "Account Identity",
            {
                "fields": ("business", "category", "code", "name", "description"),
            },
        ),
        (
            "Status",
            {
                "fields": ("is_active",),
            },
        ),
        (
            "System Fields",
            {
                "fields": ("created_by", "created_at", "updated_at"),
            },
        ),
    )


# ============================================================
# FINANCIAL YEAR
# ============================================================


@admin.register(FinancialYear)
class FinancialYearAdmin(admin.ModelAdmin):
    list_display = ("name", "business", "start_date", "end_date", "is_active")
    list_filter = ("is_active", "business")
    ordering = ("business", "-start_date")
    # activation goes through the service so only one year stays active
    readonly_fields = ("is_active", "created_at", "updated_at")


# ============================================================
# JOURNAL ENTRY (READ-ONLY ONCE POSTED)
# ============================================================


class JournalItemInline(admin.TabularInline):
    model = JournalItem
    extra = 0
    fields = ("account", "entry_type", "amount", "description")

    def has_add_permission(self, request, obj=None):
        return bool(obj is not None and obj.is_draft)

    def has_change_permission(self, request, obj=None):
        return bool(obj is not None and obj.is_draft)

    def has_delete_permission(self, request, obj=None):
        return bool(obj is not None and obj.is_draft)


@admin.register(JournalEntry)
class JournalEntryAdmin(admin.ModelAdmin):
    list_display = (
        "reference_number",
        "business",
        "entry_date",
        "status",
        "narration",
        "posted_at",
    )
    list_filter = ("status", "business", "financial_year")
    search_fields = ("reference_number", "narration")
    ordering = ("-entry_date",)
    inlines = [JournalItemInline]

    readonly_fields = (
        "status",
        "posted_at",
        "cancelled_at",
        "created_by",
        "created_at",
        "updated_at",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        if obj is not None and not obj.is_draft:
            return False
        return super().has_change_permission(request, obj)

    def has_delete_permission(self, request, obj=None):
        if obj is not None and not obj.is_draft:
            return False
        return super().has_delete_permission(request, obj)


# ============================================================
# BANK ACCOUNT
# ============================================================


@admin.register(BankAccount)
class BankAccountAdmin(admin.ModelAdmin):
    list_display = (
        "bank_name",
        "account_name",
        "account_number",
        "business",
        "is_active",
        "last_reconciled_at",
    )
    list_filter = ("is_active", "business")
    search_fields = ("bank_name", "account_name", "account_number")
    readonly_fields = ("last_reconciled_at", "created_by", "created_at", "updated_at")
