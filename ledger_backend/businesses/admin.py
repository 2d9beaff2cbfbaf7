# businesses/admin.py

from django.contrib import admin

from businesses.models.business import Business
from businesses.models.company_setting import CompanySetting
from businesses.models.sequence import DocumentSequence


class CompanySettingInline(admin.StackedInline):
    model = CompanySetting
    can_delete = False
    extra = 0


@admin.register(Business)
class BusinessAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "phone", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name", "code", "legal_name")
    filter_horizontal = ("members",)
    readonly_fields = ("created_at", "updated_at")
    inlines = [CompanySettingInline]


@admin.register(DocumentSequence)
class DocumentSequenceAdmin(admin.ModelAdmin):
    list_display = ("business", "document_type", "last_number", "updated_at")
    list_filter = ("document_type",)
    readonly_fields = ("business", "document_type", "last_number", "updated_at")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
