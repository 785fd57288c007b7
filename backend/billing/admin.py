from django.contrib import admin
from .models import RentBill, UtilityBill


@admin.register(RentBill)
class RentBillAdmin(admin.ModelAdmin):
    """Read-only: ledger rows change only through generation and reconciliation."""
    list_display = ("id", "tenant", "room", "property", "year", "month", "due_date", "amount", "status", "action")
    list_filter = ("status", "action", "year", "month")
    search_fields = ("id", "tenant__email", "tenant__first_name", "tenant__last_name", "room__number", "property__name")
    date_hierarchy = "due_date"
    list_select_related = ("tenant", "room", "property")

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(UtilityBill)
class UtilityBillAdmin(admin.ModelAdmin):
    list_display = ("id", "tenant", "bill_type", "amount", "status", "verification", "year", "month", "created_at")
    list_filter = ("status", "verification", "bill_type")
    search_fields = ("id", "tenant__email", "bill_type", "property__name")
    date_hierarchy = "created_at"
    autocomplete_fields = ("tenant", "owner", "property")
    readonly_fields = ("created_at", "updated_at")
    list_select_related = ("tenant", "property")
