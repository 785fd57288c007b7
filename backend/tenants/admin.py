from django.contrib import admin
from .models import Tenancy


@admin.register(Tenancy)
class TenancyAdmin(admin.ModelAdmin):
    list_display = ("tenant", "room", "property_name", "move_in", "payment_day", "created_at")
    search_fields = ("tenant__email", "tenant__first_name", "tenant__last_name", "room__number", "room__property__name")
    list_filter = ("room__property",)
    readonly_fields = ("created_at", "created_by", "updated_at", "updated_by")
    autocomplete_fields = ("tenant", "room")
    list_select_related = ("tenant", "room", "room__property")

    def property_name(self, obj):
        return obj.room.property.name
    property_name.short_description = "Property"
