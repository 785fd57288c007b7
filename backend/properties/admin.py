from django.contrib import admin
from .models import Property, Room
from tenants.models import Tenancy


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = ("name", "address", "owner", "is_active", "created_at", "updated_at")
    list_filter = ("is_active",)
    search_fields = ("name", "address", "owner__email")
    readonly_fields = ("created_at", "created_by", "updated_at", "updated_by")
    autocomplete_fields = ("owner",)
    date_hierarchy = "created_at"
    list_select_related = ("owner",)


class TenancyInline(admin.TabularInline):
    model = Tenancy
    extra = 0
    fields = ("tenant", "move_in", "payment_day", "created_at")
    readonly_fields = ("created_at",)
    autocomplete_fields = ("tenant",)


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ("number", "property", "room_type", "capacity", "monthly_rent", "is_active", "created_at")
    list_filter = ("room_type", "is_active", "property")
    search_fields = ("number", "property__name", "amenities")
    readonly_fields = ("created_at", "created_by", "updated_at", "updated_by")
    autocomplete_fields = ("property",)
    list_select_related = ("property",)
    inlines = [TenancyInline]
