from django.contrib import admin
from .models import Concern, ConcernMessage


class ConcernMessageInline(admin.TabularInline):
    model = ConcernMessage
    extra = 0
    fields = ("sender", "author", "body", "created_at")
    readonly_fields = ("created_at",)


@admin.register(Concern)
class ConcernAdmin(admin.ModelAdmin):
    list_display = ("id", "tenant", "owner", "property", "room", "category", "status", "created_at", "resolved_at")
    list_filter = ("status", "category")
    search_fields = ("message", "category", "tenant__email", "owner__email", "property__name")
    date_hierarchy = "created_at"
    autocomplete_fields = ("tenant", "owner", "property", "room")
    list_select_related = ("tenant", "owner", "property", "room")
    inlines = [ConcernMessageInline]
