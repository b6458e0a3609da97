"""Django admin for marketing plans and activities."""
from django.contrib import admin

from marketing.models import AgentActivity, MarketingPlan


@admin.register(MarketingPlan)
class MarketingPlanAdmin(admin.ModelAdmin):
    list_display = ("suburb", "agent", "start_date", "end_date", "street_count", "updated_at")
    list_filter = ("suburb",)
    search_fields = ("suburb", "agent__username", "agent__email")
    readonly_fields = ("created_at", "updated_at")
    ordering = ("-updated_at",)

    def street_count(self, obj):
        return len(obj.door_knock_streets or []) + len(obj.phone_call_streets or [])

    street_count.short_description = "streets"


@admin.register(AgentActivity)
class AgentActivityAdmin(admin.ModelAdmin):
    list_display = (
        "activity_date", "agent", "activity_type", "suburb", "street_name",
        "knocks_made", "calls_connected", "calls_answered",
    )
    list_filter = ("activity_type", "suburb")
    search_fields = ("street_name", "suburb", "notes", "agent__username")
    readonly_fields = ("created_at", "updated_at")
    raw_id_fields = ("property",)
    date_hierarchy = "activity_date"
