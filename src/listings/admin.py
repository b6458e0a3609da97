"""Django admin for properties and commission overrides."""
from django.contrib import admin

from listings.models import AgentCommission, Property


class AgentCommissionInline(admin.TabularInline):
    model = AgentCommission
    extra = 0
    fields = ("agent_name", "commission_rate")


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = (
        "__str__", "agency_name", "agent_name", "property_type",
        "price", "sold_price", "commission_rate", "contract_status",
    )
    list_filter = ("contract_status", "property_type", "suburb")
    search_fields = ("street_name", "suburb", "agency_name", "agent_name")
    readonly_fields = ("created_at", "updated_at")
    inlines = [AgentCommissionInline]


@admin.register(AgentCommission)
class AgentCommissionAdmin(admin.ModelAdmin):
    list_display = ("agent_name", "property", "commission_rate", "updated_at")
    search_fields = ("agent_name", "property__street_name")
    raw_id_fields = ("property",)
