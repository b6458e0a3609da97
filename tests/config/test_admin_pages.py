from datetime import date
from decimal import Decimal

import pytest
from django.urls import reverse

from listings.models import AgentCommission, Property
from marketing.models import AgentActivity, MarketingPlan


@pytest.mark.django_db
@pytest.mark.parametrize(
    "url_name",
    [
        "admin:marketing_marketingplan_changelist",
        "admin:marketing_agentactivity_changelist",
        "admin:listings_property_changelist",
        "admin:listings_agentcommission_changelist",
    ],
)
def test_admin_changelists_render(admin_client, admin_user, url_name):
    MarketingPlan.objects.create(agent=admin_user, suburb="Moggill", door_knock_streets=[{"name": "Main St"}])
    AgentActivity.objects.create(
        agent=admin_user, activity_type="door_knock", activity_date=date(2024, 3, 1), street_name="Main St"
    )
    prop = Property.objects.create(agency_name="RE/MAX", price=Decimal("100000"))
    AgentCommission.objects.create(property=prop, agent_name="Amy Lee", commission_rate=Decimal("2"))

    response = admin_client.get(reverse(url_name))

    assert response.status_code == 200
