from decimal import Decimal

import pytest

from core.context import Session
from core.serializers import parse_count, parse_decimal


@pytest.mark.parametrize(
    "raw, expected",
    [(None, 0), ("", 0), ("  ", 0), ("12", 12), (" 12 ", 12), (7, 7), ("7.0", 7), ("twenty", 0), (-3, 0), (True, 0)],
)
def test_parse_count(raw, expected):
    assert parse_count(raw) == expected


def test_parse_decimal():
    assert parse_decimal("2.5") == Decimal("2.5")
    assert parse_decimal("") is None
    assert parse_decimal("abc") is None
    assert parse_decimal("NaN") is None
    assert parse_decimal("Infinity") is None


def test_session_scope():
    agent = Session(user_id="1", agency_name=" harcourts SUCCESS")
    admin = Session(user_id="2", role=Session.ROLE_ADMIN, agency_name="Harcourts Success")

    assert agent.agency_scope == "Harcourts success"
    assert admin.is_admin
    assert admin.agency_scope is None
    assert Session(user_id="3").agency_scope is None


@pytest.mark.django_db
def test_session_for_staff_user_is_admin(staff_user, agent_user):
    assert Session.for_user(staff_user).is_admin
    assert not Session.for_user(agent_user).is_admin
    assert Session.for_user(agent_user).user_id == str(agent_user.pk)
