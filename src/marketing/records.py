"""Validated, immutable plan and activity values handed to the engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


class ActivityType:
    DOOR_KNOCK = "door_knock"
    PHONE_CALL = "phone_call"
    APPRAISAL = "appraisal"
    CLIENT_MEETING = "client_meeting"
    CONNECTION = "connection"

    ALL = (DOOR_KNOCK, PHONE_CALL, APPRAISAL, CLIENT_MEETING, CONNECTION)


@dataclass(frozen=True)
class DoorKnockStreet:
    name: str
    why: str = ""
    house_count: int = 0
    target_knocks: int = 0
    target_answers: int = 0


@dataclass(frozen=True)
class PhoneCallStreet:
    name: str
    why: str = ""
    target_calls: int = 0


@dataclass(frozen=True)
class Plan:
    id: str
    agent_id: str
    suburb: str
    start_date: date | None = None
    end_date: date | None = None
    door_knock_streets: tuple[DoorKnockStreet, ...] = ()
    phone_call_streets: tuple[PhoneCallStreet, ...] = ()
    target_connects: int = 0
    target_desktop_appraisals: int = 0
    target_face_to_face_appraisals: int = 0

    @property
    def target_knocks(self) -> int:
        return sum(s.target_knocks for s in self.door_knock_streets)

    @property
    def target_calls(self) -> int:
        return sum(s.target_calls for s in self.phone_call_streets)


@dataclass(frozen=True)
class Activity:
    id: str
    agent_id: str
    activity_type: str
    suburb: str = ""
    street_name: str = ""
    activity_date: date | None = None
    knocks_made: int = 0
    calls_connected: int = 0
    calls_answered: int = 0
    desktop_appraisals: int = 0
    face_to_face_appraisals: int = 0
    tags: tuple[str, ...] = field(default_factory=tuple)
    property_id: str | None = None
