"""Explicit caller context passed into the service entry points."""
from __future__ import annotations

from dataclasses import dataclass

from core.identifiers import normalize_agency


@dataclass(frozen=True)
class Session:
    """Who is asking, and therefore which rows are in scope.

    Admins see every agency; agents see their own plans and activities and,
    for commission figures, their own agency only.
    """

    ROLE_AGENT = "agent"
    ROLE_ADMIN = "admin"

    user_id: str
    role: str = ROLE_AGENT
    agency_name: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == self.ROLE_ADMIN

    @property
    def agency_scope(self) -> str | None:
        """Normalized agency key used to filter properties, ``None`` for all."""
        if self.is_admin or not self.agency_name:
            return None
        return normalize_agency(self.agency_name)

    @classmethod
    def for_user(cls, user, agency_name: str | None = None) -> "Session":
        is_admin = bool(getattr(user, "is_superuser", False) or getattr(user, "is_staff", False))
        return cls(
            user_id=str(user.pk),
            role=cls.ROLE_ADMIN if is_admin else cls.ROLE_AGENT,
            agency_name=agency_name,
        )
