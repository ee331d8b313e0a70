"""responsibilities/enum/responsibility_role.py
=============================================

Document-scoped signing responsibilities.

These are assigned per document, not global system roles.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Tuple


class ResponsibilityRole(str, Enum):
    """Canonical signing responsibilities."""

    ELABORA = "ELABORA"     # originator, the acting user when creating
    REVISA = "REVISA"       # required reviewer
    APRUEBA = "APRUEBA"     # required approver
    ENTERADO = "ENTERADO"   # acknowledges only, never gates

    @property
    def payload_key(self) -> str:
        """Key of this role in the grouped responsables payload."""
        return self.value.lower()

    @property
    def is_gating(self) -> bool:
        return self is not ResponsibilityRole.ENTERADO

    @classmethod
    def parse(cls, value: object) -> Optional["ResponsibilityRole"]:
        """Exact (case-insensitive) role name, or None."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                return None
        return None


# Evaluated in this order; first role with a matching fragment wins.
# Kept as-is for the role-name variants the backend already sends.
ROLE_NAME_FRAGMENTS: Tuple[Tuple[ResponsibilityRole, Tuple[str, ...]], ...] = (
    (ResponsibilityRole.ELABORA, ("ELAB",)),
    (ResponsibilityRole.REVISA, ("REV", "REVISION")),
    (ResponsibilityRole.APRUEBA, ("APR", "APROB")),
    (ResponsibilityRole.ENTERADO, ("ENT",)),
)


def match_role_name(name: Optional[str]) -> Optional[ResponsibilityRole]:
    """Tolerant free-text match of a role name against ``ROLE_NAME_FRAGMENTS``."""
    normalized = (name or "").strip().upper()
    if not normalized:
        return None
    for role, fragments in ROLE_NAME_FRAGMENTS:
        if any(fragment in normalized for fragment in fragments):
            return role
    return None


DEFAULT_ROLE_CODES: Dict[ResponsibilityRole, int] = {
    ResponsibilityRole.REVISA: 1,
    ResponsibilityRole.APRUEBA: 2,
    ResponsibilityRole.ENTERADO: 3,
    ResponsibilityRole.ELABORA: 4,
}
