"""Responsables payload DTOs (the shape the backend stores per document)."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from responsibilities.enum import ResponsibilityRole


@dataclass(frozen=True)
class ResponsablePayload:
    """One signatory with its resolved responsibility code."""

    user_id: int
    nombre: str
    puesto: Optional[str]
    gerencia: Optional[str]
    responsabilidad_id: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "nombre": self.nombre,
            "puesto": self.puesto,
            "gerencia": self.gerencia,
            "responsabilidadId": self.responsabilidad_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ResponsablePayload":
        return cls(
            user_id=int(data["userId"]),
            nombre=str(data.get("nombre") or ""),
            puesto=data.get("puesto") or None,
            gerencia=data.get("gerencia") or None,
            responsabilidad_id=int(data["responsabilidadId"]),
        )


@dataclass
class ResponsablesPayload:
    """
    Signatories grouped by role.

    Completeness (elabora set, at least one revisa and one aprueba) is the
    caller's rule; see ``assignment_policy``. This object never fills gaps.
    """

    elabora: Optional[ResponsablePayload] = None
    revisa: List[ResponsablePayload] = field(default_factory=list)
    aprueba: List[ResponsablePayload] = field(default_factory=list)
    enterado: List[ResponsablePayload] = field(default_factory=list)

    def add(self, role: ResponsibilityRole, responsable: ResponsablePayload) -> None:
        if role is ResponsibilityRole.ELABORA:
            self.elabora = responsable
        else:
            getattr(self, role.payload_key).append(responsable)

    def all_responsables(self) -> List[ResponsablePayload]:
        """Flattened: elabora first, then revisa, aprueba, enterado."""
        result: List[ResponsablePayload] = [self.elabora] if self.elabora else []
        return result + self.revisa + self.aprueba + self.enterado

    def count(self) -> int:
        return len(self.all_responsables())

    def missing_org_data(self) -> List[str]:
        """Names (deduplicated, in order) of responsables without puesto or gerencia."""
        seen: List[str] = []
        for r in self.all_responsables():
            if (not r.puesto or not r.gerencia) and r.nombre not in seen:
                seen.append(r.nombre)
        return seen

    def summary(self) -> Dict[str, Any]:
        """Order-free view: user ids per role (sorted, deduplicated)."""
        return {
            "elabora": self.elabora.user_id if self.elabora else None,
            "revisa": sorted({r.user_id for r in self.revisa}),
            "aprueba": sorted({r.user_id for r in self.aprueba}),
            "enterado": sorted({r.user_id for r in self.enterado}),
        }

    def same_assignment(self, other: "ResponsablesPayload") -> bool:
        """True when both payloads assign the same users to the same roles."""
        return self.summary() == other.summary()

    def roles_of(self, user_id: int) -> Tuple[ResponsibilityRole, ...]:
        roles: List[ResponsibilityRole] = []
        if self.elabora and self.elabora.user_id == user_id:
            roles.append(ResponsibilityRole.ELABORA)
        for role in (ResponsibilityRole.REVISA, ResponsibilityRole.APRUEBA, ResponsibilityRole.ENTERADO):
            if any(r.user_id == user_id for r in getattr(self, role.payload_key)):
                roles.append(role)
        return tuple(roles)

    # ---- wire shape -----------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "elabora": self.elabora.to_dict() if self.elabora else None,
            "revisa": [r.to_dict() for r in self.revisa],
            "aprueba": [r.to_dict() for r in self.aprueba],
            "enterado": [r.to_dict() for r in self.enterado],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ResponsablesPayload":
        elabora = data.get("elabora")
        return cls(
            elabora=ResponsablePayload.from_dict(elabora) if elabora else None,
            revisa=[ResponsablePayload.from_dict(r) for r in data.get("revisa") or []],
            aprueba=[ResponsablePayload.from_dict(r) for r in data.get("aprueba") or []],
            enterado=[ResponsablePayload.from_dict(r) for r in data.get("enterado") or []],
        )
