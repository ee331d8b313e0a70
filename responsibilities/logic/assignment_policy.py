"""Assignment form rules (no IO).

The engine never completes an assignment on its own; these helpers are what
the form uses to decide whether submit is allowed and to turn its
signatory list into selections for the payload builder.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence, Tuple

from responsibilities.dto import ResponsablesPayload, Selection, Signatory
from responsibilities.enum import ResponsibilityRole
from responsibilities.exceptions import ResponsibilityCodeMissingError
from responsibilities.logic.role_code_registry import RoleCodeRegistry, default_registry


def validate_assignment(
    signatories: Sequence[Signatory],
    elabora_user_id: Optional[int],
) -> Tuple[bool, Optional[str]]:
    """
    Validate the form's signatory list.

    Rules:
    - the ELABORA user is known
    - at least one signatory
    - every signatory has a role
    - at least one REVISA and one APRUEBA

    Returns:
        (valid, error_msg)
    """
    if elabora_user_id is None:
        return False, "No fue posible determinar el usuario que elabora."
    if not signatories:
        return False, "Agregue al menos un firmante."

    without_role = [s.display_name for s in signatories if s.role is None]
    if without_role:
        return False, f"Falta responsabilidad para: {', '.join(without_role)}"

    roles = {s.role for s in signatories}
    if ResponsibilityRole.REVISA not in roles:
        return False, "Se requiere al menos un firmante que revise."
    if ResponsibilityRole.APRUEBA not in roles:
        return False, "Se requiere al menos un firmante que apruebe."
    return True, None


def is_submit_disabled(signatories: Sequence[Signatory], elabora_user_id: Optional[int]) -> bool:
    return not validate_assignment(signatories, elabora_user_id)[0]


def missing_requirements(payload: ResponsablesPayload) -> List[str]:
    """Payload keys that still block submission (empty list when complete)."""
    missing: List[str] = []
    if payload.elabora is None:
        missing.append("elabora")
    if not payload.revisa:
        missing.append("revisa")
    if not payload.aprueba:
        missing.append("aprueba")
    return missing


def assign_responsibility(
    signatories: List[Signatory],
    user_id: int,
    role: ResponsibilityRole,
    elabora_user_id: Optional[int],
    *,
    registry: Optional[RoleCodeRegistry] = None,
) -> Optional[int]:
    """
    Give ``user_id`` the role ``role`` (in place) and return the new ELABORA id.

    The responsibility code comes from the registry. Choosing ELABORA moves
    the ELABORA designation to this user; taking ELABORA away from the
    current ELABORA user clears it.
    """
    reg = registry if registry is not None else default_registry
    code = reg.code_for_role(role)
    for s in signatories:
        if s.user_id == user_id:
            s.role = role
            s.responsabilidad_id = code
    if role is ResponsibilityRole.ELABORA:
        return user_id
    if elabora_user_id == user_id:
        return None
    return elabora_user_id


def to_selections(
    signatories: Sequence[Signatory],
    user_lookup: Callable[[int], Any] = lambda _uid: None,
    *,
    registry: Optional[RoleCodeRegistry] = None,
) -> List[Selection]:
    """
    Convert the form's signatories into builder selections.

    ``user_lookup`` returns the full backend user record for an id; when it
    returns None a minimal record (id + display name) is used.
    """
    reg = registry if registry is not None else default_registry
    selections: List[Selection] = []
    for s in signatories:
        if s.role is None:
            raise ResponsibilityCodeMissingError(None, s.display_name)
        code = s.responsabilidad_id if s.responsabilidad_id is not None else reg.code_for_role(s.role)
        user = user_lookup(s.user_id) or {"id": s.user_id, "nombre": s.display_name}
        selections.append(
            Selection(
                user=user,
                responsabilidad_id=code,
                role=s.role,
                responsabilidad_nombre=s.role.value,
                fallback_nombre=s.display_name,
            )
        )
    return selections
