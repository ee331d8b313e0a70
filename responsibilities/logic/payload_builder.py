"""Build the grouped responsables payload from the form's selections."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Union

from responsibilities.dto import ResponsablePayload, ResponsablesPayload, Selection
from responsibilities.exceptions import SignatoryMissingIdentifierError
from responsibilities.logic.role_code_registry import RoleCodeRegistry, default_registry
from responsibilities.logic.role_resolver import parse_responsibility_code, resolve_role
from responsibilities.logic.user_fields import (
    display_name,
    extract_department,
    extract_position,
    extract_user_id,
)

logger = logging.getLogger(__name__)


def to_responsable(user: Any, responsabilidad_id: int, fallback_nombre: Optional[str] = None) -> ResponsablePayload:
    """Normalize one backend user record into a ``ResponsablePayload``."""
    user_id = extract_user_id(user)
    if user_id is None:
        raise SignatoryMissingIdentifierError(fallback_nombre)
    return ResponsablePayload(
        user_id=user_id,
        nombre=display_name(user, fallback_nombre, user_id),
        puesto=extract_position(user),
        gerencia=extract_department(user),
        responsabilidad_id=responsabilidad_id,
    )


def build_responsables_payload(
    selections: Iterable[Union[Selection, Mapping[str, Any]]],
    elabora_user_id: Any = None,
    *,
    registry: Optional[RoleCodeRegistry] = None,
) -> ResponsablesPayload:
    """
    Resolve every selection and group the results by role.

    ELABORA fills the single ``elabora`` slot (last one wins); the other
    roles are appended in input order. Any failure aborts the whole build
    and leaves the registry exactly as it was.
    """
    reg = registry if registry is not None else default_registry
    staged = reg.stage()
    payload = ResponsablesPayload()

    for raw in selections:
        sel = raw if isinstance(raw, Selection) else Selection.from_dict(raw)
        role = resolve_role(
            sel.responsabilidad_id,
            sel.user,
            sel.role,
            sel.responsabilidad_nombre,
            elabora_user_id,
            registry=staged,
        )
        code = parse_responsibility_code(sel.responsabilidad_id)
        payload.add(role, to_responsable(sel.user, code, sel.fallback_nombre))

    learned = staged.pending
    staged.commit()
    if learned:
        logger.debug(f"Committed {len(learned)} learned responsibility code(s): {sorted(learned)}")
    logger.info(
        f"Built responsables payload: elabora={'yes' if payload.elabora else 'no'}, "
        f"revisa={len(payload.revisa)}, aprueba={len(payload.aprueba)}, "
        f"enterado={len(payload.enterado)}"
    )
    return payload
