"""
Role resolution for a single signatory.

Resolution order (first match wins):

1. explicit role
2. free-text role name, matched against ``ROLE_NAME_FRAGMENTS``
3. the signatory is the document's ELABORA user
4. the responsibility code is already known to the registry

Whenever 1-3 resolve a code the registry has not seen, the code is learned.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from responsibilities.enum import ResponsibilityRole, match_role_name
from responsibilities.exceptions import (
    ResponsibilityCodeMissingError,
    RoleUndeterminableError,
    SignatoryMissingIdentifierError,
)
from responsibilities.logic.role_code_registry import RoleCodeLookup, default_registry
from responsibilities.logic.user_fields import display_name, extract_user_id, to_int

logger = logging.getLogger(__name__)


def parse_responsibility_code(value: Any, *, who: Optional[str] = None) -> int:
    code = to_int(value)
    if code is None:
        raise ResponsibilityCodeMissingError(value, who)
    return code


def resolve_role(
    responsabilidad_id: Any,
    user: Any,
    explicit_role: Optional[Union[ResponsibilityRole, str]] = None,
    explicit_role_name: Optional[str] = None,
    elabora_user_id: Any = None,
    *,
    registry: Optional[RoleCodeLookup] = None,
) -> ResponsibilityRole:
    """
    Determine the canonical role of ``user`` for ``responsabilidad_id``.

    Raises:
        ResponsibilityCodeMissingError: code absent or not numeric
        SignatoryMissingIdentifierError: user has no usable id
        RoleUndeterminableError: nothing matched
    """
    reg = registry if registry is not None else default_registry
    user_id = extract_user_id(user)
    code = parse_responsibility_code(responsabilidad_id, who=display_name(user, user_id=user_id))
    if user_id is None:
        raise SignatoryMissingIdentifierError(display_name(user) if user is not None else None)

    role: Optional[ResponsibilityRole] = None
    via = ""
    if explicit_role is not None:
        role = ResponsibilityRole.parse(explicit_role)
        via = "explicit"
    if role is None and explicit_role_name:
        role = match_role_name(explicit_role_name)
        via = "name"
    if role is None and elabora_user_id is not None and to_int(elabora_user_id) == user_id:
        role = ResponsibilityRole.ELABORA
        via = "elabora"

    if role is not None:
        reg.register(code, role)
        logger.debug(f"Resolved user {user_id} code {code} -> {role.value} ({via})")
        return role

    learned = reg.lookup(code)
    if learned is not None:
        logger.debug(f"Resolved user {user_id} code {code} -> {learned.value} (registry)")
        return learned

    raise RoleUndeterminableError(code, user_id)
