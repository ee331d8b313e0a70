"""Responsibilities feature exceptions.

Every failure carries a stable ``code`` so callers can pick the message
shown to the user instead of a generic "validation failed".
"""
from __future__ import annotations

from typing import Any, Optional


class ResponsibilitiesError(Exception):
    """Base exception for the responsibilities feature."""

    code: str = "responsibilities-error"


class RoleUndeterminableError(ResponsibilitiesError):
    """No resolution path produced a role for the signatory."""

    code = "role-undeterminable"

    def __init__(self, responsabilidad_id: Any, user_id: Optional[int] = None) -> None:
        self.responsabilidad_id = responsabilidad_id
        self.user_id = user_id
        super().__init__(
            f"No se pudo determinar la responsabilidad del firmante "
            f"(usuario {user_id}, responsabilidad {responsabilidad_id})."
        )


class SignatoryMissingIdentifierError(ResponsibilitiesError):
    """The selected user has no usable numeric identifier."""

    code = "signatory-missing-identifier"

    def __init__(self, display_name: Optional[str] = None) -> None:
        self.display_name = display_name
        who = f" ({display_name})" if display_name else ""
        super().__init__(f"El usuario seleccionado{who} no tiene un identificador válido.")


class ResponsibilityCodeMissingError(ResponsibilitiesError):
    """The selection lacked a numeric responsibility code."""

    code = "responsibility-code-missing"

    def __init__(self, value: Any = None, display_name: Optional[str] = None) -> None:
        self.value = value
        self.display_name = display_name
        who = f" para {display_name}" if display_name else ""
        super().__init__(f"Falta responsabilidad{who} (valor recibido: {value!r}).")
