"""Input DTOs for the assignment form."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from responsibilities.enum import ResponsibilityRole


@dataclass
class Signatory:
    """
    A user under consideration for a responsibility on one document.

    ``role`` stays None until the user is given one in the form.
    """

    user_id: int
    display_name: str
    role: Optional[ResponsibilityRole] = None
    responsabilidad_id: Optional[int] = None


@dataclass
class Selection:
    """One ``(user, responsibility)`` pick handed to the payload builder."""

    user: Any
    """Backend user record (dict or object)"""

    responsabilidad_id: Any
    """Numeric (or numeric-like) responsibility code"""

    role: Optional[Union[ResponsibilityRole, str]] = None
    responsabilidad_nombre: Optional[str] = None
    fallback_nombre: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Selection":
        """Accept both the camelCase form payload and snake_case keys."""
        def pick(*keys: str) -> Any:
            for key in keys:
                if key in data and data[key] is not None:
                    return data[key]
            return None

        return cls(
            user=pick("user"),
            responsabilidad_id=pick("responsabilidadId", "responsabilidad_id"),
            role=pick("role"),
            responsabilidad_nombre=pick("responsabilidadNombre", "responsabilidad_nombre"),
            fallback_nombre=pick("fallbackNombre", "fallback_nombre"),
        )
