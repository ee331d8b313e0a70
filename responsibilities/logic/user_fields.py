"""Field extraction from backend user records.

User records arrive in several shapes (snake_case, camelCase, Spanish or
English field names, nested ``posicion`` / ``gerencia`` objects, plain dicts
or attribute objects). These helpers pick the first usable value from a
fixed priority list of field names.
"""
from __future__ import annotations

import math
import re
from typing import Any, Iterable, Optional, Sequence

ID_FIELDS: Sequence[str] = ("id", "userId", "usuarioId", "user_id", "usuario_id", "uid", "value")

# One alias list per name part, in display order.
NAME_PART_FIELDS: Sequence[Sequence[str]] = (
    ("primer_nombre", "primerNombre", "first_name", "firstName"),
    ("segundo_nombre", "segundo_name", "segundoNombre", "middle_name", "middleName"),
    ("tercer_nombre", "tercerNombre"),
    ("primer_apellido", "primerApellido", "last_name", "lastName"),
    ("segundo_apellido", "segundoApellido", "second_last_name", "secondLastName"),
    ("apellido_casada", "apellidoCasada", "married_name", "marriedName"),
)

PLAIN_NAME_FIELDS: Sequence[str] = ("nombre", "name", "full_name", "fullName", "display_name")

POSITION_FIELDS: Sequence[str] = ("posicionNombre", "posicion.nombre", "puesto", "position", "cargo")

DEPARTMENT_FIELDS: Sequence[str] = (
    "gerenciaNombre",
    "gerencia.nombre",
    "gerencia",
    "department",
    "departamento",
)

_WS = re.compile(r"\s+")
# Plain decimal notation only; rejects "1_000", "0x10", "nan", "inf".
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def field_value(record: Any, path: str) -> Any:
    """Read ``a.b`` style paths from dicts or attribute objects; None if absent."""
    current = record
    for part in path.split("."):
        if current is None:
            return None
        if isinstance(current, dict):
            current = current.get(part)
        else:
            current = getattr(current, part, None)
    return current


def first_non_empty_string(values: Iterable[Any]) -> str:
    for value in values:
        if isinstance(value, str):
            trimmed = value.strip()
            if trimmed:
                return trimmed
    return ""


def to_int(value: Any) -> Optional[int]:
    """Finite integral number (or numeric string) as int; anything else is None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value)
        return None
    if isinstance(value, str):
        text = value.strip()
        if not _DECIMAL.fullmatch(text):
            return None
        parsed = float(text)
        if math.isfinite(parsed) and parsed.is_integer():
            return int(parsed)
    return None


def extract_user_id(user: Any) -> Optional[int]:
    """First id-shaped field that holds a finite integral number."""
    if isinstance(user, (int, str)) and not isinstance(user, bool):
        return to_int(user)
    for name in ID_FIELDS:
        value = to_int(field_value(user, name))
        if value is not None:
            return value
    return None


def full_name(user: Any) -> str:
    """Concatenated name parts, whitespace collapsed; '' when none are set."""
    parts = [
        first_non_empty_string(field_value(user, alias) for alias in aliases)
        for aliases in NAME_PART_FIELDS
    ]
    joined = " ".join(p for p in parts if p)
    if joined:
        return _WS.sub(" ", joined).strip()
    plain = first_non_empty_string(field_value(user, name) for name in PLAIN_NAME_FIELDS)
    return _WS.sub(" ", plain)


def display_name(user: Any, fallback: Optional[str] = None, user_id: Optional[int] = None) -> str:
    name = full_name(user)
    if name:
        return name
    if fallback and fallback.strip():
        return _WS.sub(" ", fallback.strip())
    if user_id is not None:
        return f"Usuario {user_id}"
    return "Usuario"


def extract_position(user: Any) -> Optional[str]:
    return first_non_empty_string(field_value(user, name) for name in POSITION_FIELDS) or None


def extract_department(user: Any) -> Optional[str]:
    return first_non_empty_string(field_value(user, name) for name in DEPARTMENT_FIELDS) or None
