from .errors import (
    ResponsibilitiesError,
    ResponsibilityCodeMissingError,
    RoleUndeterminableError,
    SignatoryMissingIdentifierError,
)

__all__ = [
    "ResponsibilitiesError",
    "ResponsibilityCodeMissingError",
    "RoleUndeterminableError",
    "SignatoryMissingIdentifierError",
]
