from .assignment_policy import (
    assign_responsibility,
    is_submit_disabled,
    missing_requirements,
    to_selections,
    validate_assignment,
)
from .payload_builder import build_responsables_payload, to_responsable
from .role_code_registry import RoleCodeRegistry, StagedRoleCodes, default_registry
from .role_resolver import resolve_role

__all__ = [
    "RoleCodeRegistry",
    "StagedRoleCodes",
    "assign_responsibility",
    "build_responsables_payload",
    "default_registry",
    "is_submit_disabled",
    "missing_requirements",
    "resolve_role",
    "to_responsable",
    "to_selections",
    "validate_assignment",
]
