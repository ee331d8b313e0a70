from .responsibility_role import (
    DEFAULT_ROLE_CODES,
    ROLE_NAME_FRAGMENTS,
    ResponsibilityRole,
    match_role_name,
)

__all__ = ["DEFAULT_ROLE_CODES", "ROLE_NAME_FRAGMENTS", "ResponsibilityRole", "match_role_name"]
