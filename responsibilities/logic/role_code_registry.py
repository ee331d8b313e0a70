"""Learned mapping from backend responsibility codes to canonical roles.

The backend's numeric codes are opaque and not guaranteed to match the seed
values, so the registry learns them as selections are resolved. It only
grows: a code bound to a role stays bound to it for the registry's lifetime.
"""
from __future__ import annotations

import logging
import threading
from typing import Dict, Mapping, Optional, Protocol

from responsibilities.enum import DEFAULT_ROLE_CODES, ResponsibilityRole

logger = logging.getLogger(__name__)


class RoleCodeLookup(Protocol):
    """What the resolver needs: read a binding, propose a new one."""

    def lookup(self, code: int) -> Optional[ResponsibilityRole]: ...
    def register(self, code: int, role: ResponsibilityRole) -> ResponsibilityRole: ...


class RoleCodeRegistry:
    """Append-only, thread-safe ``code -> role`` map seeded with defaults."""

    def __init__(self, seeds: Optional[Mapping[ResponsibilityRole, int]] = None) -> None:
        self._lock = threading.RLock()
        self._by_code: Dict[int, ResponsibilityRole] = {}
        for role, code in (seeds if seeds is not None else DEFAULT_ROLE_CODES).items():
            self._by_code.setdefault(int(code), ResponsibilityRole(role))

    @classmethod
    def from_config(cls, service=None) -> "RoleCodeRegistry":
        """Seed codes from the ``[Responsibilities]`` config section."""
        if service is None:
            from core.config.config_service import config_service as service
        section = service.responsibilities
        return cls({
            ResponsibilityRole.REVISA: section.revisa,
            ResponsibilityRole.APRUEBA: section.aprueba,
            ResponsibilityRole.ENTERADO: section.enterado,
            ResponsibilityRole.ELABORA: section.elabora,
        })

    # ------------------------------------------------------------------ #
    def lookup(self, code: int) -> Optional[ResponsibilityRole]:
        with self._lock:
            return self._by_code.get(code)

    def register(self, code: int, role: ResponsibilityRole) -> ResponsibilityRole:
        """
        Bind ``code`` to ``role`` unless it is already bound.

        Returns the role the code is bound to afterwards, which is the
        existing binding when one exists (never rebinds).
        """
        with self._lock:
            existing = self._by_code.get(code)
            if existing is not None:
                if existing is not role:
                    logger.debug(
                        f"Code {code} already bound to {existing.value}; ignoring {role.value}"
                    )
                return existing
            self._by_code[code] = role
            logger.debug(f"Learned responsibility code {code} -> {role.value}")
            return role

    def code_for_role(self, role: ResponsibilityRole) -> int:
        """Lowest code bound to ``role``; seeds guarantee one exists for every role."""
        with self._lock:
            codes = sorted(c for c, r in self._by_code.items() if r is role)
        if not codes:
            raise KeyError(role)
        return codes[0]

    def snapshot(self) -> Dict[int, ResponsibilityRole]:
        with self._lock:
            return dict(self._by_code)

    def __contains__(self, code: object) -> bool:
        with self._lock:
            return code in self._by_code

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_code)

    def stage(self) -> "StagedRoleCodes":
        return StagedRoleCodes(self)


class StagedRoleCodes:
    """
    Pending registrations on top of a registry.

    Lookups see the parent plus what was staged; nothing reaches the parent
    until ``commit()``. Used to keep multi-selection builds all-or-nothing.
    """

    def __init__(self, parent: RoleCodeRegistry) -> None:
        self._parent = parent
        self._pending: Dict[int, ResponsibilityRole] = {}

    def lookup(self, code: int) -> Optional[ResponsibilityRole]:
        found = self._parent.lookup(code)
        if found is not None:
            return found
        return self._pending.get(code)

    def register(self, code: int, role: ResponsibilityRole) -> ResponsibilityRole:
        existing = self.lookup(code)
        if existing is not None:
            return existing
        self._pending[code] = role
        return role

    @property
    def pending(self) -> Dict[int, ResponsibilityRole]:
        return dict(self._pending)

    def commit(self) -> None:
        for code, role in self._pending.items():
            self._parent.register(code, role)
        self._pending.clear()


# Process-wide cache for callers that do not manage their own registry.
default_registry = RoleCodeRegistry()
