"""Unit tests for the append-only responsibility code registry."""

from __future__ import annotations

import threading
import unittest
from pathlib import Path

from core.config.config_service import ConfigService
from responsibilities.enum import DEFAULT_ROLE_CODES, ResponsibilityRole
from responsibilities.logic.role_code_registry import RoleCodeRegistry

R = ResponsibilityRole


class TestRoleCodeRegistry(unittest.TestCase):
    def test_seeded_with_defaults(self) -> None:
        reg = RoleCodeRegistry()
        self.assertEqual(reg.snapshot(), {1: R.REVISA, 2: R.APRUEBA, 3: R.ENTERADO, 4: R.ELABORA})
        for role, code in DEFAULT_ROLE_CODES.items():
            self.assertEqual(reg.code_for_role(role), code)

    def test_register_new_code(self) -> None:
        reg = RoleCodeRegistry()
        self.assertIs(reg.register(10, R.REVISA), R.REVISA)
        self.assertIs(reg.lookup(10), R.REVISA)
        self.assertEqual(len(reg), 5)

    def test_register_never_rebinds(self) -> None:
        reg = RoleCodeRegistry()
        self.assertIs(reg.register(2, R.ENTERADO), R.APRUEBA)
        self.assertIs(reg.lookup(2), R.APRUEBA)

    def test_code_for_role_prefers_lowest(self) -> None:
        reg = RoleCodeRegistry(seeds={})
        reg.register(30, R.REVISA)
        reg.register(12, R.REVISA)
        self.assertEqual(reg.code_for_role(R.REVISA), 12)
        with self.assertRaises(KeyError):
            reg.code_for_role(R.APRUEBA)

    def test_stage_is_invisible_until_commit(self) -> None:
        reg = RoleCodeRegistry()
        staged = reg.stage()
        staged.register(20, R.APRUEBA)
        self.assertIs(staged.lookup(20), R.APRUEBA)
        self.assertIsNone(reg.lookup(20))
        staged.commit()
        self.assertIs(reg.lookup(20), R.APRUEBA)
        self.assertEqual(staged.pending, {})

    def test_stage_respects_parent_bindings(self) -> None:
        reg = RoleCodeRegistry()
        staged = reg.stage()
        self.assertIs(staged.register(1, R.APRUEBA), R.REVISA)
        self.assertEqual(staged.pending, {})

    def test_concurrent_registration_is_consistent(self) -> None:
        reg = RoleCodeRegistry(seeds={})
        results = []

        def worker(role: ResponsibilityRole) -> None:
            results.append(reg.register(100, role))

        threads = [threading.Thread(target=worker, args=(role,)) for role in (R.REVISA, R.APRUEBA) * 5]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(len(set(results)), 1)
        self.assertIs(reg.lookup(100), results[0])

    def test_from_config_seeds(self) -> None:
        service = ConfigService(
            defaults_ini=_missing(), machine_ini=_missing(), user_ini=_missing(),
            environ={"FIRMAS_RESPONSIBILITIES__REVISA": "11", "FIRMAS_RESPONSIBILITIES__APRUEBA": "12"},
        )
        reg = RoleCodeRegistry.from_config(service)
        self.assertIs(reg.lookup(11), R.REVISA)
        self.assertIs(reg.lookup(12), R.APRUEBA)
        self.assertIs(reg.lookup(3), R.ENTERADO)
        self.assertIsNone(reg.lookup(1))


def _missing() -> Path:
    return Path(__file__).with_name("does-not-exist.ini")


if __name__ == "__main__":
    unittest.main()
