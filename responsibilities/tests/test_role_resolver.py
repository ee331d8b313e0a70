"""Unit tests for single-signatory role resolution."""

from __future__ import annotations

import unittest

from responsibilities.enum import ResponsibilityRole
from responsibilities.exceptions import (
    ResponsibilityCodeMissingError,
    RoleUndeterminableError,
    SignatoryMissingIdentifierError,
)
from responsibilities.logic.role_code_registry import RoleCodeRegistry
from responsibilities.logic.role_resolver import resolve_role

R = ResponsibilityRole


class TestResolveRole(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = RoleCodeRegistry()
        self.user = {"id": 7, "primer_nombre": "Ana"}

    def test_explicit_role_dominates_other_hints(self) -> None:
        role = resolve_role(
            2, self.user, R.ENTERADO, "REVISION", elabora_user_id=7, registry=self.registry
        )
        self.assertIs(role, R.ENTERADO)

    def test_explicit_role_as_string(self) -> None:
        self.assertIs(resolve_role(1, self.user, "aprueba", registry=self.registry), R.APRUEBA)

    def test_name_fragments(self) -> None:
        cases = {
            "Revisión": R.REVISA,
            "rev": R.REVISA,
            "APROBACION": R.APRUEBA,
            "apr": R.APRUEBA,
            "Enterado": R.ENTERADO,
            "elaborador": R.ELABORA,
        }
        for name, expected in cases.items():
            with self.subTest(name=name):
                reg = RoleCodeRegistry(seeds={})
                self.assertIs(resolve_role(50, self.user, None, name, registry=reg), expected)

    def test_name_priority_order(self) -> None:
        # ELABORA is checked before REVISA, REVISA before APRUEBA
        self.assertIs(resolve_role(9, self.user, None, "ELAB/REV", registry=self.registry), R.ELABORA)
        self.assertIs(resolve_role(10, self.user, None, "REV y APROB", registry=self.registry), R.REVISA)

    def test_unmatched_name_falls_through_to_registry(self) -> None:
        self.assertIs(resolve_role(2, self.user, None, "otro", registry=self.registry), R.APRUEBA)

    def test_elabora_user_id(self) -> None:
        self.assertIs(resolve_role(77, self.user, elabora_user_id="7", registry=self.registry), R.ELABORA)

    def test_elabora_user_id_other_user_uses_registry(self) -> None:
        self.assertIs(resolve_role(1, self.user, elabora_user_id=8, registry=self.registry), R.REVISA)

    def test_registry_lookup_with_numeric_string_code(self) -> None:
        self.assertIs(resolve_role("3", self.user, registry=self.registry), R.ENTERADO)

    def test_unknown_code_without_hints_fails(self) -> None:
        with self.assertRaises(RoleUndeterminableError) as ctx:
            resolve_role(99, self.user, registry=self.registry)
        self.assertEqual(ctx.exception.code, "role-undeterminable")
        self.assertEqual(ctx.exception.responsabilidad_id, 99)

    def test_missing_code(self) -> None:
        for bad in (None, "", "abc", float("nan"), 1.5, True, "1_000", "0x10"):
            with self.subTest(value=bad):
                with self.assertRaises(ResponsibilityCodeMissingError):
                    resolve_role(bad, self.user, R.REVISA, registry=self.registry)
        self.assertNotIn(1000, self.registry)
        self.assertNotIn(16, self.registry)

    def test_missing_identifier(self) -> None:
        with self.assertRaises(SignatoryMissingIdentifierError) as ctx:
            resolve_role(1, {"nombre": "Sin Id"}, R.REVISA, registry=self.registry)
        self.assertEqual(ctx.exception.code, "signatory-missing-identifier")

    def test_learning_makes_later_hints_unnecessary(self) -> None:
        self.assertNotIn(41, self.registry)
        resolve_role(41, self.user, None, "APRUEBA", registry=self.registry)
        self.assertIs(resolve_role(41, {"id": 8}, registry=self.registry), R.APRUEBA)

    def test_learning_via_elabora_id(self) -> None:
        resolve_role(12, self.user, elabora_user_id=7, registry=self.registry)
        self.assertIs(self.registry.lookup(12), R.ELABORA)

    def test_known_code_is_never_rebound(self) -> None:
        # code 1 is seeded as REVISA; an explicit APRUEBA answer is still returned...
        self.assertIs(resolve_role(1, self.user, R.APRUEBA, registry=self.registry), R.APRUEBA)
        # ...but the registry keeps its original binding
        self.assertIs(self.registry.lookup(1), R.REVISA)


if __name__ == "__main__":
    unittest.main()
