"""Unit tests for signing workflow gating."""
from __future__ import annotations

import dataclasses
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

from responsibilities.enum import ResponsibilityRole
from responsibilities.logic import build_responsables_payload
from responsibilities.logic.role_code_registry import RoleCodeRegistry
from signature.exceptions import SignatureValidationError
from signature.logic.encryption import SignatureKeyring
from signature.logic.signature_store import SignatureStore
from signature.logic.signature_validator import validate_and_sanitize_signature
from signature.logic.signing_workflow import (
    NO_PENDING,
    NO_SIGNATURE,
    INVALID_SIGNATURE,
    NO_STORED_SIGNATURE,
    ROLE_NOT_PENDING,
    ROLE_REQUIRED,
    USER_MISMATCH,
    SigningWorkflow,
)
from signature.models import PendingState, SignatureArtifact, SignatureValidationErrorCode, SignSource
from signature.tests._images import canvas, encode, horizontal_band, mark_corners
from signature.tests.test_signature_store import RecordingAudit

R = ResponsibilityRole
DOC = 100
NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _png() -> bytes:
    return encode(horizontal_band(mark_corners(canvas(400, 100)), 45, 54))


class TestSigningWorkflow(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        root = Path(self._tmp.name)
        self.store = SignatureStore(root / "sigs", SignatureKeyring(root / "sig.key"))
        self.audit = RecordingAudit()
        self.flow = SigningWorkflow(store=self.store, audit=self.audit, clock=lambda: NOW)
        self.artifact = validate_and_sanitize_signature(_png(), "image/png")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_assign_payload_creates_pending_entries(self) -> None:
        payload = build_responsables_payload(
            [
                {"user": {"id": 1}, "responsabilidadId": 4, "role": "ELABORA"},
                {"user": {"id": 2}, "responsabilidadId": 1},
                {"user": {"id": 3}, "responsabilidadId": 2},
            ],
            registry=RoleCodeRegistry(),
        )
        created = self.flow.assign_payload(DOC, payload)
        self.assertEqual([(e.user_id, e.role) for e in created],
                         [(1, R.ELABORA), (2, R.REVISA), (3, R.APRUEBA)])
        self.assertIs(self.flow.state_of(DOC, 2, R.REVISA), PendingState.PENDING)
        self.assertIs(self.flow.state_of(DOC, 2, R.APRUEBA), PendingState.NOT_ASSIGNED)

    def test_assign_is_idempotent(self) -> None:
        first = self.flow.assign(DOC, 1, R.REVISA, 1)
        self.assertIs(self.flow.assign(DOC, 1, R.REVISA, 1), first)
        self.assertEqual(len(self.flow.entries(DOC)), 1)

    def test_sign_with_artifact(self) -> None:
        self.flow.assign(DOC, 1, R.REVISA)
        outcome = self.flow.sign(DOC, 1, 1, artifact=self.artifact)
        self.assertTrue(outcome.accepted)
        self.assertIs(outcome.entry.state, PendingState.SIGNED)
        self.assertEqual(outcome.entry.signed_at, NOW)
        self.assertEqual(outcome.entry.signature_sha256, self.artifact.sha256)
        self.assertFalse(outcome.entry.used_stored_signature)
        self.assertEqual(self.audit.events[-1][1], "signed")

    def test_signed_is_terminal(self) -> None:
        self.flow.assign(DOC, 1, R.REVISA)
        self.flow.sign(DOC, 1, 1, artifact=self.artifact)
        outcome = self.flow.sign(DOC, 1, 1, artifact=self.artifact)
        self.assertFalse(outcome.accepted)
        self.assertEqual(outcome.reason, NO_PENDING)
        self.assertIs(self.flow.state_of(DOC, 1, R.REVISA), PendingState.SIGNED)

    def test_signed_entry_cannot_be_reverted_by_callers(self) -> None:
        self.flow.assign(DOC, 1, R.REVISA)
        signed = self.flow.sign(DOC, 1, 1, artifact=self.artifact).entry
        for handed_out in (signed, self.flow.entries(DOC)[0], self.flow.assign(DOC, 1, R.REVISA)):
            with self.assertRaises(dataclasses.FrozenInstanceError):
                handed_out.state = PendingState.PENDING
        self.assertIs(self.flow.state_of(DOC, 1, R.REVISA), PendingState.SIGNED)
        self.assertEqual(self.flow.pending_for(DOC, 1), [])

    def test_pending_entry_objects_are_not_updated_in_place(self) -> None:
        before = self.flow.assign(DOC, 1, R.REVISA)
        self.flow.sign(DOC, 1, 1, artifact=self.artifact)
        self.assertIs(before.state, PendingState.PENDING)
        self.assertIs(self.flow.entries(DOC)[0].state, PendingState.SIGNED)

    def test_hand_built_artifact_without_png_is_rejected(self) -> None:
        self.flow.assign(DOC, 1, R.REVISA)
        for fake in (SignatureArtifact(b"", 1, 1, 1.0, 0.0), SignatureArtifact(b"GIF89a...", 10, 5, 2.0, 0.1)):
            outcome = self.flow.sign(DOC, 1, 1, artifact=fake)
            self.assertFalse(outcome.accepted)
            self.assertEqual(outcome.reason, INVALID_SIGNATURE)
        self.assertIs(self.flow.state_of(DOC, 1, R.REVISA), PendingState.PENDING)

    def test_not_assigned_is_noop(self) -> None:
        outcome = self.flow.sign(DOC, 9, 9, artifact=self.artifact)
        self.assertEqual(outcome.reason, NO_PENDING)
        self.assertEqual(self.audit.events, [])

    def test_signature_required(self) -> None:
        self.flow.assign(DOC, 1, R.APRUEBA)
        outcome = self.flow.sign(DOC, 1, 1)
        self.assertEqual(outcome.reason, NO_SIGNATURE)
        self.assertIs(self.flow.state_of(DOC, 1, R.APRUEBA), PendingState.PENDING)
        self.assertEqual(self.audit.events[-1][1], "sign_rejected")

    def test_only_the_assigned_user_signs(self) -> None:
        self.flow.assign(DOC, 1, R.APRUEBA)
        outcome = self.flow.sign(DOC, 1, 2, artifact=self.artifact)
        self.assertEqual(outcome.reason, USER_MISMATCH)
        self.assertIs(self.flow.state_of(DOC, 1, R.APRUEBA), PendingState.PENDING)

    def test_role_needed_for_multiple_pending(self) -> None:
        self.flow.assign(DOC, 1, R.REVISA)
        self.flow.assign(DOC, 1, R.ENTERADO)
        self.assertEqual(self.flow.sign(DOC, 1, 1, artifact=self.artifact).reason, ROLE_REQUIRED)
        self.assertEqual(
            self.flow.sign(DOC, 1, 1, artifact=self.artifact, role=R.APRUEBA).reason, ROLE_NOT_PENDING
        )
        outcome = self.flow.sign(DOC, 1, 1, artifact=self.artifact, role=R.ENTERADO)
        self.assertTrue(outcome.accepted)
        self.assertIs(self.flow.state_of(DOC, 1, R.REVISA), PendingState.PENDING)
        # one left, so the role may be omitted again
        self.assertTrue(self.flow.sign(DOC, 1, 1, artifact=self.artifact).accepted)

    def test_stored_signature(self) -> None:
        self.flow.assign(DOC, 1, R.REVISA)
        self.assertEqual(self.flow.sign(DOC, 1, 1, use_stored_signature=True).reason, NO_STORED_SIGNATURE)
        self.store.save(1, self.artifact)
        outcome = self.flow.sign(DOC, 1, 1, use_stored_signature=True)
        self.assertTrue(outcome.accepted)
        self.assertTrue(outcome.entry.used_stored_signature)
        self.assertIsNone(outcome.entry.signature_sha256)

    def test_stored_signature_without_store(self) -> None:
        flow = SigningWorkflow()
        flow.assign(DOC, 1, R.REVISA)
        self.assertTrue(flow.sign(DOC, 1, 1, use_stored_signature=True).accepted)

    def test_my_sign_info(self) -> None:
        self.assertFalse(self.flow.my_sign_info(DOC, 1).assigned)
        self.flow.assign(DOC, 1, R.REVISA)
        info = self.flow.my_sign_info(DOC, 1)
        self.assertEqual((info.assigned, info.signed, info.last_signed_at), (True, False, None))
        self.flow.sign(DOC, 1, 1, artifact=self.artifact)
        info = self.flow.my_sign_info(DOC, 1)
        self.assertEqual((info.signed, info.last_signed_at), (True, NOW))

    def test_prepare_artifact_modes(self) -> None:
        drawn = SignSource.draw([[(50 + 40 * i, 80 if i % 2 == 0 else 140) for i in range(11)]])
        self.assertGreater(self.flow.prepare_artifact(1, drawn).width, 0)

        uploaded = self.flow.prepare_artifact(1, SignSource.upload(_png(), "image/png"))
        self.assertEqual(uploaded, self.artifact)

        with self.assertRaises(SignatureValidationError) as ctx:
            self.flow.prepare_artifact(1, SignSource.stored())
        self.assertEqual(ctx.exception.code, SignatureValidationErrorCode.EMPTY_IMAGE)

        self.store.save(1, self.artifact)
        self.assertIsNone(self.flow.prepare_artifact(1, SignSource.stored()))

        with self.assertRaises(SignatureValidationError):
            self.flow.prepare_artifact(1, SignSource.upload(b"x", "image/gif"))


if __name__ == "__main__":
    unittest.main()
