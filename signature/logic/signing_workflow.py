# signature/logic/signing_workflow.py
"""
Signing workflow gating (no UI, no backend).

Per ``(document, user, role)``: not-assigned -> pending -> signed (terminal).

A pending entry becomes signed only when
  * a ``SignatureArtifact`` carrying a PNG is supplied, or the stored
    signature is explicitly requested (and exists, when a store is configured),
  * the acting user is the entry's user,
  * the role is named whenever the user has more than one pending entry
    on the document.

Entries are immutable; a transition stores a replaced copy, so objects
handed to callers can never move an entry back. Rejections are returned
as ``SignOutcome`` values; a user with nothing pending gets a no-op
rejection, never an exception.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from responsibilities.dto import ResponsablesPayload
from responsibilities.enum import ResponsibilityRole

from ..models.pending_signature import PendingSignature
from ..models.sign_source import SignSource
from ..models.signature_artifact import SignatureArtifact
from ..models.signature_enums import PendingState, SignSourceMode, SignatureValidationErrorCode
from ..models.validation_options import SignatureValidationOptions
from ..exceptions.errors import SignatureValidationError
from .signature_store import SignatureStore
from .signature_validator import validate_and_sanitize_signature
from .stroke_renderer import render_png_from_strokes

logger = logging.getLogger(__name__)

_FEATURE_ID = "signature"

# Rejection reasons
NO_PENDING = "no-pending"
USER_MISMATCH = "user-mismatch"
ROLE_REQUIRED = "role-required"
ROLE_NOT_PENDING = "role-not-pending"
NO_SIGNATURE = "no-signature"
NO_STORED_SIGNATURE = "no-stored-signature"
INVALID_SIGNATURE = "invalid-signature"

_PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


@dataclass(frozen=True)
class SignOutcome:
    accepted: bool
    entry: Optional[PendingSignature] = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class SignInfo:
    """What the current user sees for one document."""
    assigned: bool
    signed: bool
    last_signed_at: Optional[datetime]


class SigningWorkflow:
    """Holds the signing obligations of documents and gates their completion."""

    def __init__(self, *, store: Optional[SignatureStore] = None,
                 audit: Optional[Any] = None,
                 clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)) -> None:
        self._store = store
        self._audit = audit
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: Dict[Tuple[int, int, ResponsibilityRole], PendingSignature] = {}

    # -------- Assignment -----------------------------------------------------
    def assign(self, document_id: int, user_id: int, role: ResponsibilityRole,
               responsabilidad_id: Optional[int] = None) -> PendingSignature:
        """not-assigned -> pending. Re-assigning an existing entry returns it unchanged."""
        key = (int(document_id), int(user_id), ResponsibilityRole(role))
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                entry = PendingSignature(document_id=key[0], user_id=key[1], role=key[2],
                                         responsabilidad_id=responsabilidad_id)
                self._entries[key] = entry
            return entry

    def assign_payload(self, document_id: int, payload: ResponsablesPayload) -> List[PendingSignature]:
        """One pending entry per responsable in the payload, in payload order."""
        created: List[PendingSignature] = []
        for role in ResponsibilityRole:
            if role is ResponsibilityRole.ELABORA:
                group = [payload.elabora] if payload.elabora else []
            else:
                group = getattr(payload, role.payload_key)
            for r in group:
                created.append(self.assign(document_id, r.user_id, role, r.responsabilidad_id))
        return created

    # -------- Queries --------------------------------------------------------
    def state_of(self, document_id: int, user_id: int, role: ResponsibilityRole) -> PendingState:
        with self._lock:
            entry = self._entries.get((int(document_id), int(user_id), ResponsibilityRole(role)))
        return entry.state if entry else PendingState.NOT_ASSIGNED

    def entries(self, document_id: int) -> List[PendingSignature]:
        with self._lock:
            return [e for e in self._entries.values() if e.document_id == int(document_id)]

    def pending_for(self, document_id: int, user_id: int) -> List[PendingSignature]:
        return [e for e in self.entries(document_id)
                if e.user_id == int(user_id) and e.state is PendingState.PENDING]

    def my_sign_info(self, document_id: int, user_id: int) -> SignInfo:
        mine = [e for e in self.entries(document_id) if e.user_id == int(user_id)]
        signed_at = [e.signed_at for e in mine if e.is_signed and e.signed_at]
        return SignInfo(
            assigned=bool(mine),
            signed=any(e.is_signed for e in mine),
            last_signed_at=max(signed_at) if signed_at else None,
        )

    # -------- Signature input ------------------------------------------------
    def prepare_artifact(self, user_id: int, source: SignSource,
                         options: Optional[SignatureValidationOptions] = None) -> Optional[SignatureArtifact]:
        """
        Turn the dialog's signature source into an artifact.

        DRAW and UPLOAD go through the validation pipeline (errors propagate).
        STORED returns None; the caller then signs with
        ``use_stored_signature=True``.
        """
        if source.mode is SignSourceMode.STORED:
            if self._store is not None and not self._store.has_signature(user_id):
                raise SignatureValidationError(
                    SignatureValidationErrorCode.EMPTY_IMAGE,
                    "No cuenta con firma guardada. Cárguela o dibújela para continuar.",
                )
            return None
        if source.mode is SignSourceMode.DRAW:
            png = render_png_from_strokes(source.strokes, source.canvas_size, source.stroke_width)
            return validate_and_sanitize_signature(png, "image/png", options)
        return validate_and_sanitize_signature(source.data or b"", source.mime_type, options)

    # -------- Transition -----------------------------------------------------
    def sign(self, document_id: int, user_id: int, acting_user_id: int, *,
             artifact: Optional[SignatureArtifact] = None,
             use_stored_signature: bool = False,
             role: Optional[ResponsibilityRole] = None) -> SignOutcome:
        """pending -> signed for one of ``user_id``'s entries on the document."""
        with self._lock:
            pending = self.pending_for(document_id, user_id)
            if not pending:
                return self._reject(document_id, user_id, NO_PENDING)
            if int(acting_user_id) != int(user_id):
                return self._reject(document_id, user_id, USER_MISMATCH)

            if role is None:
                if len(pending) > 1:
                    return self._reject(document_id, user_id, ROLE_REQUIRED)
                entry = pending[0]
            else:
                wanted = ResponsibilityRole(role)
                entry = next((e for e in pending if e.role is wanted), None)
                if entry is None:
                    return self._reject(document_id, user_id, ROLE_NOT_PENDING)

            if artifact is None:
                if not use_stored_signature:
                    return self._reject(document_id, user_id, NO_SIGNATURE)
                if self._store is not None and not self._store.has_signature(user_id):
                    return self._reject(document_id, user_id, NO_STORED_SIGNATURE)
            elif not _is_pipeline_png(artifact):
                return self._reject(document_id, user_id, INVALID_SIGNATURE)

            entry = replace(
                entry,
                state=PendingState.SIGNED,
                signed_at=self._clock(),
                used_stored_signature=artifact is None,
                signature_sha256=artifact.sha256 if artifact is not None else None,
            )
            self._entries[entry.key] = entry

        logger.info(f"Document {entry.document_id}: user {entry.user_id} signed as {entry.role.value}")
        if self._audit is not None:
            self._audit.log(_FEATURE_ID, "signed", user_id=entry.user_id,
                            reference_id=str(entry.document_id),
                            message=f"role={entry.role.value} stored={entry.used_stored_signature}")
        return SignOutcome(accepted=True, entry=entry)

    def _reject(self, document_id: int, user_id: int, reason: str) -> SignOutcome:
        logger.warning(f"Document {document_id}: sign rejected for user {user_id} ({reason})")
        if self._audit is not None and reason != NO_PENDING:
            self._audit.log(_FEATURE_ID, "sign_rejected", user_id=int(user_id),
                            reference_id=str(document_id), level="WARNING", message=reason)
        return SignOutcome(accepted=False, reason=reason)


def _is_pipeline_png(artifact: SignatureArtifact) -> bool:
    """Shape check only; the caller is trusted to pass pipeline output."""
    return (
        artifact.width > 0
        and artifact.height > 0
        and artifact.image_bytes.startswith(_PNG_MAGIC)
        and len(artifact.image_bytes) > len(_PNG_MAGIC)
    )
