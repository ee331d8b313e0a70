# signature/models/pending_signature.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from responsibilities.enum import ResponsibilityRole
from .signature_enums import PendingState


@dataclass(frozen=True)
class PendingSignature:
    """
    One ``(document, user, role)`` signing obligation.

    Moves from PENDING to SIGNED exactly once and never back. Immutable:
    the workflow replaces the stored entry on transition.
    """
    document_id: int
    user_id: int
    role: ResponsibilityRole
    responsabilidad_id: Optional[int] = None
    state: PendingState = PendingState.PENDING
    signed_at: Optional[datetime] = None
    signature_sha256: Optional[str] = None
    used_stored_signature: bool = False

    @property
    def is_signed(self) -> bool:
        return self.state is PendingState.SIGNED

    @property
    def key(self) -> tuple:
        return (self.document_id, self.user_id, self.role)
