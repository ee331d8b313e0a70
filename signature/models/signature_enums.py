# signature/models/signature_enums.py
from __future__ import annotations
from enum import Enum


class SignatureValidationErrorCode(str, Enum):
    """Stable rejection kinds; each maps to its own user-facing message."""
    INVALID_TYPE = "invalid-type"
    FILE_TOO_LARGE = "file-too-large"
    INVALID_DIMENSIONS = "invalid-dimensions"
    INVALID_ASPECT = "invalid-aspect"
    INVALID_INK = "invalid-ink"
    EMPTY_IMAGE = "empty-image"


class SignSourceMode(str, Enum):
    """Where the signature for a signing action comes from."""
    STORED = "stored"
    DRAW = "draw"
    UPLOAD = "upload"


class PendingState(str, Enum):
    NOT_ASSIGNED = "not-assigned"
    PENDING = "pending"
    SIGNED = "signed"       # terminal
