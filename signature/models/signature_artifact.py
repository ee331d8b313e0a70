# signature/models/signature_artifact.py
from __future__ import annotations
import hashlib
from dataclasses import dataclass


@dataclass(frozen=True)
class SignatureArtifact:
    """
    A validated, sanitized signature image.

    Only the validation pipeline creates these; ``image_bytes`` is always a
    single-frame RGBA PNG.
    """
    image_bytes: bytes
    width: int
    height: int
    aspect_ratio: float
    ink_ratio: float
    mime_type: str = "image/png"

    @property
    def sha256(self) -> str:
        return hashlib.sha256(self.image_bytes).hexdigest()

    @property
    def size_bytes(self) -> int:
        return len(self.image_bytes)
