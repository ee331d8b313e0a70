"""Signature feature exceptions."""
from __future__ import annotations

from typing import Dict, Optional

from signature.models.signature_enums import SignatureValidationErrorCode

DEFAULT_MESSAGES: Dict[SignatureValidationErrorCode, str] = {
    SignatureValidationErrorCode.INVALID_TYPE: "Formato no permitido (solo PNG/JPG).",
    SignatureValidationErrorCode.FILE_TOO_LARGE: "Archivo demasiado grande.",
    SignatureValidationErrorCode.INVALID_DIMENSIONS: "Dimensiones de imagen no válidas.",
    SignatureValidationErrorCode.INVALID_ASPECT: "Relación de aspecto no válida.",
    SignatureValidationErrorCode.INVALID_INK: "La imagen no parece una firma (demasiado vacía o demasiada tinta).",
    SignatureValidationErrorCode.EMPTY_IMAGE: "Dibuje su firma antes de guardar.",
}


class SignatureError(Exception):
    """Base exception for the signature feature."""


class SignatureValidationError(SignatureError):
    """A signature image failed one of the validation gates."""

    def __init__(self, code: SignatureValidationErrorCode, message: Optional[str] = None) -> None:
        self.code = SignatureValidationErrorCode(code)
        super().__init__(message or DEFAULT_MESSAGES[self.code])

    @property
    def message(self) -> str:
        return str(self)
