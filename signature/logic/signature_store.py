# signature/logic/signature_store.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from cryptography.fernet import InvalidToken

from ..models.signature_artifact import SignatureArtifact
from ..models.validation_options import SignatureValidationOptions
from .encryption import SignatureKeyring
from .signature_validator import validate_and_sanitize_signature

logger = logging.getLogger(__name__)

_FEATURE_ID = "signature"


class SignatureStore:
    """
    Per-user stored signature, encrypted at rest as ``{base_dir}/{user_id}.sig``.

    Only validated artifacts are stored, so whatever ``load`` returns already
    passed the pipeline.
    """

    def __init__(self, base_dir: Path, keyring: SignatureKeyring, *,
                 audit: Optional[Any] = None) -> None:
        self._base_dir = Path(base_dir)
        self._base_dir.mkdir(parents=True, exist_ok=True)
        self._keyring = keyring
        self._audit = audit

    @classmethod
    def from_config(cls, service=None, *, audit: Optional[Any] = None) -> "SignatureStore":
        if service is None:
            from core.config.config_service import config_service as service
        section = service.signature
        return cls(section.data_dir, SignatureKeyring(section.key_file), audit=audit)

    # -------- Internal helpers ----------------------------------------------
    def _sig_path(self, user_id: int) -> Path:
        return self._base_dir / f"{int(user_id)}.sig"

    def _log(self, event: str, user_id: int, message: Optional[str] = None,
             level: str = "INFO") -> None:
        if self._audit is not None:
            self._audit.log(_FEATURE_ID, event, user_id=user_id, level=level, message=message)

    # -------- Public API -----------------------------------------------------
    def has_signature(self, user_id: int) -> bool:
        """True only when a stored signature exists and can be decrypted."""
        return self.load(user_id) is not None

    def save(self, user_id: int, artifact: SignatureArtifact) -> None:
        """Encrypt and persist the artifact's PNG, replacing any previous one."""
        token = self._keyring.encrypt(artifact.image_bytes)
        self._sig_path(user_id).write_bytes(token)
        logger.info(f"Stored signature for user {user_id} ({artifact.width}x{artifact.height})")
        self._log("stored_signature_saved", user_id, message=f"sha256={artifact.sha256}")

    def save_upload(self, user_id: int, data: bytes, mime_type: Optional[str],
                    options: Optional[SignatureValidationOptions] = None) -> SignatureArtifact:
        """Validate a drawn/uploaded image and store it; validation errors propagate."""
        artifact = validate_and_sanitize_signature(data, mime_type, options)
        self.save(user_id, artifact)
        return artifact

    def load(self, user_id: int) -> Optional[bytes]:
        """
        Load and decrypt the user's signature PNG.
        Returns None if not present OR if decryption fails.
        """
        p = self._sig_path(user_id)
        if not p.exists():
            return None
        try:
            return self._keyring.decrypt(p.read_bytes())
        except InvalidToken:
            logger.warning(f"Cannot decrypt stored signature {p}")
            self._log("stored_signature_unreadable", user_id, message=str(p), level="WARNING")
            return None

    def delete(self, user_id: int) -> bool:
        p = self._sig_path(user_id)
        if p.exists():
            p.unlink()
            self._log("stored_signature_deleted", user_id)
            return True
        return False
