# signature/logic/encryption.py
from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import List

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)

_PLAIN_IMAGE_MAGIC = (b"\x89PNG\r\n\x1a\n", b"\xff\xd8\xff")


class SignatureKeyring:
    """
    Fernet keys stored one per line in ``key_file``:
    - first line is the current key (used for ENCRYPT),
    - remaining lines are legacy keys (used only for DECRYPT).
    The file is created with a fresh key on first use.
    """

    def __init__(self, key_file: Path) -> None:
        self._key_file = Path(key_file)
        self._lock = threading.Lock()

    @property
    def key_file(self) -> Path:
        return self._key_file

    def _read_keys(self) -> List[str]:
        if not self._key_file.exists():
            return []
        lines = self._key_file.read_text(encoding="ascii").splitlines()
        return [ln.strip() for ln in lines if ln.strip() and not ln.lstrip().startswith("#")]

    def _write_keys(self, keys: List[str]) -> None:
        self._key_file.parent.mkdir(parents=True, exist_ok=True)
        self._key_file.write_text("\n".join(keys) + "\n", encoding="ascii")

    def _load(self) -> List[Fernet]:
        with self._lock:
            keys = self._read_keys()
            if not keys:
                keys = [Fernet.generate_key().decode("ascii")]
                self._write_keys(keys)
                logger.info(f"Created signature keyring at {self._key_file}")

        ferns: List[Fernet] = [Fernet(keys[0].encode("ascii"))]
        for k in keys[1:]:
            try:
                ferns.append(Fernet(k.encode("ascii")))
            except ValueError:
                logger.warning(f"Ignoring malformed legacy key in {self._key_file}")
        return ferns

    def rotate(self) -> None:
        """Make a new key current; the previous keys stay for decryption."""
        with self._lock:
            keys = self._read_keys()
            self._write_keys([Fernet.generate_key().decode("ascii")] + keys)
        logger.info(f"Rotated signature keyring at {self._key_file}")

    def encrypt(self, data: bytes) -> bytes:
        return self._load()[0].encrypt(data)

    def decrypt(self, token: bytes) -> bytes:
        """
        Try the current key first, then legacy keys.
        If all fail, accept legacy plain PNG/JPEG content as-is.
        Otherwise raise InvalidToken.
        """
        for f in self._load():
            try:
                return f.decrypt(token)
            except InvalidToken:
                continue

        if token.startswith(_PLAIN_IMAGE_MAGIC):
            return token
        raise InvalidToken("Unable to decrypt signature token")
