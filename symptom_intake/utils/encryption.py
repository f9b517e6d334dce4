import base64
import hashlib
import os
from typing import Any

from cryptography.fernet import Fernet, InvalidToken
from sqlalchemy.types import TypeDecorator, Text


def _build_cipher() -> Fernet:
    """Derive a stable Fernet key from ENCRYPTION_SECRET (or fallback dev secret)."""
    secret = os.getenv("ENCRYPTION_SECRET", "dev-secret-key-change-me").encode("utf-8")
    key = base64.urlsafe_b64encode(hashlib.sha256(secret).digest())
    return Fernet(key)


_CIPHER = _build_cipher()


class EncryptedText(TypeDecorator):
    """Stores symptom text Fernet-encrypted; decrypts transparently on load."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Any, dialect) -> Any:  # type: ignore[override]
        if value is None:
            return None
        if not isinstance(value, str):
            value = str(value)
        return _CIPHER.encrypt(value.encode("utf-8")).decode("utf-8")

    def process_result_value(self, value: Any, dialect) -> Any:  # type: ignore[override]
        if value is None:
            return None
        try:
            return _CIPHER.decrypt(value.encode("utf-8")).decode("utf-8")
        except InvalidToken:
            # rows written under a different ENCRYPTION_SECRET are unreadable
            return None
