"""
Namhae Welfare — Security Utilities
User key generation, PII encryption at rest, input sanitization.
The user key is the only credential a resident holds, so it must be unguessable.
"""

import base64
import hashlib
import re
import secrets
from functools import lru_cache

from cryptography.fernet import Fernet

from namhae_welfare.config import get_settings
from namhae_welfare.core.errors import ValidationError


USER_KEY_BYTES = 16  # 128-bit
MAX_FIELD_LENGTH = 200


# ══════════════════════════════════════════
# User Keys
# ══════════════════════════════════════════

def generate_user_key() -> str:
    """Return a 32-character hex token from the OS CSPRNG."""
    return secrets.token_hex(USER_KEY_BYTES)


# ══════════════════════════════════════════
# PII Encryption (Fernet, key derived from APP_SECRET)
# ══════════════════════════════════════════

@lru_cache()
def _fernet_for(secret: str) -> Fernet:
    key = hashlib.sha256(secret.encode()).digest()
    return Fernet(base64.urlsafe_b64encode(key))


def _get_fernet() -> Fernet:
    return _fernet_for(get_settings().app_secret)


def encrypt_pii(plaintext: str) -> str:
    """Encrypt personal data (name, address) before it is stored."""
    if not plaintext:
        return ""
    return _get_fernet().encrypt(plaintext.encode()).decode()


def decrypt_pii(ciphertext: str) -> str:
    """Decrypt personal data read back from storage."""
    if not ciphertext:
        return ""
    return _get_fernet().decrypt(ciphertext.encode()).decode()


# ══════════════════════════════════════════
# Input Sanitization
# ══════════════════════════════════════════

def sanitize_input(text: str | None, max_length: int = MAX_FIELD_LENGTH) -> str:
    """
    Clean free-text form input.
    Removes HTML tags and control characters and trims whitespace.
    Raises ValidationError when the cleaned value is longer than max_length.
    """
    if not text:
        return ""
    text = re.sub(r"<[^>]+>", "", text)
    text = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]", "", text).strip()
    if len(text) > max_length:
        raise ValidationError(f"입력값이 너무 깁니다. (최대 {max_length}자)")
    return text
