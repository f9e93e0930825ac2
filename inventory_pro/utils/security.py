"""
Security helpers for InventoryPro.

Credential hashing for the demo accounts and Fernet encryption for the
local storage file.
"""

import hashlib
import secrets
from typing import Optional, Tuple

from cryptography.fernet import Fernet, InvalidToken

PBKDF2_ITERATIONS = 100000


def hash_password(password: str, salt: Optional[bytes] = None) -> Tuple[bytes, bytes]:
    """
    Hash a password using PBKDF2-HMAC-SHA256.

    Args:
        password: Password to hash
        salt: Optional salt (generated if not provided)

    Returns:
        Tuple of (hashed_password, salt)
    """
    if salt is None:
        salt = secrets.token_bytes(16)

    password_hash = hashlib.pbkdf2_hmac(
        'sha256',
        password.encode('utf-8'),
        salt,
        iterations=PBKDF2_ITERATIONS
    )
    return password_hash, salt


def verify_password(password: str, password_hash: bytes, salt: bytes) -> bool:
    """Check a password against a stored hash in constant time."""
    computed_hash, _ = hash_password(password, salt)
    return secrets.compare_digest(computed_hash, password_hash)


def encrypt_payload(data: bytes, cipher: Fernet) -> bytes:
    """Encrypt a storage payload."""
    return cipher.encrypt(data)


def decrypt_payload(token: bytes, cipher: Fernet) -> Optional[bytes]:
    """
    Decrypt a storage payload.

    Returns:
        Decrypted bytes, or None when the token was produced with another key
        or has been tampered with
    """
    try:
        return cipher.decrypt(token)
    except InvalidToken:
        return None
