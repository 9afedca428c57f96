"""Local authentication utilities: password hashing and access tokens."""
from __future__ import annotations

import hashlib
import hmac
import os
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from fintrack.config import settings
from fintrack.errors import AuthenticationError

TOKEN_ALGORITHM = "HS256"


def _hash_with_salt(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, 120_000)


def hash_password(password: str) -> str:
    """Return a salted password hash in the form salt$hash (hex)."""
    salt = os.urandom(16)
    hashed = _hash_with_salt(password, salt)
    return f"{salt.hex()}${hashed.hex()}"


def verify_password(password: str, stored_hash: Optional[str]) -> bool:
    """Verify a password against a stored hash string."""
    if not stored_hash or "$" not in stored_hash:
        return False
    salt_hex, hash_hex = stored_hash.split("$", 1)
    try:
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    candidate = _hash_with_salt(password, salt)
    return hmac.compare_digest(candidate, expected)


def create_access_token(user_id: str, email: Optional[str] = None, expires_in: Optional[timedelta] = None) -> str:
    """Sign a local bearer token whose subject is the user id."""
    expire = datetime.now(timezone.utc) + (expires_in or timedelta(days=settings.access_token_expire_days))
    claims = {"sub": str(user_id), "exp": expire}
    if email:
        claims["email"] = email
    return jwt.encode(claims, settings.secret_key, algorithm=TOKEN_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Return the claims of a local token; expired or tampered tokens raise AuthenticationError."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[TOKEN_ALGORITHM])
    except JWTError as e:
        raise AuthenticationError(f"Invalid token: {e}")
    if not payload.get("sub"):
        raise AuthenticationError("Token has no subject")
    return payload
