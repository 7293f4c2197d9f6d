"""Salted PBKDF2 password hashing for fallback-mode credentials."""

import base64
import hashlib
import hmac
import os

ALGORITHM = "pbkdf2_sha256"
ITERATIONS = 130_000


def _pbkdf2(password: str, salt: bytes, iterations: int) -> str:
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return base64.b64encode(digest).decode()


def hash_password(password: str, iterations: int = ITERATIONS) -> str:
    """Return ``pbkdf2_sha256$<iterations>$<salt>$<digest>`` for a password."""
    salt = os.urandom(16)
    digest = _pbkdf2(password, salt, iterations)
    return f"{ALGORITHM}${iterations}${base64.b64encode(salt).decode()}${digest}"


def verify_password(password: str, stored: str) -> bool:
    """Check a password against a stored hash. Malformed hashes never match."""
    try:
        algorithm, iterations, salt_b64, digest = stored.split("$")
        salt = base64.b64decode(salt_b64)
        rounds = int(iterations)
    except ValueError:
        return False
    if algorithm != ALGORITHM:
        return False
    return hmac.compare_digest(_pbkdf2(password, salt, rounds), digest)
