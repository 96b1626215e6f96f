"""
Local Marketplace Backend - Password Hashing
=============================================

What:  Salted, slow password hashing for user credentials.
How:   passlib CryptContext with pbkdf2_sha256 (per-hash random salt,
       configurable rounds). `deprecated="auto"` lets verify_and_update
       report hashes that should be re-hashed if the scheme list changes.
"""

from typing import Optional, Tuple

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """True when `plain` matches `hashed`. Malformed hashes count as a mismatch."""
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        # passlib raises ValueError for strings it cannot identify as a hash
        return False


def verify_and_update(plain: str, hashed: str) -> Tuple[bool, Optional[str]]:
    """Verify, and return a replacement hash when the stored one is outdated."""
    try:
        return pwd_context.verify_and_update(plain, hashed)
    except ValueError:
        return False, None
