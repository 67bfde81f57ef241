"""
Password hashing via argon2-cffi.
"""
from __future__ import annotations

from argon2 import PasswordHasher as _Argon2Hasher
from argon2.exceptions import VerifyMismatchError


class PasswordHasher:
    """One-way hash/verify capability used by the credential validator and user service."""

    def __init__(self, hasher: _Argon2Hasher | None = None) -> None:
        self._ph = hasher or _Argon2Hasher()

    def hash(self, plaintext: str) -> str:
        return self._ph.hash(plaintext)

    def verify(self, plaintext: str, digest: str) -> bool:
        """
        Constant-time comparison of `plaintext` against `digest`.
        Returns False on mismatch; a malformed digest raises argon2's InvalidHashError.
        """
        try:
            return self._ph.verify(digest, plaintext)
        except VerifyMismatchError:
            return False
