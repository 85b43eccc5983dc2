"""bcrypt-backed credential verifier."""

from __future__ import annotations

import bcrypt

from app.adapters.auth.base import CredentialVerifier

# bcrypt only considers the first 72 bytes and newer releases reject longer input.
_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class BcryptCredentialVerifier(CredentialVerifier):
    def __init__(self, *, rounds: int = 10) -> None:
        self._rounds = rounds
        self._dummy_hash: bytes | None = None

    def hash_password(self, password: str) -> str:
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=self._rounds)).decode("utf-8")

    def verify_password(self, password: str, password_hash: str | None) -> bool:
        if password_hash is None:
            # Unknown users still pay for one bcrypt check so timing does not reveal them.
            bcrypt.checkpw(_encode(password), self._timing_dummy())
            return False
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
        except ValueError:
            return False

    def _timing_dummy(self) -> bytes:
        if self._dummy_hash is None:
            self._dummy_hash = bcrypt.hashpw(b"lexicard-timing-dummy", bcrypt.gensalt(rounds=self._rounds))
        return self._dummy_hash


__all__ = ["BcryptCredentialVerifier"]
