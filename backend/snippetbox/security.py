"""
Snippetbox — Password Hashing
===============================

What:  The PasswordHasher capability consumed by UserStore, and its default
       bcrypt implementation.
How:   passlib's CryptContext computes and verifies bcrypt hashes. Hashes are
       handled as bytes at the store boundary.
"""

from typing import Protocol

from passlib.context import CryptContext


class PasswordHasher(Protocol):
    """One-way password function: hash on signup, verify on login."""

    def hash(self, plaintext: str) -> bytes:
        ...

    def verify(self, hashed: bytes, plaintext: str) -> bool:
        ...


class BcryptHasher:
    """bcrypt through passlib, with a configurable work factor."""

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, plaintext: str) -> bytes:
        return self._context.hash(plaintext).encode("ascii")

    def verify(self, hashed: bytes, plaintext: str) -> bool:
        try:
            return self._context.verify(plaintext, hashed.decode("ascii"))
        except (ValueError, UnicodeDecodeError):
            # Malformed stored hash: treat as a failed match.
            return False
