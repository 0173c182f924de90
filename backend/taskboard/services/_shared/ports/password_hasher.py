from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """Port for one-way hashing of member and board passwords.

    ``hash`` raises on infrastructure failure; ``verify`` never raises for a
    mismatch or a malformed stored hash, it returns ``False``.
    """

    def hash(self, plaintext: str) -> str: ...

    def verify(self, password_hash: str | None, plaintext: str) -> bool: ...
