# taskboard/infra/security/password_hasher.py
from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from taskboard.services._shared.ports import PasswordHasher


class CredentialHashingError(RuntimeError):
    """Hashing a password failed; an infrastructure fault, never a user error."""


class WerkzeugPasswordHasher(PasswordHasher):
    """
    Salted adaptive hashing backed by :mod:`werkzeug.security`.

    :param method: Werkzeug method string carrying the work factor,
        e.g. ``"scrypt:32768:8:1"`` or ``"pbkdf2:sha256:600000"``.
    """

    def __init__(self, method: str = "scrypt") -> None:
        self.method = method
        self._decoy: str | None = None

    def hash(self, plaintext: str) -> str:
        try:
            return generate_password_hash(plaintext, method=self.method)
        except (ValueError, TypeError) as exc:
            raise CredentialHashingError("Could not hash password") from exc

    def verify(self, password_hash: str | None, plaintext: str) -> bool:
        """Return ``True`` when ``plaintext`` matches ``password_hash``.

        A missing hash still costs one full verification against a decoy so
        "unknown account" and "wrong password" take the same time.
        """
        if not password_hash:
            check_password_hash(self._decoy_hash(), plaintext)
            return False
        try:
            return bool(check_password_hash(password_hash, plaintext))
        except (ValueError, TypeError):
            # Malformed stored hash
            return False

    def _decoy_hash(self) -> str:
        if self._decoy is None:
            self._decoy = self.hash("decoy-password-never-matches")
        return self._decoy
