# taskboard/infra/jwt/token_manager.py
from __future__ import annotations

import hashlib
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID, uuid4

import jwt

from taskboard.core.config import ConfigurationError
from taskboard.services._shared.errors import ExpiredTokenError, InvalidTokenError
from taskboard.services._shared.ports import (
    AccessClaims,
    IssuedToken,
    TokenProvider,
    TokenSubject,
)

MIN_ACCESS_SECONDS = 60
MIN_REFRESH_SECONDS = 3600

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

_ACCESS_REQUIRED = ("exp", "iat", "nbf", "sub", "user_id", "email", "username", "type")
_REFRESH_REQUIRED = ("exp", "iat", "nbf", "sub", "jti", "type")


@dataclass(frozen=True, slots=True)
class TokenConfig:
    """
    Immutable token settings, validated once at start-up.

    :param secret: Symmetric signing key.
    :type secret: str
    :param access_ttl: Access token lifetime (>= 60 s).
    :type access_ttl: timedelta
    :param refresh_ttl: Refresh token lifetime (>= 3600 s).
    :type refresh_ttl: timedelta
    :param algorithm: HMAC algorithm used to sign and the only one accepted on
        verification.
    :type algorithm: str
    """

    secret: str
    access_ttl: timedelta
    refresh_ttl: timedelta
    algorithm: str = "HS256"

    def __post_init__(self) -> None:
        if not self.secret:
            raise ConfigurationError("JWT_SECRET_KEY must be set.")
        if not self.algorithm.startswith("HS"):
            raise ConfigurationError(f"Unsupported JWT algorithm {self.algorithm!r}.")
        if self.access_ttl.total_seconds() < MIN_ACCESS_SECONDS:
            raise ConfigurationError(
                f"Access token lifetime must be at least {MIN_ACCESS_SECONDS} seconds."
            )
        if self.refresh_ttl.total_seconds() < MIN_REFRESH_SECONDS:
            raise ConfigurationError(
                f"Refresh token lifetime must be at least {MIN_REFRESH_SECONDS} seconds."
            )

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> TokenConfig:
        """Build the settings from a Flask config (or any mapping)."""
        return cls(
            secret=config.get("JWT_SECRET_KEY") or "",
            access_ttl=timedelta(seconds=int(config.get("ACCESS_TOKEN_EXPIRES_SECONDS", 900))),
            refresh_ttl=timedelta(
                seconds=int(config.get("REFRESH_TOKEN_EXPIRES_SECONDS", 7 * 24 * 3600))
            ),
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
        )


class TokenManager(TokenProvider):
    """
    Issue and verify HMAC-signed JWTs with PyJWT.

    Access tokens are stateless. Refresh tokens carry a random ``jti`` and
    only their SHA-256 digest (:meth:`hash_token`) is meant to be stored, so
    the persisted table never holds a usable credential.

    Verification pins ``algorithms=[config.algorithm]``: a token whose header
    asks for ``none`` or any other algorithm is rejected as invalid.
    """

    def __init__(
        self,
        config: TokenConfig,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._config = config
        self._clock = clock or (lambda: datetime.now(UTC))

    @property
    def access_ttl(self) -> timedelta:
        return self._config.access_ttl

    @property
    def refresh_ttl(self) -> timedelta:
        return self._config.refresh_ttl

    # ------------------------------------------------------------------ #
    # Issue
    # ------------------------------------------------------------------ #

    def issue_access(self, member: TokenSubject) -> IssuedToken:
        return self._issue(
            subject=member.id,
            ttl=self._config.access_ttl,
            claims={
                "type": ACCESS_TOKEN_TYPE,
                "user_id": str(member.id),
                "email": member.email,
                "username": member.username,
            },
        )

    def issue_refresh(self, member_id: UUID) -> IssuedToken:
        return self._issue(
            subject=member_id,
            ttl=self._config.refresh_ttl,
            claims={"type": REFRESH_TOKEN_TYPE, "jti": str(uuid4())},
        )

    def _issue(self, *, subject: UUID, ttl: timedelta, claims: dict[str, Any]) -> IssuedToken:
        issued_at = int(self._clock().timestamp())
        lifetime = int(ttl.total_seconds())
        expires = issued_at + lifetime
        payload = {
            **claims,
            "sub": str(subject),
            "iat": issued_at,
            "nbf": issued_at,
            "exp": expires,
        }
        token = jwt.encode(payload, self._config.secret, algorithm=self._config.algorithm)
        return IssuedToken(
            token=token,
            expires_in=lifetime,
            expires_at=datetime.fromtimestamp(expires, tz=UTC),
        )

    # ------------------------------------------------------------------ #
    # Verify
    # ------------------------------------------------------------------ #

    def validate_access(self, token: str) -> AccessClaims:
        """
        Verify an access token.

        :raises ExpiredTokenError: When the signature is valid but ``exp`` has passed.
        :raises InvalidTokenError: For any other verification failure.
        """
        payload = self._decode(token, required=_ACCESS_REQUIRED, token_type=ACCESS_TOKEN_TYPE)
        member_id = self._subject(payload)
        if payload["user_id"] != str(member_id):
            raise InvalidTokenError()
        return AccessClaims(
            member_id=member_id,
            email=str(payload["email"]),
            username=str(payload["username"]),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
        )

    def validate_refresh(self, token: str) -> UUID:
        """
        Verify a refresh token cryptographically and return its subject.

        The caller still has to check the stored record; a revoked token
        passes this method.
        """
        payload = self._decode(token, required=_REFRESH_REQUIRED, token_type=REFRESH_TOKEN_TYPE)
        return self._subject(payload)

    def _decode(self, token: str, *, required: tuple[str, ...], token_type: str) -> dict[str, Any]:
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._config.secret,
                algorithms=[self._config.algorithm],
                options={"require": list(required)},
            )
        except jwt.ExpiredSignatureError as exc:
            raise ExpiredTokenError() from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError() from exc
        if payload.get("type") != token_type:
            raise InvalidTokenError()
        return payload

    @staticmethod
    def _subject(payload: Mapping[str, Any]) -> UUID:
        try:
            return UUID(str(payload["sub"]))
        except ValueError as exc:
            raise InvalidTokenError() from exc

    # ------------------------------------------------------------------ #
    # Storage key
    # ------------------------------------------------------------------ #

    @staticmethod
    def hash_token(token: str) -> str:
        """Return the SHA-256 hex digest used to store a refresh token."""
        return hashlib.sha256(token.encode("utf-8")).hexdigest()
