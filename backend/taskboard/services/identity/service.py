"""
IdentityService
===============

Aggregate service responsible for the `Member` aggregate and its tokens:
- Registration and profile (email, username, full_name, password)
- Login (credential check + token issuance)
- Refresh, logout and revocation of refresh tokens
- Authentication of bearer access tokens for the HTTP boundary
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from taskboard.models.base import utcnow
from taskboard.models.member import Member
from taskboard.models.refresh_token import RefreshToken
from taskboard.repositories.member import MemberRepository, normalize_email
from taskboard.repositories.refresh_token import RefreshTokenRepository
from taskboard.services._shared.base import BaseService, ServiceContext
from taskboard.services._shared.dto import is_set
from taskboard.services._shared.errors import (
    AuthenticationError,
    DomainValidationError,
    EmailAlreadyTakenError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    InvalidTokenError,
    PasswordTooShortError,
    UserAlreadyExistsError,
    UsernameAlreadyTakenError,
    UserNotFoundError,
    violates,
)
from taskboard.services._shared.ports import PasswordHasher, TokenProvider
from taskboard.services.identity.dto import (
    AuthenticatedMember,
    LoginIn,
    LoginOut,
    MemberOut,
    ProfileUpdateIn,
    RefreshOut,
    RegisterIn,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
DEFAULT_TOKEN_RETENTION = timedelta(days=30)


def member_to_out(member: Member) -> MemberOut:
    return MemberOut(
        id=member.id,
        email=member.email,
        username=member.username,
        full_name=member.full_name,
        created_at=member.created_at,
        updated_at=member.updated_at,
    )


def ensure_password_length(password: str) -> None:
    """
    :raises PasswordTooShortError: When ``password`` is shorter than 8 characters.
    """
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise PasswordTooShortError(MIN_PASSWORD_LENGTH)


class IdentityService(BaseService):
    """
    Application service for the `Member` aggregate.

    Responsibilities
    ----------------
    - Register members ensuring email and username uniqueness.
    - Authenticate credentials and issue access/refresh tokens.
    - Refresh access tokens against the stored, non-revoked refresh record.
    - Retrieve and update member profiles safely.

    Refresh tokens are persisted as SHA-256 digests only. Rotation (revoke the
    presented refresh token and hand out a new one) is off unless
    ``rotate_refresh`` is set.
    """

    def __init__(
        self,
        *,
        ctx: ServiceContext | None = None,
        tokens: TokenProvider | None = None,
        hasher: PasswordHasher | None = None,
        rotate_refresh: bool = False,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        super().__init__(ctx=ctx, tokens=tokens, hasher=hasher)
        self.rotate_refresh = rotate_refresh
        self._clock = clock or utcnow

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def register(self, dto: RegisterIn) -> MemberOut:
        """
        Register a new member. No tokens are issued.

        :param dto: Registration input DTO.
        :type dto: RegisterIn
        :returns: Public-safe member DTO.
        :rtype: MemberOut
        :raises PasswordTooShortError: When the password is under 8 characters.
        :raises UserAlreadyExistsError: When the email or username is taken.
        """
        ensure_password_length(dto.password)

        with self.rw_uow() as uow:
            repo: MemberRepository = uow.members

            if repo.email_taken(dto.email) or repo.username_taken(dto.username):
                raise UserAlreadyExistsError()

            try:
                member = repo.model(
                    email=dto.email,
                    username=dto.username,
                    full_name=dto.full_name,
                    password_hash=self.hasher.hash(dto.password),
                )
            except ValueError as exc:
                raise DomainValidationError(str(exc)) from exc

            try:
                repo.add(member)
            except IntegrityError as exc:
                if violates(
                    exc,
                    "uq_members_email",
                    "uq_members_username",
                    "members.email",
                    "members.username",
                ):
                    raise UserAlreadyExistsError() from exc
                raise

            logger.info("Member registered", extra=self.log_extra(member_id=member.id))
            return member_to_out(member)

    # --------------------------------------------------------------------- #
    # Login / refresh / logout
    # --------------------------------------------------------------------- #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Verify credentials and issue an access/refresh pair.

        Unknown email and wrong password fail identically, and an unknown
        email still costs one hash verification.

        :raises InvalidCredentialsError: On any credential mismatch.
        """
        with self.rw_uow() as uow:
            member = uow.members.get_by_email(dto.email)
            if member is None:
                self.hasher.verify(None, dto.password)
                logger.info("Login rejected", extra=self.log_extra(reason="invalid_credentials"))
                raise InvalidCredentialsError()

            if not self.hasher.verify(member.password_hash, dto.password):
                logger.info(
                    "Login rejected",
                    extra=self.log_extra(member_id=member.id, reason="invalid_credentials"),
                )
                raise InvalidCredentialsError()

            access = self.tokens.issue_access(member)
            refresh_token = self._store_refresh(uow.refresh_tokens, member.id)

            logger.info("Member logged in", extra=self.log_extra(member_id=member.id))
            return LoginOut(
                access_token=access.token,
                refresh_token=refresh_token,
                expires_in=access.expires_in,
                member=member_to_out(member),
            )

    def refresh(self, refresh_token: str) -> RefreshOut:
        """
        Exchange a refresh token for a new access token.

        :param refresh_token: Encoded refresh token as returned by :meth:`login`.
        :type refresh_token: str
        :returns: New access token (plus a new refresh token when rotating).
        :rtype: RefreshOut
        :raises InvalidRefreshTokenError: When the token fails verification or
            its stored record is missing, revoked or expired.
        :raises UserNotFoundError: When the member was deleted meanwhile.
        """
        try:
            member_id = self.tokens.validate_refresh(refresh_token)
        except AuthenticationError as exc:
            raise InvalidRefreshTokenError() from exc

        token_hash = self.tokens.hash_token(refresh_token)

        with self.rw_uow() as uow:
            record = uow.refresh_tokens.get_active(token_hash, now=self._clock())
            if record is None or record.member_id != member_id:
                logger.info(
                    "Refresh rejected",
                    extra=self.log_extra(member_id=member_id, reason="unknown_or_revoked"),
                )
                raise InvalidRefreshTokenError()

            member = uow.members.get(member_id)
            if member is None:
                raise UserNotFoundError(member_id)

            access = self.tokens.issue_access(member)

            rotated: str | None = None
            if self.rotate_refresh:
                uow.refresh_tokens.revoke(token_hash, now=self._clock())
                rotated = self._store_refresh(uow.refresh_tokens, member.id)

            logger.info("Access token refreshed", extra=self.log_extra(member_id=member.id))
            return RefreshOut(
                access_token=access.token,
                expires_in=access.expires_in,
                member=member_to_out(member),
                refresh_token=rotated,
            )

    def logout(self, refresh_token: str) -> bool:
        """
        Revoke one refresh token. Idempotent.

        :returns: ``True`` when a still-active record was revoked.
        :rtype: bool
        """
        token_hash = self.tokens.hash_token(refresh_token)
        with self.rw_uow() as uow:
            revoked = uow.refresh_tokens.revoke(token_hash, now=self._clock())
            logger.info("Refresh token revoked", extra=self.log_extra(count=revoked))
            return revoked > 0

    def logout_all(self, member_id: UUID) -> int:
        """Revoke every active refresh token of ``member_id``; returns how many."""
        with self.rw_uow() as uow:
            revoked = uow.refresh_tokens.revoke_all_for_member(member_id, now=self._clock())
            logger.info(
                "All refresh tokens revoked",
                extra=self.log_extra(member_id=member_id, count=revoked),
            )
            return revoked

    def purge_expired_tokens(
        self,
        *,
        now: datetime | None = None,
        retention: timedelta = DEFAULT_TOKEN_RETENTION,
    ) -> int:
        """
        Delete expired refresh tokens and revoked ones older than ``retention``.

        Safe to run repeatedly and concurrently; a second run removes nothing.

        :returns: Number of deleted rows.
        :rtype: int
        """
        now = now or self._clock()
        with self.rw_uow() as uow:
            removed = uow.refresh_tokens.purge(now=now, revoked_before=now - retention)
            logger.info("Refresh tokens purged", extra=self.log_extra(removed=removed))
            return removed

    def _store_refresh(self, repo: RefreshTokenRepository, member_id: UUID) -> str:
        issued = self.tokens.issue_refresh(member_id)
        repo.add(
            RefreshToken(
                member_id=member_id,
                token_hash=self.tokens.hash_token(issued.token),
                expires_at=issued.expires_at,
            )
        )
        return issued.token

    # --------------------------------------------------------------------- #
    # Profile
    # --------------------------------------------------------------------- #

    def get_profile(self, member_id: UUID) -> MemberOut:
        """
        :raises UserNotFoundError: If the member does not exist.
        """
        with self.ro_uow() as uow:
            member = uow.members.get(member_id)
            if member is None:
                raise UserNotFoundError(member_id)
            return member_to_out(member)

    def update_profile(self, member_id: UUID, dto: ProfileUpdateIn) -> MemberOut:
        """
        Apply a partial profile update.

        Email and username are re-checked for uniqueness against every other
        member. A non-empty password is length-checked and re-hashed.

        :param member_id: Member being updated (always the caller).
        :type member_id: UUID
        :param dto: Fields to change; unset fields stay untouched.
        :type dto: ProfileUpdateIn
        :returns: Updated member DTO.
        :rtype: MemberOut
        :raises UserNotFoundError: When the member does not exist.
        :raises EmailAlreadyTakenError: When another member owns the email.
        :raises UsernameAlreadyTakenError: When another member owns the username.
        :raises PasswordTooShortError: When the new password is under 8 characters.
        """
        with self.rw_uow() as uow:
            repo: MemberRepository = uow.members
            member = repo.get_for_update(member_id)
            if member is None:
                raise UserNotFoundError(member_id)

            updates: dict[str, Any] = {}

            if is_set(dto.email) and dto.email is not None:
                if normalize_email(dto.email) != member.email:
                    if repo.email_taken(dto.email, exclude_id=member.id):
                        raise EmailAlreadyTakenError()
                    updates["email"] = dto.email

            if is_set(dto.username) and dto.username is not None:
                if dto.username.strip() != member.username:
                    if repo.username_taken(dto.username, exclude_id=member.id):
                        raise UsernameAlreadyTakenError()
                    updates["username"] = dto.username

            if is_set(dto.full_name):
                updates["full_name"] = dto.full_name

            if is_set(dto.password) and dto.password:
                ensure_password_length(dto.password)
                updates["password_hash"] = self.hasher.hash(dto.password)

            if updates:
                try:
                    repo.assign_updates(member, updates)
                except ValueError as exc:
                    raise DomainValidationError(str(exc)) from exc
                except IntegrityError as exc:
                    if violates(exc, "uq_members_email", "members.email"):
                        raise EmailAlreadyTakenError() from exc
                    if violates(exc, "uq_members_username", "members.username"):
                        raise UsernameAlreadyTakenError() from exc
                    raise

            logger.info(
                "Member profile updated",
                extra=self.log_extra(member_id=member.id, fields=sorted(updates)),
            )
            return member_to_out(member)

    # --------------------------------------------------------------------- #
    # Bearer authentication
    # --------------------------------------------------------------------- #

    def authenticate(self, access_token: str) -> AuthenticatedMember:
        """
        Resolve a bearer access token to a stored member.

        :raises ExpiredTokenError: When the token has expired.
        :raises InvalidTokenError: When the token is invalid or its member is gone.
        """
        claims = self.tokens.validate_access(access_token)
        with self.ro_uow() as uow:
            member = uow.members.get(claims.member_id)
            if member is None:
                raise InvalidTokenError()
            return AuthenticatedMember(id=member.id, email=member.email, username=member.username)
