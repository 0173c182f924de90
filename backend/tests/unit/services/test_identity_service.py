"""Unit tests for IdentityService: registration, tokens and profile."""

from __future__ import annotations

import logging
from datetime import timedelta
from types import SimpleNamespace
from uuid import uuid4

import pytest
from sqlalchemy import delete

from taskboard.models.base import utcnow
from taskboard.models.member import Member
from taskboard.models.refresh_token import RefreshToken
from taskboard.repositories.member import MemberRepository
from taskboard.repositories.refresh_token import RefreshTokenRepository
from taskboard.services._shared.base import ServiceContext
from taskboard.services._shared.errors import (
    EmailAlreadyTakenError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    InvalidTokenError,
    PasswordTooShortError,
    UserAlreadyExistsError,
    UsernameAlreadyTakenError,
    UserNotFoundError,
)
from taskboard.services.identity import (
    IdentityService,
    LoginIn,
    ProfileUpdateIn,
    RegisterIn,
)
from tests.factories.member import DEFAULT_PASSWORD, MemberFactory, RefreshTokenFactory


class TestIdentityService:
    """Validate IdentityService behaviours for the Member aggregate."""

    @pytest.fixture()
    def service(self) -> IdentityService:
        """Return a fresh service instance per test."""
        return IdentityService()

    @pytest.fixture()
    def repo(self, session) -> MemberRepository:
        return MemberRepository(session=session)

    @pytest.fixture()
    def tokens_repo(self, session) -> RefreshTokenRepository:
        return RefreshTokenRepository(session=session)

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def test_register_creates_member_with_hashed_password(self, service, repo, hasher):
        """Given valid data, a new member is stored with a password hash."""
        dto = RegisterIn(
            email="Ada@Example.COM",
            password="analytical-engine",
            username="ada",
            full_name="Ada Lovelace",
        )

        result = service.register(dto)

        assert result.email == "ada@example.com"
        assert result.username == "ada"
        stored = repo.get_by_email("ada@example.com")
        assert stored is not None
        assert stored.password_hash != "analytical-engine"
        assert hasher.verify(stored.password_hash, "analytical-engine")

    def test_register_rejects_duplicate_email(self, service):
        MemberFactory(email="dup@example.com")
        dto = RegisterIn(email="dup@example.com", password="long-enough", username="fresh")

        with pytest.raises(UserAlreadyExistsError):
            service.register(dto)

    def test_register_rejects_duplicate_username(self, service):
        MemberFactory(username="taken")
        dto = RegisterIn(email="other@example.com", password="long-enough", username="taken")

        with pytest.raises(UserAlreadyExistsError):
            service.register(dto)

    def test_register_rejects_short_password(self, service, repo):
        """Given a 7-character password, registration fails before persisting."""
        dto = RegisterIn(email="short@example.com", password="1234567", username="short")

        with pytest.raises(PasswordTooShortError):
            service.register(dto)

        assert repo.get_by_email("short@example.com") is None

    # --------------------------------------------------------------------- #
    # Login
    # --------------------------------------------------------------------- #

    def test_login_issues_tokens_and_stores_refresh_digest(
        self, service, token_manager, tokens_repo
    ):
        member = MemberFactory(password="pa55word-ok")

        result = service.login(LoginIn(email=member.email, password="pa55word-ok"))

        assert token_manager.validate_access(result.access_token).member_id == member.id
        assert result.member.id == member.id
        assert result.expires_in == 900
        stored = tokens_repo.get_active(
            token_manager.hash_token(result.refresh_token), now=utcnow()
        )
        assert stored is not None
        assert stored.member_id == member.id

    def test_login_failures_are_indistinguishable(self, service, session):
        """Given an unknown email or a wrong password, the error is the same."""
        member = MemberFactory(password="pa55word-ok")
        session.commit()

        with pytest.raises(InvalidCredentialsError) as unknown:
            service.login(LoginIn(email="nobody@example.com", password="pa55word-ok"))
        with pytest.raises(InvalidCredentialsError) as wrong:
            service.login(LoginIn(email=member.email, password="not-the-password"))

        assert str(unknown.value) == str(wrong.value)
        assert unknown.value.code == wrong.value.code == "invalid_credentials"

    # --------------------------------------------------------------------- #
    # Refresh / logout
    # --------------------------------------------------------------------- #

    def test_refresh_without_rotation_keeps_token_usable(self, service, token_manager):
        member = MemberFactory()
        login = service.login(LoginIn(email=member.email, password=DEFAULT_PASSWORD))

        first = service.refresh(login.refresh_token)
        second = service.refresh(login.refresh_token)

        assert first.refresh_token is None
        assert token_manager.validate_access(first.access_token).member_id == member.id
        assert second.member.id == member.id

    def test_refresh_with_rotation_revokes_presented_token(self):
        """Given rotation on, the old refresh token stops working after use."""
        service = IdentityService(rotate_refresh=True)
        member = MemberFactory()
        login = service.login(LoginIn(email=member.email, password=DEFAULT_PASSWORD))

        rotated = service.refresh(login.refresh_token)

        assert rotated.refresh_token is not None
        assert rotated.refresh_token != login.refresh_token
        assert service.refresh(rotated.refresh_token).member.id == member.id
        with pytest.raises(InvalidRefreshTokenError):
            service.refresh(login.refresh_token)

    def test_refresh_after_logout_fails(self, service):
        member = MemberFactory()
        login = service.login(LoginIn(email=member.email, password=DEFAULT_PASSWORD))

        assert service.logout(login.refresh_token) is True

        with pytest.raises(InvalidRefreshTokenError):
            service.refresh(login.refresh_token)

    def test_logout_is_idempotent(self, service):
        member = MemberFactory()
        login = service.login(LoginIn(email=member.email, password=DEFAULT_PASSWORD))

        assert service.logout(login.refresh_token) is True
        assert service.logout(login.refresh_token) is False
        assert service.logout("never-issued") is False

    def test_refresh_rejects_access_token(self, service):
        member = MemberFactory()
        login = service.login(LoginIn(email=member.email, password=DEFAULT_PASSWORD))

        with pytest.raises(InvalidRefreshTokenError):
            service.refresh(login.access_token)

    def test_refresh_rejects_garbage(self, service):
        with pytest.raises(InvalidRefreshTokenError):
            service.refresh("garbage")

    def test_refresh_rejects_unstored_token(self, service, token_manager):
        """Given a well-signed refresh token with no stored record, refresh fails."""
        member = MemberFactory()
        orphan = token_manager.issue_refresh(member.id)

        with pytest.raises(InvalidRefreshTokenError):
            service.refresh(orphan.token)

    def test_refresh_rejects_record_expired_by_clock(self):
        """Given a stored record past its expiry, refresh fails even if the JWT verifies."""
        issuer = IdentityService()
        member = MemberFactory()
        login = issuer.login(LoginIn(email=member.email, password=DEFAULT_PASSWORD))

        later = IdentityService(clock=lambda: utcnow() + timedelta(days=8))

        with pytest.raises(InvalidRefreshTokenError):
            later.refresh(login.refresh_token)

    def test_refresh_for_deleted_member(self, service, session):
        """Given a live refresh token whose member row is gone, refresh reports it missing."""
        member = MemberFactory()
        member_id = member.id
        login = service.login(LoginIn(email=member.email, password=DEFAULT_PASSWORD))

        session.execute(delete(Member).where(Member.id == member_id))
        session.commit()

        with pytest.raises(UserNotFoundError) as excinfo:
            service.refresh(login.refresh_token)
        assert str(member_id) in str(excinfo.value)

    def test_log_records_carry_service_context(self, caplog):
        actor_id = uuid4()
        service = IdentityService(ctx=ServiceContext(actor_id=actor_id, request_id="req-42"))
        caplog.set_level(logging.INFO, logger="taskboard.services.identity.service")

        assert service.logout("never-issued") is False

        record = next(r for r in caplog.records if r.getMessage() == "Refresh token revoked")
        assert record.request_id == "req-42"
        assert record.actor_id == actor_id
        assert record.count == 0

    def test_logout_all_revokes_every_session(self, service, tokens_repo):
        member = MemberFactory()
        first = service.login(LoginIn(email=member.email, password=DEFAULT_PASSWORD))
        second = service.login(LoginIn(email=member.email, password=DEFAULT_PASSWORD))

        revoked = service.logout_all(member.id)

        assert revoked == 2
        assert tokens_repo.count_active_for_member(member.id, now=utcnow()) == 0
        for token in (first.refresh_token, second.refresh_token):
            with pytest.raises(InvalidRefreshTokenError):
                service.refresh(token)

    def test_purge_removes_expired_and_old_revoked_tokens(self, service, session):
        now = utcnow()
        member = MemberFactory()
        RefreshTokenFactory(member_id=member.id, expires_at=now - timedelta(days=1))
        RefreshTokenFactory(
            member_id=member.id,
            revoked=True,
            created_at=now - timedelta(days=45),
            expires_at=now + timedelta(days=1),
        )
        RefreshTokenFactory(member_id=member.id, revoked=True, created_at=now)
        RefreshTokenFactory(member_id=member.id)

        removed = service.purge_expired_tokens(now=now, retention=timedelta(days=30))

        assert removed == 2
        assert session.query(RefreshToken).filter_by(member_id=member.id).count() == 2
        assert service.purge_expired_tokens(now=now, retention=timedelta(days=30)) == 0

    # --------------------------------------------------------------------- #
    # Profile
    # --------------------------------------------------------------------- #

    def test_get_profile_unknown_member(self, service):
        with pytest.raises(UserNotFoundError):
            service.get_profile(uuid4())

    def test_update_profile_changes_only_given_fields(self, service):
        member = MemberFactory(full_name="Old Name")

        updated = service.update_profile(member.id, ProfileUpdateIn(full_name=None))

        assert updated.full_name is None
        assert updated.email == member.email
        assert updated.username == member.username

    def test_update_profile_rejects_taken_email(self, service):
        MemberFactory(email="taken@example.com")
        member = MemberFactory()

        with pytest.raises(EmailAlreadyTakenError):
            service.update_profile(member.id, ProfileUpdateIn(email="taken@example.com"))

    def test_update_profile_rejects_taken_username(self, service):
        MemberFactory(username="grace")
        member = MemberFactory()

        with pytest.raises(UsernameAlreadyTakenError):
            service.update_profile(member.id, ProfileUpdateIn(username="grace"))

    def test_update_profile_keeping_own_email_is_allowed(self, service):
        member = MemberFactory(email="same@example.com")

        updated = service.update_profile(member.id, ProfileUpdateIn(email="SAME@example.com"))

        assert updated.email == "same@example.com"

    def test_update_profile_password_change(self, service):
        """Given a new password, the next login must use it."""
        member = MemberFactory()

        service.update_profile(member.id, ProfileUpdateIn(password="brand-new-pass"))

        with pytest.raises(InvalidCredentialsError):
            service.login(LoginIn(email=member.email, password=DEFAULT_PASSWORD))
        assert service.login(LoginIn(email=member.email, password="brand-new-pass")).member.id == (
            member.id
        )

    def test_update_profile_ignores_empty_password(self, service):
        member = MemberFactory()

        service.update_profile(member.id, ProfileUpdateIn(password=""))

        assert service.login(LoginIn(email=member.email, password=DEFAULT_PASSWORD))

    def test_update_profile_rejects_short_password(self, service):
        member = MemberFactory()

        with pytest.raises(PasswordTooShortError):
            service.update_profile(member.id, ProfileUpdateIn(password="short"))

    # --------------------------------------------------------------------- #
    # Bearer authentication
    # --------------------------------------------------------------------- #

    def test_authenticate_returns_member_identity(self, service, token_manager):
        member = MemberFactory()
        token = token_manager.issue_access(member).token

        actor = service.authenticate(token)

        assert actor.id == member.id
        assert actor.username == member.username

    def test_authenticate_rejects_token_of_missing_member(self, service, token_manager):
        ghost = SimpleNamespace(id=uuid4(), email="ghost@example.com", username="ghost")
        token = token_manager.issue_access(ghost).token

        with pytest.raises(InvalidTokenError):
            service.authenticate(token)
