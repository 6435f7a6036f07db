import pytest

from productos_api.repositories.interfaces import CredentialLookup
from productos_api.repositories.user_repository import UserRepository, normalize_email
from productos_api.tests.test_fixtures.repository_fixtures import ADMIN_EMAIL, ADMIN_PASSWORD


def test_normalize_email():
    assert normalize_email("  Admin@Example.COM ") == "admin@example.com"


def test_user_repository_offers_credential_lookup(user_repository):
    assert isinstance(user_repository, CredentialLookup)


class TestCreateUser:

    async def test_stores_hash_and_normalized_email(self, user_repository, db_session):
        """
        Behavior:
            - The email is stored lowercased and the password only as a bcrypt hash.

        Importance:
            - Plain passwords must never be persisted.
        """
        user = await user_repository.create_user(" New.User@Example.com", "s3cret-pass")
        await db_session.commit()

        assert user.id is not None
        assert user.email == "new.user@example.com"
        assert user.hashed_password != "s3cret-pass"
        assert user.hashed_password.startswith("$2")
        assert user.is_active is True

    async def test_over_long_password_is_rejected(self, user_repository):
        with pytest.raises(ValueError):
            await user_repository.create_user("long@example.com", "x" * 73)


class TestLookup:

    async def test_get_by_email_is_case_insensitive(self, user_repository, admin_user):
        found = await user_repository.get_by_email(ADMIN_EMAIL.upper())

        assert found is not None
        assert found.id == admin_user.id

    async def test_get_by_email_unknown(self, user_repository, admin_user):
        assert await user_repository.get_by_email("nobody@example.com") is None

    async def test_credentials_match(self, user_repository, admin_user):
        found = await user_repository.get_by_credentials(ADMIN_EMAIL, ADMIN_PASSWORD)

        assert found is not None
        assert found.id == admin_user.id

    @pytest.mark.parametrize(
        "email, password",
        [
            (ADMIN_EMAIL, "wrong password"),
            ("nobody@example.com", ADMIN_PASSWORD),
            (ADMIN_EMAIL, ""),
        ],
    )
    async def test_credentials_mismatch_returns_none(self, user_repository, admin_user, email, password):
        assert await user_repository.get_by_credentials(email, password) is None

    async def test_inactive_user_cannot_authenticate(self, session_factory, user_repository):
        """
        Behavior:
            - A deactivated account is indistinguishable from an unknown one.
        """
        async with session_factory() as session:
            await UserRepository(session).create_user("gone@example.com", "pw-12345", is_active=False)
            await session.commit()

        assert await user_repository.get_by_credentials("gone@example.com", "pw-12345") is None
