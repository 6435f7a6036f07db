import pytest

from productos_api.core.security import TokenIssuer
from productos_api.services.auth_service import INVALID_CREDENTIALS, AuthService
from productos_api.tests.test_fixtures.repository_fixtures import ADMIN_EMAIL, ADMIN_PASSWORD


@pytest.fixture
def token_issuer(test_settings) -> TokenIssuer:
    return TokenIssuer.from_settings(test_settings)


@pytest.fixture
def auth_service(uow, token_issuer) -> AuthService:
    return AuthService(uow, token_issuer)


class TestLogin:

    async def test_valid_credentials_issue_a_token(self, auth_service, token_issuer, admin_user):
        result = await auth_service.login(ADMIN_EMAIL, ADMIN_PASSWORD)

        assert result.status_code == 200
        assert result.data.user.id == admin_user.id
        assert result.data.user.email == ADMIN_EMAIL

        claims = token_issuer.decode(result.data.token)
        assert claims["sub"] == str(admin_user.id)
        assert claims["email"] == ADMIN_EMAIL

    @pytest.mark.parametrize(
        "email, password",
        [(ADMIN_EMAIL, "nope"), ("stranger@example.com", ADMIN_PASSWORD)],
    )
    async def test_bad_credentials_are_401(self, auth_service, admin_user, email, password):
        """
        Behavior:
            - Wrong password and unknown email produce the same 401 failure.

        Importance:
            - Distinct messages would let callers enumerate accounts.
        """
        result = await auth_service.login(email, password)

        assert result.status_code == 401
        assert result.error == INVALID_CREDENTIALS
        assert result.data is None


class TestEnsureUser:

    async def test_creates_missing_account(self, auth_service, uow):
        result = await auth_service.ensure_user("Seed@Example.com", "seed-password")

        assert result.status_code == 201
        assert result.data.email == "seed@example.com"
        assert await uow.users.get_by_credentials("seed@example.com", "seed-password") is not None

    async def test_existing_account_is_left_untouched(self, auth_service, uow, admin_user):
        result = await auth_service.ensure_user(ADMIN_EMAIL, "a different password")

        assert result.status_code == 200
        assert result.data.id == admin_user.id
        assert await uow.users.get_by_credentials(ADMIN_EMAIL, ADMIN_PASSWORD) is not None
        assert await uow.users.count() == 1
