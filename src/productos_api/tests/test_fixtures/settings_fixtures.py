"""Settings used by the test suite."""

from productos_api.config.settings import Settings

IN_MEMORY_SQLITE = "sqlite+aiosqlite://"
TEST_JWT_SECRET = "test-signing-secret-0123456789abcdef"


def make_test_settings(**overrides) -> Settings:
    """
    Settings for tests, independent of the developer's environment and .env file.
    """
    values = dict(
        ENV="testing",
        TESTING=True,
        SQLITE_URL=IN_MEMORY_SQLITE,
        JWT_SECRET_KEY=TEST_JWT_SECRET,
        JWT_ISSUER="productos-api-tests",
        JWT_AUDIENCE="productos-admin-tests",
        JWT_EXPIRE_MINUTES=5,
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="text",
        LOG_TO_STDOUT=True,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)
