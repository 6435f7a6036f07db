import logging

from productos_api.core.security import TokenIssuer
from productos_api.repositories.unit_of_work import UnitOfWork
from productos_api.schemas.auth import AuthResponse, UserRead
from productos_api.schemas.common import Result
from .base_service import store_faults_as_failure

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    def __init__(self, uow: UnitOfWork, token_issuer: TokenIssuer):
        self.uow = uow
        self.token_issuer = token_issuer

    @store_faults_as_failure(Result)
    async def login(self, email: str, password: str) -> Result[AuthResponse]:
        """
        Exchange credentials for a bearer token.

        Unknown email, wrong password and inactive account all produce the same
        401 failure.
        """
        user = await self.uow.users.get_by_credentials(email, password)
        if user is None:
            logger.info("service.auth.login.rejected")
            return Result.failure(INVALID_CREDENTIALS, 401)

        token = self.token_issuer.issue(user)
        logger.info("service.auth.login.success", extra={"user_id": user.id})
        return Result.success(AuthResponse(user=UserRead.model_validate(user), token=token))

    @store_faults_as_failure(Result)
    async def ensure_user(self, email: str, password: str) -> Result[UserRead]:
        """
        Create the account if no user has this email yet (200 if it already
        existed, 201 if it was created). The stored password is left untouched
        for an existing account.
        """
        existing = await self.uow.users.get_by_email(email)
        if existing is not None:
            return Result.success(UserRead.model_validate(existing))

        user = await self.uow.users.create_user(email, password)
        await self.uow.complete()
        logger.info("service.auth.user_created", extra={"user_id": user.id})
        return Result.success(UserRead.model_validate(user), 201)
