from fastapi import APIRouter, Depends, Response

from productos_api.core.dependencies import get_auth_service
from productos_api.schemas.auth import LoginRequest
from productos_api.services.auth_service import AuthService
from .responses import envelope_response

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login")
async def login(
    credentials: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> Response:
    return envelope_response(await service.login(credentials.email, credentials.password))
