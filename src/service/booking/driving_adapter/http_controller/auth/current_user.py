from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.platform.config.di import Container
from src.service.booking.domain.entity.user_entity import CurrentUser
from src.service.booking.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


bearer_scheme = HTTPBearer(auto_error=False)


@inject
async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> Optional[CurrentUser]:
    """Anonymous browsing is allowed; a present but invalid token is still rejected"""
    if credentials is None:
        return None
    return jwt_auth.get_current_user_from_jwt(credentials.credentials)


async def get_current_user(
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
) -> CurrentUser:
    return CurrentUser.require(current_user)
