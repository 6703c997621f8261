"""
Bearer token verification against the identity provider's signing key.

The provider owns sign-in/sign-up; this service only verifies HS256 tokens
and reads the ``sub`` and ``email`` claims.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import jwt

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError
from src.service.booking.domain.entity.user_entity import CurrentUser


class JwtAuth:
    def __init__(self) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM
        self.token_expire_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES

    def create_jwt_token(self, *, user_id: str, email: str = '') -> str:
        now = datetime.now(timezone.utc)
        payload = {
            'sub': user_id,
            'email': email,
            'iat': now,
            'exp': now + timedelta(minutes=self.token_expire_minutes),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError as e:
            raise AuthenticationError('Invalid token') from e

    def get_current_user_from_jwt(self, token: Optional[str]) -> CurrentUser:
        if not token:
            raise AuthenticationError('Not authenticated')

        payload = self.decode_jwt_token(token)
        user_id = payload.get('sub')
        if not user_id:
            raise AuthenticationError('Invalid token')

        # Rebuild identity from the token payload (no DB query)
        return CurrentUser(id=str(user_id), email=payload.get('email') or '', credential=token)
