from typing import Optional

import attrs

from src.platform.exception.exceptions import AuthenticationError


@attrs.define(frozen=True)
class CurrentUser:
    """Identity resolved from the identity provider's bearer token."""

    id: str
    email: str = ''
    credential: Optional[str] = attrs.field(default=None, repr=False)  # raw bearer token

    def validate_exists(self) -> None:
        if not self.id:
            raise AuthenticationError('User not found')

    @staticmethod
    def require(user: Optional['CurrentUser']) -> 'CurrentUser':
        if user is None:
            raise AuthenticationError('Sign in required')
        user.validate_exists()
        return user
