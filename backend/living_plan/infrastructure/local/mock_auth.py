"""
Development auth provider.

Plan data is scoped by user ID only, so locally the bearer token simply names
the user whose goals are being edited.
"""

from living_plan.core.exceptions import AuthenticationError
from living_plan.interfaces.auth_provider import IAuthProvider, User

DEV_USER = User(id="dev_user", email="dev@example.com", display_name="Developer")


class MockAuthProvider(IAuthProvider):
    """Accepts any non-blank token as the user ID."""

    def __init__(self, enabled: bool = False):
        self._enabled = enabled

    async def verify_token(self, token: str) -> User:
        user_id = token.strip()
        if not user_id:
            raise AuthenticationError("Empty bearer token")
        return User(id=user_id, display_name=user_id)

    def is_enabled(self) -> bool:
        return self._enabled
