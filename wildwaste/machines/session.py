"""Session state machine: login, registration and logout.

Anonymous -> Authenticating -> Authenticated | Registered | AuthError.
consume_event() returns Authenticated, Registered and AuthError to Anonymous.
Callers read the user id from the Authenticated snapshot before consuming it.
logout() always returns to Anonymous.
"""

import sys

from wildwaste.errors import ApiError, parse_error
from wildwaste.machines.base import StateMachine
from wildwaste.state import (
    Anonymous,
    Authenticated,
    Authenticating,
    AuthError,
    Registered,
    SessionState,
)
from wildwaste.utils.validator import validate_credentials

UNKNOWN_ERROR = "An unknown error occurred"
MISSING_USER_ID = "Login response did not include a user id"


def _require_user_id(body: dict) -> int:
    """Downstream screens are keyed by user id; a login without one is unusable."""
    user_id = body.get("user_id")
    if user_id is None or isinstance(user_id, bool) or not isinstance(user_id, int):
        raise parse_error(MISSING_USER_ID)
    return user_id


class SessionMachine(StateMachine[SessionState]):
    network_message = "Could not connect to server"

    def __init__(self, api):
        super().__init__(Anonymous())
        self._api = api

    @property
    def user_id(self) -> int | None:
        state = self.state
        return state.user_id if isinstance(state, Authenticated) else None

    async def login(self, username: str, password: str) -> None:
        validate_credentials(username, password)
        if isinstance(self.state, Authenticating):
            print("[WildWaste] Ignoring login: authentication already in progress.", file=sys.stderr)
            return

        self._set(Authenticating())
        try:
            body = await self._send(self._api.login, username, password, fallback=UNKNOWN_ERROR)
            user_id = _require_user_id(body)
        except ApiError as exc:
            self._set(AuthError(exc.info))
            return

        self._set(Authenticated(user_id=user_id, username=body.get("username") or username))

    async def register(self, username: str, password: str, confirm_password: str | None = None) -> None:
        """Create an account. Does not log in; resolves to Registered."""
        validate_credentials(username, password, confirm_password)
        if isinstance(self.state, Authenticating):
            print("[WildWaste] Ignoring register: authentication already in progress.", file=sys.stderr)
            return

        self._set(Authenticating())
        try:
            await self._send(self._api.register, username, password, fallback=UNKNOWN_ERROR)
        except ApiError as exc:
            self._set(AuthError(exc.info))
            return

        self._set(Registered(username=username))

    def logout(self) -> None:
        """Drop the session locally. No network call."""
        self._set(Anonymous())

    def consume_event(self) -> None:
        state = self.state
        if isinstance(state, (Authenticated, AuthError, Registered)):
            self._set(Anonymous())
