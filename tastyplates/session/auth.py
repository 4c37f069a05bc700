"""Signed-in user and the session-wide authentication context."""

import logging
from dataclasses import dataclass
from typing import Callable, MutableMapping, Optional

import jwt

logger = logging.getLogger(__name__)

HOME = "/"


@dataclass
class CurrentUser:
    """The viewer acting on the page."""

    id: str
    access_token: str
    name: Optional[str] = None
    image: Optional[str] = None

    @classmethod
    def from_token(cls, token: str) -> "CurrentUser":
        """Build a user from the claims of an access token.

        The signature is not checked here; the platform verifies it on every
        request and answers with an auth-invalid code when it is bad.

        Raises:
            jwt.PyJWTError: If the token is malformed
            ValueError: If the token has no subject
        """
        claims = jwt.decode(token, options={"verify_signature": False})
        subject = claims.get("sub")
        if not subject:
            raise ValueError("Access token has no subject claim")
        return cls(
            id=str(subject),
            access_token=token,
            name=claims.get("name"),
            image=claims.get("picture"),
        )


class AuthContext:
    """Holds the current user for one page session.

    ``storage`` stands in for the cookie jar and local storage a forced
    sign-out has to wipe.
    """

    def __init__(
        self,
        user: Optional[CurrentUser] = None,
        on_sign_in_required: Optional[Callable[[], None]] = None,
        on_redirect: Optional[Callable[[str], None]] = None,
        storage: Optional[MutableMapping[str, str]] = None,
    ):
        self._user = user
        self.on_sign_in_required = on_sign_in_required
        self.on_redirect = on_redirect
        self.storage = storage if storage is not None else {}

    @property
    def current_user(self) -> Optional[CurrentUser]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def sign_in(self, user: CurrentUser) -> None:
        self._user = user

    def sign_out(self) -> None:
        self._user = None

    def require_user(self) -> Optional[CurrentUser]:
        """Return the current user, or present the sign-in prompt and return None."""
        if self._user is not None:
            return self._user
        self.prompt_sign_in()
        return None

    def prompt_sign_in(self) -> None:
        if self.on_sign_in_required is not None:
            self.on_sign_in_required()

    def force_sign_out(self, code: str) -> None:
        """Global sign-out after the server declared the session token invalid."""
        logger.warning(f"Forcing sign-out: {code}")
        self.storage.clear()
        self._user = None
        if self.on_redirect is not None:
            self.on_redirect(HOME)
