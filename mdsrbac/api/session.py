"""Login credentials and the authenticate handshake."""

from __future__ import annotations

import base64
import json
import logging
import threading
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from mdsrbac.api.errors import AuthenticationError, TransportError

if TYPE_CHECKING:
    from mdsrbac.api.gateway import ApiGateway

logger = logging.getLogger(__name__)

AUTHENTICATE_PATH = "authenticate"


class AuthToken(BaseModel):
    """Token returned by the authenticate endpoint."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    value: str = Field(alias="auth_token")
    kind: str = Field(alias="token_type")
    expires_in: int
    obtained_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(UTC)
        return now >= self.obtained_at + timedelta(seconds=self.expires_in)


class AuthSession:
    """Holds the Basic credential and the last token obtained with it.

    Every request is authorized with the Basic credential. The token from
    ``authenticate()`` is recorded for callers that want it but is never sent.
    ``login`` and token updates are serialized with a lock; callers sharing one
    session across threads should still log in before concurrent use starts.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._basic_credential: str | None = None
        self._token: AuthToken | None = None

    def login(self, user: str, password: str) -> None:
        raw = f"{user}:{password}".encode()
        with self._lock:
            self._basic_credential = base64.b64encode(raw).decode("ascii")

    @property
    def is_logged_in(self) -> bool:
        return self._basic_credential is not None

    @property
    def token(self) -> AuthToken | None:
        return self._token

    def authorization_header(self) -> str:
        if self._basic_credential is None:
            raise AuthenticationError("login() must be called before issuing requests")
        return f"Basic {self._basic_credential}"

    def authenticate(self, gateway: ApiGateway) -> AuthToken:
        """Run the authenticate handshake and record the returned token.

        Raises AuthenticationError on any non 200-204 status, transport failure
        or malformed body; the previously recorded token is left as it was.
        """
        try:
            body = gateway.get(AUTHENTICATE_PATH, ok=(200, 204))
        except TransportError as e:
            logger.error("MDS authentication failed: %s", e)
            raise AuthenticationError(str(e), status=e.status, body=e.body) from e

        try:
            token = AuthToken.model_validate(json.loads(body))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error("MDS authentication returned an unreadable body: %s", e)
            raise AuthenticationError("malformed authenticate response", body=body) from e

        with self._lock:
            self._token = token
        logger.debug("Authenticated, token type %s expires in %ss", token.kind, token.expires_in)
        return token
