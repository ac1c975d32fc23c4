"""
Session state for the current actor.

A session is ``UNRESOLVED`` until the stored credential has been checked,
then either ``UNAUTHENTICATED`` or ``AUTHENTICATED`` with a subject and a
role.  The credential is a DRF auth token key; over HTTP the token comes
from the ``Authorization`` header and :func:`session_for_user` builds the
session directly from ``request.user``.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from django.contrib.auth import authenticate
from rest_framework.authtoken.models import Token

from clinic.models import Role

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    UNRESOLVED = 'unresolved'
    UNAUTHENTICATED = 'unauthenticated'
    AUTHENTICATED = 'authenticated'


@dataclass(frozen=True)
class Session:
    state: SessionState
    subject: Optional[str] = None
    role: Optional[Role] = None
    user_id: Optional[int] = None

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    def as_dict(self) -> dict:
        return {
            'state': self.state.value,
            'subject': self.subject,
            'role': self.role.value if self.role else None,
            'userId': self.user_id,
        }


UNRESOLVED = Session(SessionState.UNRESOLVED)
ANONYMOUS = Session(SessionState.UNAUTHENTICATED)


def session_for_user(user) -> Session:
    """Session of an already authenticated request user (or anonymous)."""
    if user is None or not getattr(user, 'is_authenticated', False) or not user.is_active:
        return ANONYMOUS
    return Session(SessionState.AUTHENTICATED, subject=user.get_username(), role=Role(user.role), user_id=user.pk)


class SessionManager:
    """Drives one session through start, login and logout.

    ``token_key`` is the credential persisted by the client between
    visits; after a successful :meth:`login` it holds the issued key.
    """

    def __init__(self, token_key: Optional[str] = None):
        self.token_key = token_key
        self._session = UNRESOLVED

    @property
    def current(self) -> Session:
        return self._session

    def start(self) -> Session:
        """Resolve the stored credential, if any."""
        user = None
        if self.token_key:
            token = Token.objects.select_related('user').filter(key=self.token_key).first()
            user = token.user if token else None
            if user is None:
                logger.info("stored credential no longer valid, discarding it")
                self.token_key = None
        self._session = session_for_user(user)
        return self._session

    def login(self, identifier: str, secret: str, role, request=None) -> bool:
        """Authenticate ``identifier``/``secret`` for the requested ``role``.

        Succeeds only when the credentials are valid and the account's
        stored role is exactly ``role``; a user can never claim a role
        other than their own.
        """
        try:
            requested = Role(role)
        except ValueError:
            logger.info("login for %s refused: unknown role %r", identifier, role)
            self._session = ANONYMOUS
            return False
        user = authenticate(request, username=identifier, password=secret)
        if user is None:
            self._session = ANONYMOUS
            return False
        if user.role != requested:
            logger.info("login for %s refused: requested role %s, stored role %s", identifier, role, user.role)
            self._session = ANONYMOUS
            return False
        token, _ = Token.objects.get_or_create(user=user)
        self.token_key = token.key
        self._session = session_for_user(user)
        return True

    def logout(self) -> Session:
        if self.token_key:
            Token.objects.filter(key=self.token_key).delete()
        self.token_key = None
        self._session = ANONYMOUS
        return self._session
