"""
Token authentication for the clinic API.

Clients send ``Authorization: Token <key>``; the key is the one returned
by ``POST /api/auth/login``.  Kept apart from the views so that DRF can
import it from settings without pulling view modules in.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    """DRF token authentication pinned to the ``Token`` keyword.

    Listed first in ``DEFAULT_AUTHENTICATION_CLASSES`` so that its
    ``WWW-Authenticate`` header turns gate refusals of anonymous
    requests into 401 responses.
    """

    keyword = 'Token'
