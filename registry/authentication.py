"""
Token authentication for the registry API.

Kept apart from the view modules so that REST framework can import the
authentication classes during start-up without circular imports.
Clients may send either ``Authorization: Token <key>`` or a simplejwt
``Authorization: Bearer <access>`` header; both are validated on the
server for every request.
"""
from __future__ import annotations

from rest_framework import authentication
from rest_framework.throttling import AnonRateThrottle


class TokenAuthentication(authentication.TokenAuthentication):
    """Token authentication using the ``Token`` keyword."""

    keyword = 'Token'


class LoginRateThrottle(AnonRateThrottle):
    """Throttle credential checks per client address."""

    scope = 'login'
