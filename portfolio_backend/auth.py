"""
HTTP basic authentication for the write endpoints.
"""

from __future__ import annotations

import base64
import binascii
import logging
import secrets
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBasicCredentials
from fastapi.security.utils import get_authorization_scheme_param

from portfolio_backend.config import Settings, get_settings
from portfolio_backend.errors import AuthError

logger = logging.getLogger(__name__)


def parse_basic_credentials(
    authorization: Optional[str],
) -> Optional[HTTPBasicCredentials]:
    """
    Decode a ``Basic`` Authorization header as UTF-8.

    Returns None when the header is absent, uses another scheme, or cannot
    be decoded into a ``user:password`` pair.
    """
    scheme, param = get_authorization_scheme_param(authorization)
    if not authorization or scheme.lower() != "basic":
        return None
    try:
        decoded = base64.b64decode(param, validate=True).decode("utf-8")
    except (ValueError, UnicodeDecodeError, binascii.Error):
        return None
    username, separator, password = decoded.partition(":")
    if not separator:
        return None
    return HTTPBasicCredentials(username=username, password=password)


def _matches(given: str, expected: Optional[str]) -> bool:
    if not expected:
        return False
    return secrets.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


def authenticate(
    credentials: Optional[HTTPBasicCredentials], settings: Settings
) -> None:
    """
    Raise AuthError unless the credentials match the configured pair.
    """
    if credentials is None or not credentials.username or not credentials.password:
        raise AuthError("Authentication required")
    user_ok = _matches(credentials.username, settings.basic_auth_user)
    password_ok = _matches(credentials.password, settings.basic_auth_password)
    if not (user_ok and password_ok):
        logger.warning("Rejected credentials for user %r", credentials.username)
        raise AuthError("Invalid credentials")


def require_basic_auth(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    credentials = parse_basic_credentials(request.headers.get("Authorization"))
    authenticate(credentials, settings)
