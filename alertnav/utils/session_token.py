"""
Session cookie helpers.

The cookie carries the user's email plus an HMAC-SHA256 signature so a
client cannot claim another identity by editing it:

    base64url(email) "." hex(hmac(secret, email))
"""
import base64
import binascii
import hashlib
import hmac
from typing import Optional

from fastapi import Request, Response

from alertnav.config import Settings


def constant_time_compare(a: str, b: str) -> bool:
    """
    Constant-time string comparison to prevent timing attacks.

    Args:
        a: First string to compare
        b: Second string to compare

    Returns:
        True if strings are equal, False otherwise
    """
    if not a or not b:
        return False
    return hmac.compare_digest(a.encode('utf-8'), b.encode('utf-8'))


def _signature(email: str, secret: str) -> str:
    return hmac.new(secret.encode('utf-8'), email.encode('utf-8'), hashlib.sha256).hexdigest()


def sign_session(email: str, secret: str) -> str:
    """Build the cookie value for an email"""
    encoded = base64.urlsafe_b64encode(email.encode('utf-8')).decode('ascii').rstrip('=')
    return f"{encoded}.{_signature(email, secret)}"


def verify_session(token: Optional[str], secret: str) -> Optional[str]:
    """Return the email carried by a cookie value, or None if it is missing, malformed or forged"""
    if not token or '.' not in token:
        return None

    encoded, signature = token.rsplit('.', 1)
    try:
        padded = encoded + '=' * (-len(encoded) % 4)
        email = base64.urlsafe_b64decode(padded.encode('ascii')).decode('utf-8')
    except (binascii.Error, UnicodeError, ValueError):
        return None

    if not email or not constant_time_compare(signature, _signature(email, secret)):
        return None
    return email


def get_session_email(request: Request) -> Optional[str]:
    """Email of the signed-in user for this request, if any"""
    settings: Settings = request.app.state.settings
    token = request.cookies.get(settings.session_cookie_name)
    return verify_session(token, settings.session_secret)


def set_session_cookie(response: Response, email: str, settings: Settings):
    """Attach a fresh session cookie to a response"""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=sign_session(email, settings.session_secret),
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


def clear_session_cookie(response: Response, settings: Settings):
    """Expire the session cookie immediately"""
    response.set_cookie(
        key=settings.session_cookie_name,
        value="",
        max_age=0,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
