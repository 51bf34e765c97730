"""
Session gate middleware.

Every request passes through here before routing:
- no valid session and not on a public path -> redirect to /login
- valid session on /login -> redirect to /
"""
import logging

from fastapi import Request
from fastapi.responses import RedirectResponse

from alertnav.utils.metrics import record_session_redirect
from alertnav.utils.session_token import get_session_email

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"
HOME_PATH = "/"
AUTH_API_PREFIX = "/api/auth"
PUBLIC_PATHS = {"/health", "/metrics"}
PUBLIC_PREFIXES = ("/static/",)


def is_public_path(path: str) -> bool:
    """Paths reachable without a session"""
    if path == LOGIN_PATH or path in PUBLIC_PATHS:
        return True
    if path == AUTH_API_PREFIX or path.startswith(AUTH_API_PREFIX + "/"):
        return True
    if path.startswith(PUBLIC_PREFIXES):
        return True
    # Files such as /favicon.ico
    return "." in path.rsplit("/", 1)[-1]


async def session_gate(request: Request, call_next):
    """Redirect based on the presence of a valid session cookie"""
    path = request.url.path
    email = get_session_email(request)

    if email is None and not is_public_path(path):
        logger.debug(f"No session for {path}, redirecting to {LOGIN_PATH}")
        record_session_redirect("login")
        return RedirectResponse(url=LOGIN_PATH)

    if email is not None and path == LOGIN_PATH:
        record_session_redirect("home")
        return RedirectResponse(url=HOME_PATH)

    return await call_next(request)
