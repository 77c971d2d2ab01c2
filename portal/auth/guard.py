"""
Route guard: decides, before any handler runs, whether a request may reach a
protected page or API.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import quote

from fastapi import Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from portal.auth.session import AUTH_COOKIE_NAME, is_authenticated

PROTECTED_PREFIXES = ("/pricing", "/admin", "/api/products", "/api/export")
LOGIN_PATH = "/login"


class GuardAction(str, Enum):
    ALLOW = "allow"
    REDIRECT = "redirect"
    REJECT = "reject"


@dataclass(frozen=True)
class GuardDecision:
    action: GuardAction
    location: Optional[str] = None


def _matches_prefix(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


def is_protected_path(path: str) -> bool:
    return any(_matches_prefix(path, prefix) for prefix in PROTECTED_PREFIXES)


def is_api_path(path: str) -> bool:
    return path.startswith("/api/")


def login_redirect_location(path: str) -> str:
    return f"{LOGIN_PATH}?next={quote(path, safe='/')}"


def decide_route(path: str, cookie_value: Optional[str]) -> GuardDecision:
    """
    Decide what to do with a request for ``path`` carrying ``cookie_value``.

    Unprotected paths and authenticated sessions pass through. Anonymous API
    calls are rejected with 401; anonymous page requests are sent to the login
    page with the original path as the return target.
    """
    if not is_protected_path(path) or is_authenticated(cookie_value):
        return GuardDecision(GuardAction.ALLOW)

    if is_api_path(path):
        return GuardDecision(GuardAction.REJECT)

    return GuardDecision(GuardAction.REDIRECT, location=login_redirect_location(path))


async def route_guard(request: Request, call_next):
    """HTTP middleware applying ``decide_route`` to every request."""
    decision = decide_route(request.url.path, request.cookies.get(AUTH_COOKIE_NAME))

    if decision.action is GuardAction.REJECT:
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"message": "Unauthorized"})

    if decision.action is GuardAction.REDIRECT:
        return RedirectResponse(url=decision.location, status_code=status.HTTP_307_TEMPORARY_REDIRECT)

    return await call_next(request)
