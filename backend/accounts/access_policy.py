"""Route namespace policy.

Each gated namespace belongs to exactly one role. Callers outside that role
are sent to their own landing page, anonymous callers to the login page.
"""
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from accounts.models import Role

ROUTE_POLICY = (
    ('/student', Role.STUDENT),
    ('/hod', Role.HOD),
    ('/guard', Role.GUARD),
)

DEFAULT_LOGIN_URL = '/login'

DEFAULT_LANDING_ROUTES = {
    Role.STUDENT: '/student/dashboard',
    Role.HOD: '/hod/dashboard',
    Role.GUARD: '/guard/scanner',
}


@dataclass(frozen=True)
class Decision:
    allowed: bool
    redirect_to: Optional[str] = None


ALLOW = Decision(allowed=True)


def required_role(path: str) -> Optional[str]:
    """Return the role owning `path`, or None if the path is not gated."""
    for prefix, role in ROUTE_POLICY:
        if path == prefix or path.startswith(prefix + '/'):
            return role
    return None


def evaluate(
    path: str,
    user_id,
    resolve_role: Callable[[object], Optional[str]],
    login_url: str = DEFAULT_LOGIN_URL,
    landing_routes: Optional[Mapping[str, str]] = None,
) -> Decision:
    """Decide whether a request for `path` may proceed.

    `user_id` is None when there is no valid session. `resolve_role` looks
    up the caller's role and returns None when no profile exists.
    """
    role_needed = required_role(path)
    if role_needed is None:
        return ALLOW

    if user_id is None:
        return Decision(allowed=False, redirect_to=login_url)

    role = resolve_role(user_id)
    if role is None:
        return Decision(allowed=False, redirect_to=login_url)

    if role != role_needed:
        landing = landing_routes or DEFAULT_LANDING_ROUTES
        return Decision(allowed=False, redirect_to=landing.get(role, login_url))

    return ALLOW
