import logging
from typing import Callable

from django.conf import settings
from django.http import HttpRequest, HttpResponse, HttpResponseRedirect

from accounts import access_policy
from accounts.models import Profile
from accounts.services.identity import get_identity_provider

logger = logging.getLogger('accounts.access')


def _resolve_role(user_id):
    return Profile.objects.filter(pk=user_id).values_list('role', flat=True).first()


class RolePolicyMiddleware:
    """Apply the role route policy to the /student, /hod and /guard namespaces.

    Must run after AuthenticationMiddleware.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]):
        self.get_response = get_response

    def __call__(self, request: HttpRequest):
        session = get_identity_provider().current_session(request)
        user_id = session.user_id if session is not None else None

        decision = access_policy.evaluate(
            request.path,
            user_id,
            _resolve_role,
            login_url=getattr(settings, 'LOGIN_URL', access_policy.DEFAULT_LOGIN_URL),
            landing_routes=getattr(settings, 'ROLE_LANDING_ROUTES', None),
        )
        if not decision.allowed:
            logger.info(
                'ROUTE_REDIRECT path=%s user=%s to=%s',
                request.path,
                user_id if user_id is not None else 'anonymous',
                decision.redirect_to,
            )
            return HttpResponseRedirect(decision.redirect_to)

        return self.get_response(request)
