from dataclasses import dataclass
from typing import Optional

from accounts.models import Profile


@dataclass(frozen=True)
class Actor:
    """Caller identity threaded explicitly into services.

    Built once per request from the authenticated user; services never look
    up "the current user" on their own.
    """
    profile_id: int
    role: str
    department: str
    name: str = ''

    @classmethod
    def from_profile(cls, profile: Profile) -> 'Actor':
        return cls(
            profile_id=profile.pk,
            role=profile.role,
            department=profile.department,
            name=profile.name,
        )


def actor_for_user(user) -> Optional[Actor]:
    """Return the Actor for an authenticated user, or None when no profile exists."""
    if user is None or not getattr(user, 'is_authenticated', False):
        return None
    profile = Profile.objects.filter(pk=user.pk).first()
    if profile is None:
        return None
    return Actor.from_profile(profile)
