"""Identity provider adapter.

Account creation and session lookup go through this module so the rest of
the code only sees `create_account(...)` and `current_session(...)`.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction

from accounts.exceptions import PerItemProvisioningError
from accounts.models import Department, Profile, Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    user_id: int


@dataclass(frozen=True)
class AccountMetadata:
    name: str
    roll: str
    department: str
    role: str = Role.STUDENT
    year: Optional[int] = 1


class DjangoIdentityProvider:
    """Identity provider backed by the Django user table and Profile."""

    def current_session(self, request) -> Optional[Session]:
        user = getattr(request, 'user', None)
        if user is None or not user.is_authenticated:
            return None
        return Session(user_id=user.pk)

    def create_account(self, email: str, password: str, metadata: AccountMetadata, email_confirm: bool = True):
        """Create a login account and its profile.

        Raises PerItemProvisioningError with a user-facing message on any
        validation or uniqueness failure. Nothing is persisted in that case.
        """
        email = (email or '').strip()
        try:
            validate_email(email)
        except ValidationError as exc:
            raise PerItemProvisioningError(email, ' '.join(exc.messages)) from exc

        if not password:
            raise PerItemProvisioningError(email, 'Password is required.')

        if metadata.department not in Department.values:
            raise PerItemProvisioningError(email, f'Unknown department "{metadata.department}".')

        if metadata.role not in Role.values:
            raise PerItemProvisioningError(email, f'Unknown role "{metadata.role}".')

        User = get_user_model()
        if User.objects.filter(email__iexact=email).exists() or User.objects.filter(username__iexact=email).exists():
            raise PerItemProvisioningError(email, 'A user with this email address has already been registered.')

        try:
            with transaction.atomic():
                user = User(username=email, email=email, is_active=bool(email_confirm))
                user.set_password(password)
                user.save()
                Profile.objects.create(
                    user=user,
                    name=metadata.name,
                    roll=metadata.roll,
                    department=metadata.department,
                    role=metadata.role,
                    year=str(metadata.year) if metadata.year is not None else None,
                )
        except IntegrityError as exc:
            # Backends word constraint errors differently; ask the table instead.
            if metadata.roll and Profile.objects.filter(department=metadata.department, roll=metadata.roll).exists():
                msg = f'Roll "{metadata.roll}" already exists in {metadata.department}.'
            else:
                msg = str(exc)
            raise PerItemProvisioningError(email, msg) from exc

        logger.debug('account created user_id=%s email=%s role=%s', user.pk, email, metadata.role)
        return user


_default_provider = DjangoIdentityProvider()


def get_identity_provider() -> DjangoIdentityProvider:
    return _default_provider
