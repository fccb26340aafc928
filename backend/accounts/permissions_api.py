from rest_framework import permissions

from accounts.models import Profile, Role


class HasProfileRole(permissions.BasePermission):
    """Allow only callers whose Profile.role matches `required_role`.

    Views may override the role with a `required_role` attribute.
    """

    required_role: str = ''

    def has_permission(self, request, view):
        user = getattr(request, 'user', None)
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, 'required_role', None) or self.required_role
        if not required:
            return True

        role = Profile.objects.filter(pk=user.pk).values_list('role', flat=True).first()
        return role == required


class IsStudent(HasProfileRole):
    required_role = Role.STUDENT


class IsHOD(HasProfileRole):
    required_role = Role.HOD


class IsGuard(HasProfileRole):
    required_role = Role.GUARD
