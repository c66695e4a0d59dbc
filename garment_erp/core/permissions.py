from rest_framework.permissions import BasePermission

from .models import Role

MANAGEMENT_ROLES = (Role.ADMIN, Role.MANAGER)
FLOOR_ROLES = (Role.ADMIN, Role.MANAGER, Role.FLOOR_MANAGER)
PURCHASING_ROLES = (Role.ADMIN, Role.MANAGER, Role.ACCOUNTANT)


def role_required(*roles, methods=None):
    """
    Build a permission class allowing only users whose role is in ``roles``.

    With ``methods`` the check applies to those HTTP methods only; any other
    method just needs an authenticated user.
    """
    allowed = frozenset(roles)
    restricted = frozenset(m.upper() for m in methods) if methods else None

    class RolePermission(BasePermission):
        message = 'You do not have permission to perform this action.'

        def has_permission(self, request, view):
            user = request.user
            if not (user and user.is_authenticated):
                return False
            if restricted is not None and request.method not in restricted:
                return True
            return user.role in allowed

    RolePermission.__name__ = f"RolePermission_{'_'.join(sorted(allowed))}"
    return RolePermission


def is_admin_user(user):
    return bool(user and user.is_authenticated and user.role == Role.ADMIN)
