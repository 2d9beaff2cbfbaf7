# accounting/api/permissions.py

from rest_framework.permissions import BasePermission


class HasActionPermission(BasePermission):
    """
    Django model permission per viewset action.

    Views declare:
        required_permissions = {"list": "accounting.view_account", ...}

    Actions missing from the map are allowed for any authenticated user.
    """

    message = "You do not have permission to perform this action."

    def has_permission(self, request, view):
        perms = getattr(view, "required_permissions", {}) or {}
        perm = perms.get(getattr(view, "action", None))
        if not perm:
            return True
        return bool(request.user and request.user.has_perm(perm))
