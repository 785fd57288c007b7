from rest_framework import permissions


def user_role(user):
    if not user or not getattr(user, "is_authenticated", False):
        return None
    return getattr(user, "role", None)


class IsOwnerRole(permissions.BasePermission):
    """
    Permission class that only admits authenticated property owners.
    Object scoping (which properties/bills) is done by the views' querysets.
    """
    message = "Only owners can perform this action."

    def has_permission(self, request, view):
        return user_role(request.user) == "owner"


class IsTenantRole(permissions.BasePermission):
    """
    Permission class that only admits authenticated tenants.
    """
    message = "Only tenants can perform this action."

    def has_permission(self, request, view):
        return user_role(request.user) == "tenant"
