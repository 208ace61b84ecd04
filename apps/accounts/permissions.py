from rest_framework import permissions


class IsPlatformAdmin(permissions.BasePermission):
    """
    Permission: User must be a platform admin (admin user type or staff).
    """
    message = 'Admin access required'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_platform_admin)


class IsFarmer(permissions.BasePermission):
    """
    Permission: User must be a farmer.
    """
    message = 'Only farmers can perform this action'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_farmer)


class IsOwnerOrPlatformAdmin(permissions.BasePermission):
    """
    Permission: Anyone authenticated can read, only the owner or a platform
    admin can modify.

    Objects expose their owner through ``owner_id``.
    """
    message = 'You do not have permission to modify this resource'

    def has_object_permission(self, request, view, obj):
        if request.method in permissions.SAFE_METHODS:
            return True
        if request.user.is_platform_admin:
            return True
        return obj.owner_id == request.user.id
