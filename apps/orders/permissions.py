from rest_framework import permissions


class IsOrderParty(permissions.BasePermission):
    """
    Permission: The buyer, the owner of the ordered field or a platform admin.
    """
    message = 'Access denied'

    def has_object_permission(self, request, view, obj):
        user = request.user
        return user.is_platform_admin or obj.buyer_id == user.id or obj.field.owner_id == user.id
