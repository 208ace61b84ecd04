from rest_framework import permissions


class IsRentalParty(permissions.BasePermission):
    """
    Permission: Rentals can be read by anyone authenticated and changed by
    the renter, the owner of the rented field or a platform admin.
    """
    message = 'You do not have permission to modify this rental'

    def has_object_permission(self, request, view, obj):
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        return user.is_platform_admin or obj.renter_id == user.id or obj.field.owner_id == user.id
