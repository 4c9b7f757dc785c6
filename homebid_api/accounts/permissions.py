from rest_framework.permissions import BasePermission


class IsHomeowner(BasePermission):
    message = "Only homeowner accounts can perform this action."

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.user_type == 'homeowner')


class IsContractor(BasePermission):
    message = "Only contractor accounts can perform this action."

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.user_type == 'contractor')


class IsContractorOwner(BasePermission):
    """Write access to a contractor profile is limited to the user who owns it."""
    def has_object_permission(self, request, view, obj):
        if request.method in ('GET', 'HEAD', 'OPTIONS'):
            return True
        return obj.user_id == request.user.id
