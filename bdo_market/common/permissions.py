# bdo_market/common/permissions.py
from rest_framework.permissions import BasePermission


class HasRole(BasePermission):
    """Authenticated user whose role is one of `allowed_roles`."""
    allowed_roles = ()
    message = "Access denied"

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.role in self.allowed_roles)


class IsSupplier(HasRole):
    allowed_roles = ("SUPPLIER",)
    message = "Supplier access required"


class IsAdminRole(HasRole):
    allowed_roles = ("ADMIN",)


class IsApprovedSupplier(IsSupplier):
    """
    Supplier with an APPROVED profile. Needed for every catalog mutation.
    The profile is attached to the request as `supplier_profile`.
    """
    message = "Supplier not approved"

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            self.message = IsSupplier.message
            return False
        profile = getattr(request.user, "supplier_profile", None)
        if profile is None or not profile.is_approved:
            self.message = "Supplier not approved"
            return False
        request.supplier_profile = profile
        return True
