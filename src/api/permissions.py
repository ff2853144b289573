"""Custom DRF permissions shared by the API endpoints."""
from rest_framework.permissions import BasePermission


class IsAdminOrManager(BasePermission):
    """Superusers and ADMIN/MANAGER roles: may review other sellers."""

    message = "Acesso restrito a administradores e gestores."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return bool(getattr(user, "can_review_others", False))
