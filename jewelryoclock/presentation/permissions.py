from rest_framework.permissions import BasePermission

from jewelryoclock.core.dependency_injection import get_identity_gate


def store_user(request):
    """Usuário da loja (com papel) resolvido pelo portão de identidade."""
    return get_identity_gate(request).current_user()


class IsStoreAdmin(BasePermission):
    message = "Administrator access is required."

    def has_permission(self, request, view):
        user = store_user(request)
        return user is not None and user.is_admin


class IsShopper(BasePermission):
    """Usuário autenticado que não é o administrador."""
    message = "Administrators cannot make purchases."

    def has_permission(self, request, view):
        user = store_user(request)
        return user is not None and not user.is_admin
