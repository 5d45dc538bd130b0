# jewelryoclock/core/identity.py
"""
Portão de identidade: converte o Principal do provedor de autenticação em um
Usuário da aplicação (com papel) e controla quem pode fazer o quê.
"""
import logging
from typing import Optional

from jewelryoclock.core.constants import DEFAULT_ADMIN_EMAIL
from jewelryoclock.core.entities import AuthResult, Principal, User, UserRole
from jewelryoclock.core.exceptions import AccessDeniedError, AuthProviderError
from jewelryoclock.core.ports import IIdentityProvider

logger = logging.getLogger(__name__)

AUTH_UNAVAILABLE = "Auth service unavailable"


# ====================================================================
# CONTROLE DE ACESSO
# ====================================================================

def ensure_admin(user: Optional[User]):
    """Operações de catálogo e de status exigem o administrador."""
    if user is None or not user.is_admin:
        raise AccessDeniedError("Administrator access is required.")


def ensure_can_purchase(user: Optional[User]):
    """Carrinho e checkout: usuário autenticado e que não seja administrador."""
    if user is None:
        raise AccessDeniedError("You must be signed in to place an order.")
    if user.is_admin:
        raise AccessDeniedError("Administrators cannot make purchases.")


def _clean_provider_message(message: str) -> str:
    return message.replace('auth/', '').strip()


class IdentityGate:
    def __init__(self, provider: Optional[IIdentityProvider], admin_email: str = DEFAULT_ADMIN_EMAIL):
        self.provider = provider
        self.admin_email = admin_email

    def role_for_email(self, email: str) -> UserRole:
        if email and email.lower() == self.admin_email.lower():
            return UserRole.ADMIN
        return UserRole.CUSTOMER

    def map_principal(self, principal: Principal) -> User:
        email = principal.email or ''
        name = principal.display_name or email.split('@')[0] or 'User'
        return User(id=principal.uid, name=name, email=email, role=self.role_for_email(email))

    # --- Sessão ---

    def current_user(self) -> Optional[User]:
        if self.provider is None:
            return None
        principal = self.provider.current_principal()
        return self.map_principal(principal) if principal else None

    def login(self, email: str, password: str) -> AuthResult:
        if self.provider is None:
            return AuthResult(success=False, error=AUTH_UNAVAILABLE)
        try:
            self.provider.sign_in(email, password)
        except AuthProviderError as e:
            logger.info("Falha de login para %s: %s", email, e.code)
            return AuthResult(success=False, error=_clean_provider_message(e.message))
        return AuthResult(success=True)

    def register(self, name: str, email: str, password: str) -> AuthResult:
        if self.provider is None:
            return AuthResult(success=False, error=AUTH_UNAVAILABLE)
        try:
            self.provider.register(name, email, password)
        except AuthProviderError as e:
            logger.info("Falha de cadastro para %s: %s", email, e.code)
            return AuthResult(success=False, error=_clean_provider_message(e.message))
        return AuthResult(success=True)

    def federated_sign_in(self, domain: str = '') -> AuthResult:
        """
        Login federado via popup. Popup bloqueado cai para o fluxo de
        redirecionamento; domínio não autorizado recebe mensagem própria.
        """
        if self.provider is None:
            return AuthResult(success=False, error=AUTH_UNAVAILABLE)
        try:
            self.provider.sign_in_with_popup()
            return AuthResult(success=True)
        except AuthProviderError as e:
            error = e

        if error.code == 'unauthorized-domain':
            message = (
                f"Domain Error: The current domain ({domain}) is not authorized for federated sign-in. "
                f'Add "{domain}" to the authorized domains of the identity provider.'
            )
            logger.warning(message)
            return AuthResult(success=False, error=message)

        logger.error("Falha no login federado: %s", error.code)

        if error.code == 'popup-blocked':
            try:
                self.provider.sign_in_with_redirect()
                return AuthResult(success=True)
            except AuthProviderError as redirect_error:
                logger.error("Falha no redirecionamento: %s", redirect_error.code)
                return AuthResult(success=False, error="Unable to sign in via popup or redirect.")

        if error.code == 'popup-closed-by-user':
            return AuthResult(success=False, error="Sign in was cancelled.")

        return AuthResult(success=False, error=_clean_provider_message(error.message))

    def sign_out(self):
        if self.provider is None:
            return
        try:
            self.provider.sign_out()
        except AuthProviderError as e:
            logger.error("Erro ao encerrar a sessão: %s", e.code)
