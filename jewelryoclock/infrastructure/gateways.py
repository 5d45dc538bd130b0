import logging
from typing import Iterable, Optional

import requests
from django.contrib.auth import authenticate, get_user_model, login, logout
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError

from jewelryoclock.core.entities import Principal
from jewelryoclock.core.exceptions import AuthFailureError, AuthProviderError
from jewelryoclock.core.ports import IDescriptionGenerator, IIdentityProvider

logger = logging.getLogger(__name__)


# ====================================================================
# GATEWAYS: Implementações concretas que se comunicam com serviços externos.
# ====================================================================

class GeminiDescriptionGateway(IDescriptionGenerator):
    """
    Gera descrições de produtos pela API REST do Gemini.
    Nunca levanta exceção: falhas viram mensagens fixas para o formulário do admin.
    """

    MISSING_KEY_MESSAGE = (
        "API Key missing. Unable to generate description. "
        "Please configure GEMINI_API_KEY in your environment."
    )
    ERROR_MESSAGE = "Error generating description. Please try again."
    EMPTY_MESSAGE = "Description generation failed."

    def __init__(self, api_key: Optional[str], model: str = 'gemini-2.5-flash', timeout: int = 30):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.base_url = "https://generativelanguage.googleapis.com/v1beta"

    @staticmethod
    def build_prompt(name: str, category: str, keywords: str) -> str:
        return (
            "Write a luxurious, captivating, and short product description (max 2 sentences) "
            "for a piece of jewelry.\n"
            f"Product Name: {name}\n"
            f"Category: {category}\n"
            f"Keywords/Features: {keywords}\n"
            "Tone: Elegant, Premium, Sophisticated."
        )

    def generate(self, name: str, category: str, keywords: str) -> str:
        if not self.api_key:
            logger.warning("GEMINI_API_KEY não configurada. Retornando texto padrão.")
            return self.MISSING_KEY_MESSAGE

        payload = {
            "contents": [{"parts": [{"text": self.build_prompt(name, category, keywords)}]}],
        }
        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }

        try:
            url = f"{self.base_url}/models/{self.model}:generateContent"
            response = requests.post(url, json=payload, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error("Erro na API do Gemini: %s", e)
            return self.ERROR_MESSAGE

        text = "".join(
            part.get("text", "")
            for candidate in data.get("candidates") or []
            for part in (candidate.get("content") or {}).get("parts") or []
        ).strip()
        return text or self.EMPTY_MESSAGE


# ====================================================================
# IDENTIDADE: autenticação do Django (e-mail como username)
# ====================================================================

def principal_from_django_user(user) -> Principal:
    return Principal(
        uid=str(user.pk),
        email=user.email or '',
        display_name=user.get_full_name() or None,
    )


class DjangoIdentityProvider(IIdentityProvider):
    """
    Provedor de identidade sobre django.contrib.auth, preso a uma requisição.

    `preserved_keys` são slots da sessão que sobrevivem ao logout (o logout do
    Django descarta a sessão inteira).
    """

    def __init__(self, request, preserved_keys: Iterable[str] = ()):
        self.request = request
        self.preserved_keys = tuple(preserved_keys)

    def sign_in(self, email: str, password: str) -> Principal:
        user = authenticate(self.request, username=email, password=password)
        if user is None:
            raise AuthFailureError()
        login(self.request, user)
        return principal_from_django_user(user)

    def register(self, name: str, email: str, password: str) -> Principal:
        User = get_user_model()
        if User.objects.filter(username__iexact=email).exists():
            raise AuthProviderError('email-already-in-use', "This email is already registered.")
        try:
            validate_password(password)
        except ValidationError as e:
            raise AuthProviderError('weak-password', " ".join(e.messages))

        user = User.objects.create_user(username=email, email=email, password=password, first_name=name)
        login(self.request, user, backend='django.contrib.auth.backends.ModelBackend')
        return principal_from_django_user(user)

    def sign_in_with_popup(self) -> Principal:
        raise AuthProviderError('operation-not-allowed', "Federated sign-in is not enabled.")

    def sign_in_with_redirect(self):
        raise AuthProviderError('operation-not-allowed', "Federated sign-in is not enabled.")

    def sign_out(self):
        session = self.request.session
        kept = {key: session[key] for key in self.preserved_keys if key in session}
        logout(self.request)
        for key, value in kept.items():
            self.request.session[key] = value

    def current_principal(self) -> Optional[Principal]:
        user = getattr(self.request, 'user', None)
        if user is None or not user.is_authenticated:
            return None
        return principal_from_django_user(user)
