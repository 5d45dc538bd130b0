# jewelryoclock/core/dependency_injection.py
"""
Módulo de Injeção de Dependência (DI).
Responsável por instanciar os Use Cases com suas dependências de Repositórios/Gateways
concretos da camada de Infraestrutura.
"""
from django.conf import settings

from jewelryoclock.infrastructure.gateways import DjangoIdentityProvider, GeminiDescriptionGateway
from jewelryoclock.infrastructure.repositories import (
    OrderRepositoryDjango,
    ProductRepositoryDjango,
    TransactionRunnerDjango,
)
from jewelryoclock.infrastructure.storage import SessionStorage
from .cart_manager import CartManager, OrderHistory
from .identity import IdentityGate
from .use_cases import (
    CatalogStore,
    DescriptionSuggestionUseCase,
    OrderEngine,
    StatusTracker,
)

# Repositórios e Gateways Concretos
product_repo = ProductRepositoryDjango()
order_repo = OrderRepositoryDjango()
transaction_runner = TransactionRunnerDjango(order_repo)
description_gateway = GeminiDescriptionGateway(
    api_key=settings.GEMINI_API_KEY,
    model=settings.GEMINI_MODEL,
    timeout=settings.GEMINI_TIMEOUT,
)

# Compartilhado pelo processo inteiro
catalog_store = CatalogStore(product_repo)


# ====================================================================
# Catálogo / Administração
# ====================================================================

def get_catalog_store() -> CatalogStore:
    return catalog_store


def get_status_tracker() -> StatusTracker:
    return StatusTracker(order_repo, strict_transitions=settings.ORDER_STRICT_STATUS_TRANSITIONS)


def get_description_suggestion_use_case() -> DescriptionSuggestionUseCase:
    return DescriptionSuggestionUseCase(description_gateway)


# ====================================================================
# Identidade e sessão do cliente (presos à requisição)
# ====================================================================

def get_identity_gate(request) -> IdentityGate:
    provider = DjangoIdentityProvider(
        request, preserved_keys=(settings.CART_STORAGE_KEY, settings.ORDERS_STORAGE_KEY)
    )
    return IdentityGate(provider, admin_email=settings.ADMIN_EMAIL)


def get_cart_manager(request, user=None) -> CartManager:
    return CartManager(
        SessionStorage(request.session),
        user=user,
        storage_key=settings.CART_STORAGE_KEY,
        tax_rate=settings.TAX_RATE,
    )


def get_order_history(request) -> OrderHistory:
    return OrderHistory(SessionStorage(request.session), storage_key=settings.ORDERS_STORAGE_KEY)


def get_order_engine(request, user=None) -> OrderEngine:
    return OrderEngine(
        transaction_runner,
        cart=get_cart_manager(request, user),
        history=get_order_history(request),
        catalog_store=catalog_store,
        max_attempts=settings.ORDER_COMMIT_MAX_ATTEMPTS,
    )
