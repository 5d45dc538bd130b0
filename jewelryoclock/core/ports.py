# jewelryoclock/core/ports.py
"""
Definição das Portas (Interfaces/Protocolos) da Arquitetura Limpa.

Estes protocolos definem o contrato que a camada de Infraestrutura (Repositórios, Gateways)
DEVE seguir para se conectar à camada Core (Casos de Uso).
"""

from typing import Callable, List, Optional, Protocol, TypeVar
from abc import abstractmethod

from jewelryoclock.core.entities import Order, OrderStatus, Principal, Product, StatusChange

T = TypeVar('T')


# ====================================================================
# 1. REPOSITÓRIOS (Portas de Persistência)
# ====================================================================

class IProductRepository(Protocol):
    """Coleção autoritativa de produtos."""

    @abstractmethod
    def list_all(self) -> List[Product]:
        """Levanta PersistenceUnavailableError se o banco não responder."""
        ...

    @abstractmethod
    def get_by_id(self, product_id: str) -> Optional[Product]: ...

    @abstractmethod
    def save(self, product: Product) -> Product:
        """Cria ou substitui o documento do produto pelo id."""
        ...

    @abstractmethod
    def delete(self, product_id: str): ...


class IOrderRepository(Protocol):
    """Protocolo para a persistência e gestão de Pedidos."""

    @abstractmethod
    def get_by_id(self, order_id: str) -> Optional[Order]: ...

    @abstractmethod
    def list_by_user(self, user_id: str) -> List[Order]: ...

    @abstractmethod
    def list_all(self, status: Optional[OrderStatus] = None) -> List[Order]: ...

    @abstractmethod
    def append_status(self, order_id: str, next_change: Callable[[Order], StatusChange]) -> Order:
        """
        Trava o pedido, obtém a mudança a partir do estado atual e a acrescenta
        ao histórico, atualizando o status atual. Tudo atomicamente.
        """
        ...


class ITransaction(Protocol):
    """Visão de uma transação de leitura-validação-escrita sobre o catálogo."""

    @abstractmethod
    def get_product(self, product_id: str) -> Optional[Product]: ...

    @abstractmethod
    def update_product(self, product: Product): ...

    @abstractmethod
    def create_order(self, order: Order): ...


class ITransactionRunner(Protocol):

    @abstractmethod
    def run(self, operation: Callable[[ITransaction], T]) -> T:
        """
        Executa `operation` e grava tudo ou nada. Levanta TransactionConflictError
        quando algum produto lido foi alterado por outra transação.
        """
        ...


# ====================================================================
# 2. ARMAZENAMENTO LOCAL (carrinho e histórico do navegador/sessão)
# ====================================================================

class ILocalStorage(Protocol):

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]: ...

    @abstractmethod
    def set_item(self, key: str, value: str): ...

    @abstractmethod
    def remove_item(self, key: str): ...


# ====================================================================
# 3. GATEWAYS (Portas de Serviços Externos)
# ====================================================================

class IIdentityProvider(Protocol):
    """Provedor de autenticação. Falhas são AuthProviderError com um código."""

    @abstractmethod
    def sign_in(self, email: str, password: str) -> Principal: ...

    @abstractmethod
    def register(self, name: str, email: str, password: str) -> Principal: ...

    @abstractmethod
    def sign_in_with_popup(self) -> Principal: ...

    @abstractmethod
    def sign_in_with_redirect(self): ...

    @abstractmethod
    def sign_out(self): ...

    @abstractmethod
    def current_principal(self) -> Optional[Principal]: ...


class IDescriptionGenerator(Protocol):
    """Serviço de geração de texto para descrições de produtos."""

    @abstractmethod
    def generate(self, name: str, category: str, keywords: str) -> str: ...
