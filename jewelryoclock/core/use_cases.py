# jewelryoclock/core/use_cases.py
"""
Implementação dos Casos de Uso (Lógica de Negócio) da aplicação.
Esta camada depende apenas das Entidades e Portas (Interfaces) do Core,
garantindo o isolamento da lógica de negócio.
"""
import copy
import logging
import threading
import uuid
from typing import Callable, Dict, List, Optional

from jewelryoclock.core.cart_manager import CartManager, OrderHistory
from jewelryoclock.core.constants import INITIAL_PRODUCTS
from jewelryoclock.core.entities import (
    CartItem, CheckoutDetails, Order, OrderStatus, Product, StatusChange, User, utcnow
)
from jewelryoclock.core.exceptions import (
    CommitConflictError,
    EmptyCartError,
    InsufficientStockError,
    InvalidDataError,
    InvalidStatusTransitionError,
    PersistenceUnavailableError,
    ProductNotFoundError,
    ProductUnavailableError,
    TransactionConflictError,
    VariantUnavailableError,
)
from jewelryoclock.core.identity import ensure_admin, ensure_can_purchase
from jewelryoclock.core.ports import (
    IDescriptionGenerator,
    IOrderRepository,
    IProductRepository,
    ITransaction,
    ITransactionRunner,
)

logger = logging.getLogger(__name__)

Listener = Callable[[List[Product]], None]


# ====================================================================
# 1. CATÁLOGO
# ====================================================================

def parse_variant_options(raw: str) -> Dict[str, str]:
    """Converte "Size:7, Material:Gold" em {'Size': '7', 'Material': 'Gold'}. Pares incompletos são ignorados."""
    options = {}
    for part in (raw or '').split(','):
        key, _, value = part.partition(':')
        key, value = key.strip(), value.strip()
        if key and value:
            options[key] = value
    return options


class CatalogStore:
    """
    Lista de produtos compartilhada pelo processo.

    Carregada do repositório; coleção vazia ou banco indisponível caem para o
    catálogo de contingência. Os ouvintes recebem a lista completa a cada
    mudança, sempre fora do lock.
    """

    def __init__(self, product_repo: IProductRepository, fallback: Optional[List[Product]] = None):
        self.product_repo = product_repo
        self.fallback = INITIAL_PRODUCTS if fallback is None else fallback
        self.offline = False
        self._products: Optional[List[Product]] = None
        self._listeners: List[Listener] = []
        self._lock = threading.RLock()

    def _load(self) -> List[Product]:
        try:
            products = self.product_repo.list_all()
        except PersistenceUnavailableError as e:
            logger.error("Erro ao buscar produtos, usando catálogo de contingência: %s", e.message)
            self.offline = True
            return copy.deepcopy(self.fallback)

        self.offline = False
        if not products:
            logger.info("Coleção de produtos vazia; usando catálogo de contingência.")
            return copy.deepcopy(self.fallback)
        return products

    def _snapshot(self) -> List[Product]:
        with self._lock:
            if self._products is None:
                self._products = self._load()
            return list(self._products)

    def _notify(self, products: List[Product]):
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(products)

    @property
    def products(self) -> List[Product]:
        return self._snapshot()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Entrega a lista atual imediatamente e devolve a função que cancela a inscrição."""
        with self._lock:
            self._listeners.append(listener)
        listener(self._snapshot())

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)
        return unsubscribe

    def refresh(self) -> List[Product]:
        with self._lock:
            self._products = self._load()
            products = list(self._products)
        self._notify(products)
        return products

    def get_product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self._snapshot() if p.id == product_id), None)

    # --- Operações administrativas ---

    def _ensure_writable(self, actor: Optional[User]):
        ensure_admin(actor)
        if self.offline:
            raise PersistenceUnavailableError()

    def add_product(self, product: Product, actor: Optional[User]) -> Product:
        """Cria ou substitui pelo id; sem id, gera um novo."""
        self._ensure_writable(actor)
        product.validate()
        if not product.id:
            product.id = uuid.uuid4().hex
        saved = self.product_repo.save(product)
        logger.info("Produto %s salvo por %s.", saved.id, actor.email)
        self.refresh()
        return saved

    def update_product(self, product: Product, actor: Optional[User]) -> Product:
        self._ensure_writable(actor)
        product.validate()
        if not product.id or self.product_repo.get_by_id(product.id) is None:
            raise ProductNotFoundError(f"Product {product.id} does not exist.")
        saved = self.product_repo.save(product)
        logger.info("Produto %s atualizado por %s.", saved.id, actor.email)
        self.refresh()
        return saved

    def delete_product(self, product_id: str, actor: Optional[User]):
        self._ensure_writable(actor)
        if self.product_repo.get_by_id(product_id) is None:
            raise ProductNotFoundError(f"Product {product_id} does not exist.")
        self.product_repo.delete(product_id)
        logger.info("Produto %s removido por %s.", product_id, actor.email)
        self.refresh()


# ====================================================================
# 2. PEDIDO (transação de leitura-validação-escrita)
# ====================================================================

class OrderEngine:
    """
    Finaliza o checkout: lê o estoque autoritativo, valida todos os itens,
    grava o pedido e o estoque reduzido de uma vez só.

    Conflitos de versão refazem a transação inteira a partir da leitura,
    até `max_attempts` vezes.
    """

    def __init__(self,
                 transaction_runner: ITransactionRunner,
                 cart: CartManager,
                 history: OrderHistory,
                 catalog_store: Optional[CatalogStore] = None,
                 clock: Callable = utcnow,
                 max_attempts: int = 5):
        self.transaction_runner = transaction_runner
        self.cart = cart
        self.history = history
        self.catalog_store = catalog_store
        self.clock = clock
        self.max_attempts = max(1, max_attempts)

    def _build_order(self, details: CheckoutDetails) -> Order:
        now = self.clock()
        return Order(
            id=uuid.uuid4().hex,
            user_id=details.user_id,
            items=copy.deepcopy(self.cart.items),
            total=self.cart.total(),
            created_at=now,
            customer_name=details.name,
            email=details.email,
            shipping_address=details.address,
            status=OrderStatus.PAID,
            status_history=[StatusChange(status=OrderStatus.PAID, timestamp=now)],
            payment_id=details.payment_id,
        )

    @staticmethod
    def _take_stock(product: Product, item: CartItem):
        """Valida a linha contra a cópia de trabalho e já desconta a quantidade."""
        if item.selected_variant is not None:
            variant = product.find_variant(item.selected_variant.id)
            if variant is None:
                raise VariantUnavailableError(item.product.name, item.selected_variant.name)
            if variant.stock < item.quantity:
                raise InsufficientStockError(
                    item.product.name, variant.stock, item.quantity, variant_name=variant.name
                )
            variant.stock -= item.quantity
        else:
            if product.stock < item.quantity:
                raise InsufficientStockError(item.product.name, product.stock, item.quantity)
            product.stock -= item.quantity

    def _commit(self, tx: ITransaction, order: Order) -> Order:
        working: Dict[str, Product] = {}

        # 1. Leitura + validação (nenhuma escrita até aqui)
        for item in order.items:
            product_id = item.product.id
            if product_id not in working:
                product = tx.get_product(product_id)
                if product is None:
                    raise ProductUnavailableError(item.product.name)
                working[product_id] = product
            self._take_stock(working[product_id], item)

        # 2. Escrita
        tx.create_order(order)
        for product in working.values():
            tx.update_product(product)
        return order

    def place_order(self, details: CheckoutDetails, actor: Optional[User]) -> Order:
        ensure_can_purchase(actor)
        if self.cart.is_empty():
            raise EmptyCartError()

        order = self._build_order(details)
        for attempt in range(1, self.max_attempts + 1):
            try:
                self.transaction_runner.run(lambda tx: self._commit(tx, order))
                break
            except TransactionConflictError:
                logger.warning("Conflito ao gravar o pedido %s (tentativa %d/%d).",
                               order.id, attempt, self.max_attempts)
        else:
            logger.error("Pedido %s abandonado após %d conflitos.", order.id, self.max_attempts)
            raise CommitConflictError()

        logger.info("Pedido %s confirmado para o usuário %s (total %d).", order.id, order.user_id, order.total)

        self.history.prepend(order)
        self.cart.clear()
        if self.catalog_store is not None:
            self.catalog_store.refresh()
        return order


# ====================================================================
# 3. ACOMPANHAMENTO DE STATUS
# ====================================================================

class StatusTracker:
    """Histórico de status só cresce; o último registro é sempre o status atual."""

    def __init__(self, order_repo: IOrderRepository, clock: Callable = utcnow, strict_transitions: bool = True):
        self.order_repo = order_repo
        self.clock = clock
        self.strict_transitions = strict_transitions

    def _next_change(self, order: Order, new_status: OrderStatus) -> StatusChange:
        """Roda dentro do lock do repositório, sobre o pedido já travado."""
        if self.strict_transitions and not order.status.can_advance_to(new_status):
            raise InvalidStatusTransitionError(order.status, new_status)

        timestamp = self.clock()
        if order.status_history and timestamp < order.status_history[-1].timestamp:
            timestamp = order.status_history[-1].timestamp
        return StatusChange(status=new_status, timestamp=timestamp)

    def advance(self, order_id: str, new_status: OrderStatus, actor: Optional[User]) -> Order:
        ensure_admin(actor)
        updated = self.order_repo.append_status(order_id, lambda order: self._next_change(order, new_status))
        logger.info("Pedido %s -> %s (%s).", order_id, new_status.value, actor.email)
        return updated

    def orders_for(self, user_id: str) -> List[Order]:
        return self.order_repo.list_by_user(user_id)

    def all_orders(self, actor: Optional[User], status: Optional[OrderStatus] = None) -> List[Order]:
        ensure_admin(actor)
        return self.order_repo.list_all(status=status)

    def sync_history(self, history: OrderHistory) -> List[Order]:
        """Traz para o histórico local o status atual dos pedidos já gravados."""
        orders = []
        for local in history.orders():
            current = self.order_repo.get_by_id(local.id)
            if current is not None and len(current.status_history) != len(local.status_history):
                history.replace(current)
                local = current
            orders.append(local)
        return orders


# ====================================================================
# 4. SUGESTÃO DE DESCRIÇÃO (admin)
# ====================================================================

class DescriptionSuggestionUseCase:
    def __init__(self, generator: IDescriptionGenerator):
        self.generator = generator

    def suggest(self, name: str, category: str, keywords: str, actor: Optional[User]) -> str:
        ensure_admin(actor)
        if not name or not name.strip():
            raise InvalidDataError("A product name is required to generate a description.")
        return self.generator.generate(name.strip(), category, keywords)
