# jewelryoclock/core/cart_manager.py
"""
Carrinho e histórico local de pedidos.

Os dois vivem no armazenamento local do cliente (sessão), cada um em seu slot.
Toda mutação do carrinho regrava o conteúdo inteiro; conteúdo ilegível na
hidratação é descartado (o carrinho recomeça vazio).
"""
import copy
import logging
from collections import OrderedDict
from typing import List, Optional

from jewelryoclock.core.constants import DEFAULT_TAX_RATE
from jewelryoclock.core.entities import CartItem, CartSummary, Order, Product, User, Variant
from jewelryoclock.core.exceptions import AccessDeniedError, StorageCorruptError
from jewelryoclock.core.ports import ILocalStorage
from jewelryoclock.core.serializers import dumps_cart, dumps_orders, loads_cart, loads_orders

logger = logging.getLogger(__name__)

CART_STORAGE_KEY = 'jo_cart'
ORDERS_STORAGE_KEY = 'jo_orders'


def _refuse_admin(user: Optional[User]):
    if user is not None and user.is_admin:
        raise AccessDeniedError("Administrators cannot make purchases.")


class CartManager:
    """
    Mapeamento de itens de linha (chave: produto ou produto-variante).

    A quantidade de um item nunca passa do estoque conhecido no momento da
    mutação; tentativas que passariam são ignoradas sem erro.
    """

    def __init__(self, storage: ILocalStorage, user: Optional[User] = None,
                 storage_key: str = CART_STORAGE_KEY, tax_rate: float = DEFAULT_TAX_RATE):
        self.storage = storage
        self.user = user
        self.storage_key = storage_key
        self.tax_rate = tax_rate
        self._lines: 'OrderedDict[str, CartItem]' = OrderedDict()
        self._hydrate()

    def _hydrate(self):
        try:
            items = loads_cart(self.storage.get_item(self.storage_key))
        except StorageCorruptError as e:
            logger.warning("Descartando carrinho ilegível: %s", e.message)
            items = []
            self.storage.remove_item(self.storage_key)
        for item in items:
            self._lines[item.line_item_id] = item

    def _persist(self):
        self.storage.set_item(self.storage_key, dumps_cart(self.items))

    # --- Mutações ---

    def add_item(self, product: Product, variant: Optional[Variant] = None) -> Optional[CartItem]:
        _refuse_admin(self.user)
        candidate = CartItem(product=copy.deepcopy(product), quantity=1, selected_variant=copy.deepcopy(variant))
        line_id = candidate.line_item_id

        existing = self._lines.get(line_id)
        if existing is not None:
            # O estoque conhecido é o do produto recebido agora, não o da primeira adição
            if existing.quantity + 1 > candidate.available_stock:
                logger.debug("Estoque máximo atingido para %s; item não incrementado.", line_id)
                return existing
            self._lines[line_id] = candidate.with_quantity(existing.quantity + 1)
        else:
            if candidate.available_stock < 1:
                return None
            self._lines[line_id] = candidate

        self._persist()
        return self._lines[line_id]

    def remove_item(self, line_item_id: str):
        self._lines.pop(line_item_id, None)
        self._persist()

    def set_quantity(self, line_item_id: str, quantity: int) -> Optional[CartItem]:
        _refuse_admin(self.user)
        item = self._lines.get(line_item_id)
        if item is None:
            return None

        if quantity < 1:
            self.remove_item(line_item_id)
            return None
        if quantity > item.available_stock:
            return item

        self._lines[line_item_id] = item.with_quantity(quantity)
        self._persist()
        return self._lines[line_item_id]

    def clear(self):
        self._lines.clear()
        self._persist()

    # --- Consultas ---

    @property
    def items(self) -> List[CartItem]:
        return list(self._lines.values())

    def get_item(self, line_item_id: str) -> Optional[CartItem]:
        return self._lines.get(line_item_id)

    def total(self) -> int:
        return sum(item.subtotal for item in self._lines.values())

    def count(self) -> int:
        return sum(item.quantity for item in self._lines.values())

    def is_empty(self) -> bool:
        return not self._lines

    def summary(self) -> CartSummary:
        """Subtotal, imposto estimado e total geral exibidos no checkout."""
        subtotal = self.total()
        tax = round(subtotal * self.tax_rate, 2)
        return CartSummary(subtotal=subtotal, tax=tax, total=subtotal + tax)


class OrderHistory:
    """Lista local de pedidos da sessão, do mais recente para o mais antigo."""

    def __init__(self, storage: ILocalStorage, storage_key: str = ORDERS_STORAGE_KEY):
        self.storage = storage
        self.storage_key = storage_key

    def orders(self) -> List[Order]:
        try:
            return loads_orders(self.storage.get_item(self.storage_key))
        except StorageCorruptError as e:
            logger.warning("Descartando histórico local ilegível: %s", e.message)
            self.storage.remove_item(self.storage_key)
            return []

    def last_order(self) -> Optional[Order]:
        orders = self.orders()
        return orders[0] if orders else None

    def prepend(self, order: Order):
        orders = [o for o in self.orders() if o.id != order.id]
        self.storage.set_item(self.storage_key, dumps_orders([order] + orders))

    def replace(self, order: Order) -> bool:
        """Substitui, na mesma posição, o pedido de mesmo id. Pedidos desconhecidos são ignorados."""
        orders = self.orders()
        if not any(o.id == order.id for o in orders):
            return False
        self.storage.set_item(self.storage_key, dumps_orders([order if o.id == order.id else o for o in orders]))
        return True

    def for_user(self, user_id: str) -> List[Order]:
        return [o for o in self.orders() if o.user_id == user_id]
