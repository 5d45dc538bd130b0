from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from jewelryoclock.core.exceptions import InvalidDataError

# ====================================================================
# ENTIDADES CORE
# Representam os objetos de negócio puros.
# ====================================================================


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Category(str, Enum):
    RINGS = 'Rings'
    NECKLACES = 'Necklaces'
    BRACELETS = 'Bracelets'
    EARRINGS = 'Earrings'
    WATCHES = 'Watches'
    SETS = 'Sets'


class OrderStatus(str, Enum):
    PENDING_PAYMENT = 'Pending Payment'
    PAID = 'Paid'
    PROCESSING = 'Processing'
    SHIPPED = 'Shipped'
    DELIVERED = 'Delivered'
    CANCELLED = 'Cancelled'

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)

    def can_advance_to(self, new_status: 'OrderStatus') -> bool:
        """Só avança na sequência linear; Cancelado a partir de qualquer status não terminal."""
        if self.is_terminal:
            return False
        if new_status is OrderStatus.CANCELLED:
            return True
        return _STATUS_SEQUENCE.index(new_status) > _STATUS_SEQUENCE.index(self)


_STATUS_SEQUENCE = [
    OrderStatus.PENDING_PAYMENT,
    OrderStatus.PAID,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
]


class UserRole(str, Enum):
    ADMIN = 'admin'
    CUSTOMER = 'customer'


@dataclass
class Variant:
    """Configuração comprável de um produto (ex: tamanho/material), com preço e estoque próprios."""
    id: str
    name: str
    price: int
    stock: int
    options: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if self.stock < 0:
            raise InvalidDataError(f'Variant "{self.name}" cannot have negative stock.')


@dataclass
class Product:
    """Entidade do Produto (joia) vendida na loja."""
    id: str
    name: str
    price: int
    description: str
    category: Category
    image: str = ''
    stock: int = 0  # ignorado quando há variantes
    variants: List[Variant] = field(default_factory=list)

    @property
    def has_variants(self) -> bool:
        return bool(self.variants)

    def find_variant(self, variant_id: str) -> Optional[Variant]:
        return next((v for v in self.variants if v.id == variant_id), None)

    def available_stock(self, variant: Optional[Variant] = None) -> int:
        if variant is not None:
            return variant.stock
        return self.stock

    def validate(self):
        """Garante ids únicos e combinações de opções únicas entre as variantes."""
        if self.price < 0:
            raise InvalidDataError(f'Product "{self.name}" cannot have a negative price.')
        if self.stock < 0:
            raise InvalidDataError(f'Product "{self.name}" cannot have negative stock.')

        ids = set()
        combinations = set()
        for variant in self.variants:
            if variant.id in ids:
                raise InvalidDataError(f'Duplicate variant id "{variant.id}" on "{self.name}".')
            ids.add(variant.id)

            combination = frozenset(variant.options.items())
            if combination in combinations:
                raise InvalidDataError(
                    f'Variant "{variant.name}" repeats the options of another variant of "{self.name}".'
                )
            combinations.add(combination)

    # --- Seleção de opções ---

    def option_keys(self) -> List[str]:
        keys = []
        for variant in self.variants:
            for key in variant.options:
                if key not in keys:
                    keys.append(key)
        return keys

    def option_values(self, key: str) -> List[str]:
        values = []
        for variant in self.variants:
            value = variant.options.get(key)
            if value and value not in values:
                values.append(value)
        return values

    def is_option_available(self, key: str, value: str, selected: Dict[str, str]) -> bool:
        """
        Indica se existe variante com estoque para `key=value`, respeitando
        as demais opções já selecionadas.
        """
        for variant in self.variants:
            if variant.options.get(key) != value:
                continue
            others_match = all(
                variant.options.get(k) == v
                for k, v in selected.items()
                if k != key and v
            )
            if others_match and variant.stock > 0:
                return True
        return False

    def variant_for_options(self, selected: Dict[str, str]) -> Optional[Variant]:
        keys = self.option_keys()
        if not keys or not all(selected.get(k) for k in keys):
            return None
        return next(
            (v for v in self.variants if all(v.options.get(k) == selected[k] for k in keys)),
            None
        )


@dataclass
class CartItem:
    """Item do carrinho: snapshot do produto no momento em que foi adicionado."""
    product: Product
    quantity: int = 1
    selected_variant: Optional[Variant] = None

    @property
    def line_item_id(self) -> str:
        if self.selected_variant:
            return f"{self.product.id}-{self.selected_variant.id}"
        return self.product.id

    @property
    def price(self) -> int:
        """Preço efetivo: o da variante escolhida, senão o do produto."""
        if self.selected_variant:
            return self.selected_variant.price
        return self.product.price

    @property
    def available_stock(self) -> int:
        return self.product.available_stock(self.selected_variant)

    @property
    def subtotal(self) -> int:
        return self.price * self.quantity

    def with_quantity(self, quantity: int) -> 'CartItem':
        return replace(self, quantity=quantity)


@dataclass
class CartSummary:
    subtotal: int
    tax: float
    total: float


@dataclass
class StatusChange:
    status: OrderStatus
    timestamp: datetime


@dataclass
class Order:
    """Entidade do Pedido. Os itens são cópias congeladas do carrinho."""
    id: str
    user_id: str
    items: List[CartItem]
    total: int
    created_at: datetime
    customer_name: str
    email: str
    shipping_address: str
    status: OrderStatus
    status_history: List[StatusChange] = field(default_factory=list)
    payment_id: Optional[str] = None


@dataclass
class User:
    """Usuário da aplicação. O papel é derivado do e-mail."""
    id: str
    name: str
    email: str
    role: UserRole = UserRole.CUSTOMER

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


@dataclass
class Principal:
    """Identidade devolvida pelo provedor de autenticação."""
    uid: str
    email: str = ''
    display_name: Optional[str] = None


@dataclass
class AuthResult:
    success: bool
    error: Optional[str] = None


@dataclass
class CheckoutDetails:
    user_id: str
    name: str
    email: str
    address: str
    payment_id: str
