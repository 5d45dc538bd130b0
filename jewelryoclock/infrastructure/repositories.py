"""
Camada de Infraestrutura: Implementação de Repositórios.

Esta camada traduz as operações abstratas definidas nas Portas da Core
em chamadas concretas ao framework (Django ORM) ou, nos testes, a estruturas
em memória com o mesmo comportamento.
"""
import copy
import logging
import threading
from typing import Callable, Dict, List, Optional, Tuple, TypeVar

from django.apps import apps
from django.db import DatabaseError, transaction
from django.db.models import F
from django.utils import timezone

from jewelryoclock.core.entities import Order, OrderStatus, Product, StatusChange
from jewelryoclock.core.exceptions import (
    OrderNotFoundError,
    PersistenceUnavailableError,
    TransactionConflictError,
)
from jewelryoclock.core.ports import (
    IOrderRepository,
    IProductRepository,
    ITransaction,
    ITransactionRunner,
)

from .mappers import OrderMapper, ProductMapper, VariantMapper

logger = logging.getLogger(__name__)

T = TypeVar('T')


# ====================================================================
# 1. REPOSITÓRIOS (Implementação Django ORM)
# ====================================================================

# Helper para Lazy Loading
def get_model(app_label, model_name):
    """Busca o modelo Django de forma segura (Lazy Loading)."""
    return apps.get_model(app_label, model_name)


def _replace_variants(product_model, product: Product):
    VariantModel = get_model('catalog', 'Variant')
    product_model.variants.all().delete()
    VariantModel.objects.bulk_create([
        VariantModel(product=product_model, **VariantMapper.to_fields(v, position))
        for position, v in enumerate(product.variants)
    ])


class ProductRepositoryDjango(IProductRepository):
    """Implementação do ProductRepository usando o Django ORM."""

    @property
    def ProductModel(self):
        return get_model('catalog', 'Product')

    def list_all(self) -> List[Product]:
        try:
            qs = self.ProductModel.objects.prefetch_related('variants')
            return [ProductMapper.to_entity(model) for model in qs]
        except DatabaseError as e:
            raise PersistenceUnavailableError(f"Database connection not available: {e}") from e

    def get_by_id(self, product_id: str) -> Optional[Product]:
        try:
            model = self.ProductModel.objects.prefetch_related('variants').get(pk=product_id)
            return ProductMapper.to_entity(model)
        except self.ProductModel.DoesNotExist:
            return None

    @transaction.atomic
    def save(self, product: Product) -> Product:
        """Cria ou substitui o produto (e todas as suas variantes) pelo id."""
        model = self.ProductModel.objects.filter(pk=product.id).first()
        if model is None:
            model = self.ProductModel(id=product.id)
        for field_name, value in ProductMapper.to_fields(product).items():
            setattr(model, field_name, value)
        model.save()
        _replace_variants(model, product)
        return self.get_by_id(product.id)

    def delete(self, product_id: str):
        self.ProductModel.objects.filter(pk=product_id).delete()


class OrderRepositoryDjango(IOrderRepository):

    @property
    def OrderModel(self):
        return get_model('orders', 'Order')

    @property
    def StatusEntryModel(self):
        return get_model('orders', 'OrderStatusEntry')

    def _queryset(self):
        return self.OrderModel.objects.prefetch_related('status_history')

    def get_by_id(self, order_id: str) -> Optional[Order]:
        try:
            return OrderMapper.to_entity(self._queryset().get(pk=order_id))
        except self.OrderModel.DoesNotExist:
            return None

    def list_by_user(self, user_id: str) -> List[Order]:
        qs = self._queryset().filter(user_id=user_id).order_by('-created_at')
        return [OrderMapper.to_entity(model) for model in qs]

    def list_all(self, status: Optional[OrderStatus] = None) -> List[Order]:
        qs = self._queryset().order_by('-created_at')
        if status is not None:
            qs = qs.filter(status=status.value)
        return [OrderMapper.to_entity(model) for model in qs]

    def create(self, order: Order):
        model = self.OrderModel.objects.create(**OrderMapper.to_fields(order))
        self.StatusEntryModel.objects.bulk_create([
            self.StatusEntryModel(order=model, status=c.status.value, timestamp=c.timestamp)
            for c in order.status_history
        ])

    @transaction.atomic
    def append_status(self, order_id: str, next_change: Callable[[Order], StatusChange]) -> Order:
        try:
            model = self.OrderModel.objects.select_for_update().get(pk=order_id)
        except self.OrderModel.DoesNotExist:
            raise OrderNotFoundError(f"Order {order_id} was not found.")

        # Validação sobre a linha travada; exceções desfazem a transação
        change = next_change(OrderMapper.to_entity(model))
        self.StatusEntryModel.objects.create(order=model, status=change.status.value, timestamp=change.timestamp)
        model.status = change.status.value
        model.save(update_fields=['status'])
        return self.get_by_id(order_id)


class _DjangoTransaction(ITransaction):
    """
    Leituras guardam a versão do produto; a escrita só acontece se a versão
    ainda for a mesma, e a incrementa.
    """

    def __init__(self, order_repo: OrderRepositoryDjango):
        self.order_repo = order_repo
        self._read: Dict[str, Tuple[int, Product]] = {}

    @property
    def ProductModel(self):
        return get_model('catalog', 'Product')

    @property
    def VariantModel(self):
        return get_model('catalog', 'Variant')

    def get_product(self, product_id: str) -> Optional[Product]:
        try:
            model = self.ProductModel.objects.prefetch_related('variants').get(pk=product_id)
        except self.ProductModel.DoesNotExist:
            return None
        entity = ProductMapper.to_entity(model)
        self._read[product_id] = (model.version, copy.deepcopy(entity))
        return entity

    def update_product(self, product: Product):
        if product.id not in self._read:
            raise TransactionConflictError(f"Product {product.id} was not read in this transaction.")
        version, original = self._read[product.id]

        updated = self.ProductModel.objects.filter(pk=product.id, version=version).update(
            stock=product.stock,
            version=F('version') + 1,
            updated_at=timezone.now(),
        )
        if not updated:
            raise TransactionConflictError(f"Product {product.id} changed during the transaction.")

        before = {v.id: v.stock for v in original.variants}
        for variant in product.variants:
            if before.get(variant.id) != variant.stock:
                self.VariantModel.objects.filter(product_id=product.id, code=variant.id).update(stock=variant.stock)

        self._read[product.id] = (version + 1, copy.deepcopy(product))

    def create_order(self, order: Order):
        self.order_repo.create(order)


class TransactionRunnerDjango(ITransactionRunner):
    """Executa a operação dentro de um transaction.atomic: qualquer exceção desfaz tudo."""

    def __init__(self, order_repo: Optional[OrderRepositoryDjango] = None):
        self.order_repo = order_repo or OrderRepositoryDjango()

    def run(self, operation: Callable[[ITransaction], T]) -> T:
        try:
            with transaction.atomic():
                return operation(_DjangoTransaction(self.order_repo))
        except DatabaseError as e:
            logger.error("Falha de banco durante a transação: %s", e)
            raise PersistenceUnavailableError(f"Database connection not available: {e}") from e


# ====================================================================
# 2. REPOSITÓRIOS EM MEMÓRIA (Testes)
# ====================================================================

class ProductRepository(IProductRepository):
    """Repositório de produtos em memória, com versão por produto."""

    def __init__(self, products: Optional[List[Product]] = None):
        self._lock = threading.RLock()
        self._items: Dict[str, Tuple[int, Product]] = {}
        for product in products or []:
            self._items[product.id] = (1, copy.deepcopy(product))

    def list_all(self) -> List[Product]:
        with self._lock:
            return [copy.deepcopy(p) for _, p in self._items.values()]

    def get_by_id(self, product_id: str) -> Optional[Product]:
        with self._lock:
            entry = self._items.get(product_id)
            return copy.deepcopy(entry[1]) if entry else None

    def get_versioned(self, product_id: str) -> Optional[Tuple[int, Product]]:
        with self._lock:
            entry = self._items.get(product_id)
            return (entry[0], copy.deepcopy(entry[1])) if entry else None

    def save(self, product: Product) -> Product:
        with self._lock:
            version = self._items[product.id][0] + 1 if product.id in self._items else 1
            self._items[product.id] = (version, copy.deepcopy(product))
            return copy.deepcopy(product)

    def delete(self, product_id: str):
        with self._lock:
            self._items.pop(product_id, None)


class OrderRepository(IOrderRepository):

    def __init__(self):
        self._lock = threading.RLock()
        self._orders: Dict[str, Order] = {}

    def create(self, order: Order):
        with self._lock:
            self._orders[order.id] = copy.deepcopy(order)

    def get_by_id(self, order_id: str) -> Optional[Order]:
        with self._lock:
            order = self._orders.get(order_id)
            return copy.deepcopy(order) if order else None

    def _sorted(self, orders):
        return [copy.deepcopy(o) for o in sorted(orders, key=lambda o: o.created_at, reverse=True)]

    def list_by_user(self, user_id: str) -> List[Order]:
        with self._lock:
            return self._sorted(o for o in self._orders.values() if o.user_id == user_id)

    def list_all(self, status: Optional[OrderStatus] = None) -> List[Order]:
        with self._lock:
            return self._sorted(o for o in self._orders.values() if status is None or o.status is status)

    def append_status(self, order_id: str, next_change: Callable[[Order], StatusChange]) -> Order:
        with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                raise OrderNotFoundError(f"Order {order_id} was not found.")
            change = next_change(copy.deepcopy(order))
            order.status_history.append(change)
            order.status = change.status
            return copy.deepcopy(order)


class _MemoryTransaction(ITransaction):
    """Acumula leituras (com versão) e escritas; nada é aplicado antes do commit."""

    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo
        self.read_versions: Dict[str, int] = {}
        self.product_writes: Dict[str, Product] = {}
        self.order_writes: List[Order] = []

    def get_product(self, product_id: str) -> Optional[Product]:
        if product_id in self.product_writes:
            return copy.deepcopy(self.product_writes[product_id])
        entry = self.product_repo.get_versioned(product_id)
        if entry is None:
            return None
        self.read_versions[product_id] = entry[0]
        return entry[1]

    def update_product(self, product: Product):
        self.product_writes[product.id] = copy.deepcopy(product)

    def create_order(self, order: Order):
        self.order_writes.append(copy.deepcopy(order))


class TransactionRunner(ITransactionRunner):
    """
    Executor em memória: a operação roda sem lock e o commit confere, sob lock,
    se nenhum produto lido mudou de versão.
    """

    def __init__(self, product_repo: ProductRepository, order_repo: OrderRepository):
        self.product_repo = product_repo
        self.order_repo = order_repo
        self._commit_lock = threading.Lock()

    def run(self, operation: Callable[[ITransaction], T]) -> T:
        tx = _MemoryTransaction(self.product_repo)
        result = operation(tx)
        self._commit(tx)
        return result

    def _commit(self, tx: _MemoryTransaction):
        with self._commit_lock:
            for product_id, version in tx.read_versions.items():
                entry = self.product_repo.get_versioned(product_id)
                if entry is None or entry[0] != version:
                    raise TransactionConflictError(f"Product {product_id} changed during the transaction.")
            for product in tx.product_writes.values():
                self.product_repo.save(product)
            for order in tx.order_writes:
                self.order_repo.create(order)
