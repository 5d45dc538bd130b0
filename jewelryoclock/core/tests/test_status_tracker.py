import unittest
from datetime import datetime, timedelta

from jewelryoclock.core.cart_manager import CartManager, OrderHistory
from jewelryoclock.core.entities import OrderStatus, StatusChange
from jewelryoclock.core.exceptions import (
    AccessDeniedError,
    InvalidStatusTransitionError,
    OrderNotFoundError,
)
from jewelryoclock.core.use_cases import OrderEngine, StatusTracker
from jewelryoclock.infrastructure.repositories import OrderRepository, ProductRepository, TransactionRunner
from jewelryoclock.infrastructure.storage import MemoryStorage

from .builders import ADMIN, CUSTOMER, T0, FixedClock, checkout_details, make_order, make_ring


class ConcurrentAdminOrderRepository(OrderRepository):
    """Outro admin grava uma mudança logo antes da nossa, já dentro do repositório."""

    def __init__(self, inner: OrderRepository, status: OrderStatus, timestamp: datetime):
        self.inner = inner
        self.competing = StatusChange(status=status, timestamp=timestamp)

    def get_by_id(self, order_id):
        return self.inner.get_by_id(order_id)

    def append_status(self, order_id, next_change):
        if self.competing is not None:
            competing, self.competing = self.competing, None
            self.inner.append_status(order_id, lambda order: competing)
        return self.inner.append_status(order_id, next_change)


class TestStatusTracker(unittest.TestCase):

    def setUp(self):
        self.repo = OrderRepository()
        self.repo.create(make_order())
        self.clock = FixedClock(T0 + timedelta(hours=1))
        self.tracker = StatusTracker(self.repo, clock=self.clock)

    def test_avancar_status_acrescenta_ao_historico(self):
        """
        Cenário: Pedido Pago passa para Processando.
        """
        order = self.tracker.advance('o1', OrderStatus.PROCESSING, actor=ADMIN)

        self.assertEqual(order.status, OrderStatus.PROCESSING)
        self.assertEqual(
            [c.status for c in order.status_history],
            [OrderStatus.PAID, OrderStatus.PROCESSING],
        )
        self.assertEqual(order.status_history[-1].timestamp, T0 + timedelta(hours=1))

    def test_historico_nunca_retrocede_no_tempo(self):
        """
        Cenário: O relógio está atrasado em relação à última entrada.
        """
        tracker = StatusTracker(self.repo, clock=FixedClock(T0 - timedelta(minutes=5)))

        order = tracker.advance('o1', OrderStatus.SHIPPED, actor=ADMIN)

        self.assertEqual(order.status_history[-1].timestamp, T0)

    def test_pedido_inexistente(self):
        with self.assertRaises(OrderNotFoundError):
            self.tracker.advance('nao-existe', OrderStatus.SHIPPED, actor=ADMIN)

    def test_apenas_admin_altera_status(self):
        with self.assertRaises(AccessDeniedError):
            self.tracker.advance('o1', OrderStatus.SHIPPED, actor=CUSTOMER)
        self.assertEqual(self.repo.get_by_id('o1').status, OrderStatus.PAID)

    def test_transicao_para_tras_e_recusada(self):
        self.tracker.advance('o1', OrderStatus.SHIPPED, actor=ADMIN)

        with self.assertRaises(InvalidStatusTransitionError):
            self.tracker.advance('o1', OrderStatus.PROCESSING, actor=ADMIN)

    def test_cancelado_e_terminal(self):
        self.tracker.advance('o1', OrderStatus.CANCELLED, actor=ADMIN)

        with self.assertRaises(InvalidStatusTransitionError):
            self.tracker.advance('o1', OrderStatus.SHIPPED, actor=ADMIN)

    def test_modo_permissivo_aceita_qualquer_transicao(self):
        tracker = StatusTracker(self.repo, clock=self.clock, strict_transitions=False)
        tracker.advance('o1', OrderStatus.DELIVERED, actor=ADMIN)

        order = tracker.advance('o1', OrderStatus.PROCESSING, actor=ADMIN)

        self.assertEqual(order.status, OrderStatus.PROCESSING)
        self.assertEqual(len(order.status_history), 3)

    def test_transicao_validada_contra_o_estado_travado(self):
        """
        Cenário: Dois admins ao mesmo tempo. Enquanto um cancela o pedido já
        enviado, o outro marca como entregue; só a primeira gravação vale.
        """
        # ARRANGE
        self.tracker.advance('o1', OrderStatus.SHIPPED, actor=ADMIN)
        repo = ConcurrentAdminOrderRepository(self.repo, OrderStatus.DELIVERED, T0 + timedelta(hours=2))
        tracker = StatusTracker(repo, clock=self.clock)

        # ACT / ASSERT
        with self.assertRaises(InvalidStatusTransitionError):
            tracker.advance('o1', OrderStatus.CANCELLED, actor=ADMIN)

        order = self.repo.get_by_id('o1')
        self.assertEqual(order.status, OrderStatus.DELIVERED)
        self.assertEqual(
            [c.status for c in order.status_history],
            [OrderStatus.PAID, OrderStatus.SHIPPED, OrderStatus.DELIVERED],
        )

    def test_sincroniza_o_historico_local(self):
        """
        Cenário: O cliente guardou o pedido como Pago; o admin já enviou.
        """
        # ARRANGE
        history = OrderHistory(MemoryStorage())
        history.prepend(make_order('o-outro-dispositivo'))
        history.prepend(self.repo.get_by_id('o1'))
        self.tracker.advance('o1', OrderStatus.SHIPPED, actor=ADMIN)

        # ACT
        orders = self.tracker.sync_history(history)

        # ASSERT: a ordem é mantida e pedidos que o repositório não conhece ficam como estão
        self.assertEqual([o.id for o in orders], ['o1', 'o-outro-dispositivo'])
        self.assertEqual(history.last_order().status, OrderStatus.SHIPPED)
        self.assertEqual(history.orders()[1].status, OrderStatus.PAID)

    def test_pedidos_do_usuario_mais_recentes_primeiro(self):
        self.repo.create(make_order('o2', created_at=T0 + timedelta(days=1)))
        self.repo.create(make_order('o3', user_id='outro'))

        orders = self.tracker.orders_for('u1')

        self.assertEqual([o.id for o in orders], ['o2', 'o1'])

    def test_todos_os_pedidos_com_filtro_de_status(self):
        self.repo.create(make_order('o2', status=OrderStatus.SHIPPED))

        shipped = self.tracker.all_orders(ADMIN, status=OrderStatus.SHIPPED)

        self.assertEqual([o.id for o in shipped], ['o2'])
        self.assertEqual(len(self.tracker.all_orders(ADMIN)), 2)
        with self.assertRaises(AccessDeniedError):
            self.tracker.all_orders(CUSTOMER)


class TestStatusAfterCatalogChange(unittest.TestCase):

    def setUp(self):
        self.products = ProductRepository([make_ring(size7_stock=2, size8_stock=1)])
        self.orders = OrderRepository()
        storage = MemoryStorage()
        self.cart = CartManager(storage, user=CUSTOMER)
        self.engine = OrderEngine(
            TransactionRunner(self.products, self.orders), self.cart, OrderHistory(storage),
            clock=FixedClock(T0),
        )
        self.tracker = StatusTracker(self.orders, clock=FixedClock(T0 + timedelta(days=1)))

    def test_variante_removida_nao_impede_o_envio(self):
        """
        Cenário: Pedido do anel tamanho 8; depois o admin remove essa variante
        do catálogo. O pedido continua avançando com o snapshot original.
        """
        # ARRANGE
        ring = self.products.get_by_id('r1')
        self.cart.add_item(ring, ring.find_variant('v8'))
        order = self.engine.place_order(checkout_details(), actor=CUSTOMER)

        ring = self.products.get_by_id('r1')
        ring.variants = [v for v in ring.variants if v.id != 'v8']
        self.products.save(ring)

        # ACT
        shipped = self.tracker.advance(order.id, OrderStatus.SHIPPED, actor=ADMIN)

        # ASSERT
        self.assertEqual(shipped.status, OrderStatus.SHIPPED)
        self.assertEqual(shipped.status_history[-1].timestamp, T0 + timedelta(days=1))
        self.assertEqual(shipped.items[0].selected_variant.id, 'v8')
        self.assertEqual(shipped.total, 4700000)
        self.assertIsNone(self.products.get_by_id('r1').find_variant('v8'))


if __name__ == '__main__':
    unittest.main()
