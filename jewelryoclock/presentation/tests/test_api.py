from unittest.mock import patch

from django.conf import settings
from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from jewelryoclock.catalog.models import Product as ProductModel, Variant as VariantModel
from jewelryoclock.core import dependency_injection
from jewelryoclock.core.tests.builders import make_ring, make_watch
from jewelryoclock.infrastructure.repositories import ProductRepositoryDjango
from jewelryoclock.orders.models import Order as OrderModel

PASSWORD = 'Sup3rSecret!'


class StoreAPITestCase(TestCase):
    """Base: catálogo semeado no banco, um cliente e o administrador."""

    def setUp(self):
        repo = ProductRepositoryDjango()
        repo.save(make_watch(stock=2))
        repo.save(make_ring(size7_stock=2, size8_stock=1))
        dependency_injection.get_catalog_store().refresh()

        User = get_user_model()
        User.objects.create_user(username='ada@example.com', email='ada@example.com',
                                 password=PASSWORD, first_name='Ada')
        User.objects.create_user(username='admin@jewelryoclock.com', email='admin@jewelryoclock.com',
                                 password=PASSWORD)
        self.client = APIClient()

    def login(self, email='ada@example.com'):
        self.assertTrue(self.client.login(username=email, password=PASSWORD))


# ====================================================================
# CATÁLOGO E CARRINHO
# ====================================================================

class CatalogAPITest(StoreAPITestCase):

    def test_listar_produtos(self):
        response = self.client.get('/api/products/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['offline'])
        self.assertEqual(sorted(p['id'] for p in response.data['products']), ['r1', 'w1'])

    def test_filtrar_por_categoria(self):
        response = self.client.get('/api/products/', {'category': 'Rings'})

        self.assertEqual([p['id'] for p in response.data['products']], ['r1'])

    def test_detalhe_de_produto_inexistente(self):
        response = self.client.get('/api/products/nao-existe/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class CartAPITest(StoreAPITestCase):

    def test_convidado_monta_carrinho_na_sessao(self):
        self.client.post('/api/cart/', {'product_id': 'w1'}, format='json')
        response = self.client.post('/api/cart/', {'product_id': 'r1', 'variant_id': 'v8'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['count'], 2)
        self.assertEqual(response.data['subtotal'], 100000 + 4700000)
        self.assertEqual(self.client.get('/api/cart/').data['count'], 2)

    def test_produto_com_variantes_exige_selecao(self):
        response = self.client.post('/api/cart/', {'product_id': 'r1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_nao_passa_do_estoque(self):
        for _ in range(3):
            response = self.client.post('/api/cart/', {'product_id': 'w1'}, format='json')

        self.assertEqual(response.data['count'], 2)

    def test_alterar_quantidade_e_remover(self):
        self.client.post('/api/cart/', {'product_id': 'w1'}, format='json')

        response = self.client.patch('/api/cart/w1/', {'quantity': 2}, format='json')
        self.assertEqual(response.data['count'], 2)

        response = self.client.patch('/api/cart/w1/', {'quantity': 0}, format='json')
        self.assertEqual(response.data['items'], [])

    def test_admin_recusado_no_carrinho(self):
        self.login('admin@jewelryoclock.com')

        response = self.client.post('/api/cart/', {'product_id': 'w1'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.client.get('/api/cart/').data['count'], 0)


# ====================================================================
# CHECKOUT E PEDIDOS
# ====================================================================

CHECKOUT = {
    'first_name': 'Ada', 'last_name': 'Lovelace',
    'address': '1 Main St', 'city': 'London', 'zip': 'N1',
}


class CheckoutAPITest(StoreAPITestCase):

    def test_checkout_com_sucesso(self):
        """
        Cenário: Cliente compra duas unidades do relógio e uma variante do anel.
        """
        # ARRANGE
        self.login()
        self.client.post('/api/cart/', {'product_id': 'w1'}, format='json')
        self.client.post('/api/cart/', {'product_id': 'w1'}, format='json')
        self.client.post('/api/cart/', {'product_id': 'r1', 'variant_id': 'v7'}, format='json')

        # ACT
        response = self.client.post('/api/checkout/', CHECKOUT, format='json')

        # ASSERT
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data['status'], 'Paid')
        self.assertEqual(response.data['total'], 2 * 100000 + 4500000)
        self.assertEqual(response.data['customer_name'], 'Ada Lovelace')
        self.assertEqual(response.data['shipping_address'], '1 Main St, London N1')
        self.assertTrue(response.data['payment_id'].startswith('pi_'))

        self.assertEqual(ProductModel.objects.get(pk='w1').stock, 0)
        self.assertEqual(VariantModel.objects.get(product_id='r1', code='v7').stock, 1)
        self.assertEqual(VariantModel.objects.get(product_id='r1', code='v8').stock, 1)
        self.assertEqual(OrderModel.objects.get().status_history.count(), 1)

        self.assertEqual(self.client.get('/api/cart/').data['count'], 0)
        last = self.client.get('/api/orders/last/')
        self.assertEqual(last.data['id'], response.data['id'])
        self.assertEqual(last.data['tax'], round(response.data['total'] * settings.TAX_RATE, 2))
        mine = self.client.get('/api/orders/')
        self.assertEqual([o['id'] for o in mine.data], [response.data['id']])

    def test_estoque_insuficiente_no_checkout(self):
        self.login()
        self.client.post('/api/cart/', {'product_id': 'w1'}, format='json')
        self.client.post('/api/cart/', {'product_id': 'w1'}, format='json')
        ProductModel.objects.filter(pk='w1').update(stock=1)

        response = self.client.post('/api/checkout/', CHECKOUT, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Insufficient stock for "Classic Watch". Available: 1')
        self.assertEqual(OrderModel.objects.count(), 0)
        self.assertEqual(self.client.get('/api/cart/').data['count'], 2)

    def test_checkout_com_carrinho_vazio(self):
        self.login()
        response = self.client.post('/api/checkout/', CHECKOUT, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_checkout_exige_login(self):
        response = self.client.post('/api/checkout/', CHECKOUT, format='json')
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_admin_nao_finaliza_compra(self):
        self.login('admin@jewelryoclock.com')
        response = self.client.post('/api/checkout/', CHECKOUT, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


# ====================================================================
# ADMINISTRAÇÃO
# ====================================================================

class AdminAPITest(StoreAPITestCase):

    def place_order(self):
        self.login()
        self.client.post('/api/cart/', {'product_id': 'w1'}, format='json')
        order_id = self.client.post('/api/checkout/', CHECKOUT, format='json').data['id']
        self.client.logout()
        return order_id

    def test_cliente_nao_acessa_admin(self):
        self.login()
        response = self.client.get('/api/admin/orders/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_papel_de_admin_ignora_maiusculas_no_email(self):
        """
        Cenário: O e-mail do admin foi cadastrado com maiúsculas.
        """
        get_user_model().objects.create_user(
            username='boss', email='Admin@JewelryOClock.com', password=PASSWORD,
        )
        self.assertTrue(self.client.login(username='boss', password=PASSWORD))

        self.assertEqual(self.client.get('/api/admin/orders/').status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.post('/api/checkout/', CHECKOUT, format='json').status_code,
                         status.HTTP_403_FORBIDDEN)

    def test_criar_produto_com_opcoes_em_texto(self):
        self.login('admin@jewelryoclock.com')
        payload = {
            'name': 'Pearl Drops', 'price': 250000, 'category': 'Earrings', 'description': '',
            'variants': [
                {'id': 'p1', 'name': 'Gold', 'price': 250000, 'stock': 3, 'options_text': 'Material:Gold'},
                {'id': 'p2', 'name': 'Silver', 'price': 200000, 'stock': 1, 'options': {'Material': 'Silver'}},
            ],
        }

        response = self.client.post('/api/admin/products/', payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        product_id = response.data['id']
        self.assertEqual(response.data['variants'][0]['options'], {'Material': 'Gold'})
        self.assertEqual(self.client.get(f'/api/products/{product_id}/').data['name'], 'Pearl Drops')

    def test_opcoes_repetidas_sao_recusadas(self):
        self.login('admin@jewelryoclock.com')
        payload = {
            'name': 'Pearl Drops', 'price': 250000, 'category': 'Earrings',
            'variants': [
                {'id': 'p1', 'name': 'A', 'price': 1, 'stock': 1, 'options_text': 'Material:Gold'},
                {'id': 'p2', 'name': 'B', 'price': 1, 'stock': 1, 'options_text': 'Material:Gold'},
            ],
        }

        response = self.client.post('/api/admin/products/', payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_atualizar_e_remover_produto(self):
        self.login('admin@jewelryoclock.com')

        response = self.client.put(
            '/api/admin/products/w1/',
            {'name': 'Classic Watch II', 'price': 110000, 'category': 'Watches', 'stock': 4},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(ProductModel.objects.get(pk='w1').name, 'Classic Watch II')

        response = self.client.delete('/api/admin/products/w1/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(ProductModel.objects.filter(pk='w1').exists())

        response = self.client.delete('/api/admin/products/w1/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_avancar_status_do_pedido(self):
        order_id = self.place_order()
        self.login('admin@jewelryoclock.com')

        response = self.client.post(f'/api/admin/orders/{order_id}/status/', {'status': 'Shipped'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([c['status'] for c in response.data['status_history']], ['Paid', 'Shipped'])

        shipped = self.client.get('/api/admin/orders/', {'status': 'Shipped'})
        self.assertEqual([o['id'] for o in shipped.data], [order_id])

        back = self.client.post(f'/api/admin/orders/{order_id}/status/', {'status': 'Paid'}, format='json')
        self.assertEqual(back.status_code, status.HTTP_400_BAD_REQUEST)

    def test_ultimo_pedido_reflete_o_status_atual(self):
        """
        Cenário: O admin envia o pedido; o cliente reabre a página do último pedido.
        """
        # ARRANGE
        customer = APIClient()
        customer.login(username='ada@example.com', password=PASSWORD)
        customer.post('/api/cart/', {'product_id': 'w1'}, format='json')
        order_id = customer.post('/api/checkout/', CHECKOUT, format='json').data['id']

        admin = APIClient()
        admin.login(username='admin@jewelryoclock.com', password=PASSWORD)
        admin.post(f'/api/admin/orders/{order_id}/status/', {'status': 'Shipped'}, format='json')

        # ACT
        last = customer.get('/api/orders/last/')

        # ASSERT
        self.assertEqual(last.data['id'], order_id)
        self.assertEqual(last.data['status'], 'Shipped')
        self.assertEqual(len(last.data['status_history']), 2)

    def test_status_de_pedido_inexistente(self):
        self.login('admin@jewelryoclock.com')
        response = self.client.post('/api/admin/orders/x/status/', {'status': 'Shipped'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_sugestao_de_descricao_sem_chave(self):
        self.login('admin@jewelryoclock.com')

        with patch.object(dependency_injection.description_gateway, 'api_key', ''):
            response = self.client.post(
                '/api/admin/products/suggest-description/',
                {'name': 'Halo Ring', 'category': 'Rings'}, format='json',
            )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['description'].startswith('API Key missing'))

    def test_sugestao_exige_nome(self):
        self.login('admin@jewelryoclock.com')
        response = self.client.post(
            '/api/admin/products/suggest-description/', {'name': ' ', 'category': 'Rings'}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


# ====================================================================
# AUTENTICAÇÃO
# ====================================================================

class AuthAPITest(StoreAPITestCase):

    def test_cadastro_e_usuario_atual(self):
        response = self.client.post(
            '/api/auth/register/',
            {'name': 'Grace Hopper', 'email': 'grace@example.com', 'password': PASSWORD},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        me = self.client.get('/api/auth/me/')
        self.assertTrue(me.data['authenticated'])
        self.assertEqual(me.data['user']['name'], 'Grace Hopper')
        self.assertEqual(me.data['user']['role'], 'customer')

    def test_cadastro_com_email_repetido(self):
        response = self.client.post(
            '/api/auth/register/',
            {'name': 'Ada', 'email': 'ada@example.com', 'password': PASSWORD},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])

    def test_login_do_admin_tem_papel_admin(self):
        response = self.client.post(
            '/api/auth/login/', {'email': 'admin@jewelryoclock.com', 'password': PASSWORD}, format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['user']['role'], 'admin')

    def test_login_invalido(self):
        response = self.client.post(
            '/api/auth/login/', {'email': 'ada@example.com', 'password': 'errada'}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid email or password.')

    def test_logout(self):
        self.login()
        self.client.post('/api/auth/logout/')
        self.assertFalse(self.client.get('/api/auth/me/').data['authenticated'])

    def test_logout_mantem_carrinho_e_ultimo_pedido(self):
        """
        Cenário: Cliente compra, volta a adicionar um item e sai da conta.
        """
        # ARRANGE
        self.login()
        self.client.post('/api/cart/', {'product_id': 'w1'}, format='json')
        order_id = self.client.post('/api/checkout/', CHECKOUT, format='json').data['id']
        self.client.post('/api/cart/', {'product_id': 'r1', 'variant_id': 'v7'}, format='json')

        # ACT
        self.client.post('/api/auth/logout/')

        # ASSERT
        self.assertFalse(self.client.get('/api/auth/me/').data['authenticated'])
        self.assertEqual(self.client.get('/api/cart/').data['count'], 1)
        last = self.client.get('/api/orders/last/')
        self.assertEqual(last.status_code, status.HTTP_200_OK)
        self.assertEqual(last.data['id'], order_id)

    def test_login_federado_nao_habilitado(self):
        response = self.client.post('/api/auth/federated/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Federated sign-in is not enabled.')

    def test_token_jwt(self):
        response = self.client.post(
            '/api/auth/token/', {'username': 'ada@example.com', 'password': PASSWORD}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        self.assertEqual(client.get('/api/auth/me/').data['user']['email'], 'ada@example.com')
