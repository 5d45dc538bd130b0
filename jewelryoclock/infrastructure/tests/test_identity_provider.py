from django.contrib.auth import get_user_model, login
from django.contrib.auth.models import AnonymousUser
from django.contrib.sessions.backends.db import SessionStore
from django.test import RequestFactory, TestCase

from jewelryoclock.core.exceptions import AuthFailureError, AuthProviderError
from jewelryoclock.infrastructure.gateways import DjangoIdentityProvider

PASSWORD = 'Sup3rSecret!'


class DjangoIdentityProviderTest(TestCase):

    def setUp(self):
        self.user = get_user_model().objects.create_user(
            username='ada@example.com', email='ada@example.com', password=PASSWORD, first_name='Ada',
        )
        self.request = RequestFactory().post('/')
        self.request.session = SessionStore()
        self.request.user = AnonymousUser()
        self.provider = DjangoIdentityProvider(self.request, preserved_keys=('jo_cart', 'jo_orders'))

    def test_credenciais_invalidas(self):
        """
        Cenário: Senha errada. O provedor recusa com o erro de credenciais.
        """
        with self.assertRaises(AuthFailureError) as ctx:
            self.provider.sign_in('ada@example.com', 'errada')

        self.assertIsInstance(ctx.exception, AuthProviderError)
        self.assertEqual(ctx.exception.code, 'invalid-credential')
        self.assertFalse(self.request.user.is_authenticated)

    def test_login_com_sucesso(self):
        principal = self.provider.sign_in('ada@example.com', PASSWORD)

        self.assertEqual(principal.uid, str(self.user.pk))
        self.assertEqual(self.provider.current_principal().email, 'ada@example.com')

    def test_logout_preserva_os_slots_locais(self):
        """
        Cenário: O cliente sai da conta com itens no carrinho e um pedido recente.
        """
        # ARRANGE
        login(self.request, self.user, backend='django.contrib.auth.backends.ModelBackend')
        self.request.session['jo_cart'] = '[{"quantity": 1}]'
        self.request.session['jo_orders'] = '[]'
        self.request.session['outro'] = 'x'

        # ACT
        self.provider.sign_out()

        # ASSERT
        self.assertIsNone(self.provider.current_principal())
        self.assertEqual(self.request.session.get('jo_cart'), '[{"quantity": 1}]')
        self.assertEqual(self.request.session.get('jo_orders'), '[]')
        self.assertNotIn('outro', self.request.session)
