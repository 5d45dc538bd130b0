import unittest
from unittest.mock import Mock, patch

import requests

from jewelryoclock.infrastructure.gateways import GeminiDescriptionGateway


class GeminiDescriptionGatewayTest(unittest.TestCase):

    def setUp(self):
        self.gateway = GeminiDescriptionGateway(api_key='chave-teste', model='gemini-2.5-flash', timeout=5)

    def test_sem_chave_retorna_texto_padrao(self):
        gateway = GeminiDescriptionGateway(api_key='')

        with patch('jewelryoclock.infrastructure.gateways.requests.post') as post:
            text = gateway.generate('Ring', 'Rings', 'gold')

        self.assertEqual(text, GeminiDescriptionGateway.MISSING_KEY_MESSAGE)
        post.assert_not_called()

    @patch('jewelryoclock.infrastructure.gateways.requests.post')
    def test_descricao_gerada(self, post):
        response = Mock()
        response.json.return_value = {
            'candidates': [{'content': {'parts': [{'text': ' A radiant halo ring. '}]}}],
        }
        post.return_value = response

        text = self.gateway.generate('Halo Ring', 'Rings', 'luxury, gold')

        self.assertEqual(text, 'A radiant halo ring.')
        url = post.call_args[0][0]
        self.assertTrue(url.endswith('/models/gemini-2.5-flash:generateContent'))
        self.assertEqual(post.call_args[1]['headers']['x-goog-api-key'], 'chave-teste')
        prompt = post.call_args[1]['json']['contents'][0]['parts'][0]['text']
        self.assertIn('Product Name: Halo Ring', prompt)
        self.assertIn('Keywords/Features: luxury, gold', prompt)

    @patch('jewelryoclock.infrastructure.gateways.requests.post')
    def test_erro_de_conexao_retorna_mensagem_fixa(self, post):
        post.side_effect = requests.exceptions.ConnectionError('offline')

        self.assertEqual(self.gateway.generate('Ring', 'Rings', ''), GeminiDescriptionGateway.ERROR_MESSAGE)

    @patch('jewelryoclock.infrastructure.gateways.requests.post')
    def test_resposta_vazia(self, post):
        post.return_value.json.return_value = {'candidates': []}

        self.assertEqual(self.gateway.generate('Ring', 'Rings', ''), GeminiDescriptionGateway.EMPTY_MESSAGE)


if __name__ == '__main__':
    unittest.main()
