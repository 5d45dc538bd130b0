from django.core.management.base import BaseCommand

from jewelryoclock.core.constants import INITIAL_PRODUCTS
from jewelryoclock.infrastructure.repositories import ProductRepositoryDjango


class Command(BaseCommand):
    help = 'Carrega o catálogo inicial de jóias (produtos e variantes)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--overwrite',
            action='store_true',
            help='Substitui produtos que já existem com o mesmo id.',
        )

    def handle(self, *args, **options):
        self.stdout.write('Criando dados iniciais...')
        repo = ProductRepositoryDjango()

        for product in INITIAL_PRODUCTS:
            if repo.get_by_id(product.id) and not options['overwrite']:
                self.stdout.write(f'Produto "{product.name}" já existe, ignorado')
                continue
            repo.save(product)
            self.stdout.write(self.style.SUCCESS(f'Criado produto "{product.name}"'))

        self.stdout.write(self.style.SUCCESS('Dados iniciais carregados com sucesso!'))
