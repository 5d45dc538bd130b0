from django.apps import AppConfig


class PresentationConfig(AppConfig):
    name = 'jewelryoclock.presentation'
    label = 'presentation'
    verbose_name = 'API da Loja'
