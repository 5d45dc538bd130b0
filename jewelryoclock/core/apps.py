# jewelryoclock/core/apps.py

from django.apps import AppConfig


class CoreConfig(AppConfig):
    name = 'jewelryoclock.core'
    label = 'core'
    verbose_name = 'Camada de Entidades e Lógica (Core)'
    # Sem modelos: a persistência fica com os apps catalog e orders
    default_auto_field = 'django.db.models.BigAutoField'
