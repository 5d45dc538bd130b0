from django.apps import AppConfig


class CatalogConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'jewelryoclock.catalog'
    label = 'catalog'
    verbose_name = 'Catálogo de Jóias'

    def ready(self):
        from jewelryoclock.catalog import signals  # noqa: F401
