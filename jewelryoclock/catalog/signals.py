"""
Gravações feitas fora da loja (ex: site de administração do Django) também
atualizam o catálogo em memória, depois do commit.
"""
from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from jewelryoclock.catalog.models import Product, Variant


def _refresh_catalog():
    from jewelryoclock.core.dependency_injection import get_catalog_store
    get_catalog_store().refresh()


@receiver(post_save, sender=Product)
@receiver(post_delete, sender=Product)
@receiver(post_save, sender=Variant)
@receiver(post_delete, sender=Variant)
def catalog_changed(sender, **kwargs):
    if kwargs.get('raw'):
        return
    transaction.on_commit(_refresh_catalog)
