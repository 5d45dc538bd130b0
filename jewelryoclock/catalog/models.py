from django.db import models
from django.db.models import F

from jewelryoclock.core.entities import Category

CATEGORY_CHOICES = [(c.value, c.value) for c in Category]


# ====================================================================
# 1. Produto
# ====================================================================

class Product(models.Model):
    """Produto do catálogo. `version` cresce a cada gravação (controle otimista)."""
    id = models.CharField(max_length=64, primary_key=True)
    name = models.CharField(max_length=255, verbose_name="Nome")
    price = models.PositiveIntegerField(verbose_name="Preço")
    description = models.TextField(blank=True, verbose_name="Descrição")
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, verbose_name="Categoria")
    image = models.URLField(max_length=500, blank=True, verbose_name="Imagem")
    # Ignorado quando o produto tem variantes
    stock = models.PositiveIntegerField(default=0, verbose_name="Estoque")
    version = models.PositiveIntegerField(default=1, editable=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Produto"
        verbose_name_plural = "Produtos"
        db_table = 'catalog_product'
        ordering = ['name']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        bump = not self._state.adding
        if bump:
            self.version = F('version') + 1
            if kwargs.get('update_fields') is not None:
                kwargs['update_fields'] = set(kwargs['update_fields']) | {'version'}
        super().save(*args, **kwargs)
        if bump:
            self.refresh_from_db(fields=['version'])


# ====================================================================
# 2. Variante
# ====================================================================

class Variant(models.Model):
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='variants')
    code = models.CharField(max_length=64, verbose_name="Identificador")
    name = models.CharField(max_length=255, verbose_name="Nome")
    price = models.PositiveIntegerField(verbose_name="Preço")
    stock = models.PositiveIntegerField(default=0, verbose_name="Estoque")
    options = models.JSONField(default=dict, blank=True, verbose_name="Opções")
    position = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name = "Variante"
        verbose_name_plural = "Variantes"
        db_table = 'catalog_variant'
        unique_together = ('product', 'code')
        ordering = ['position', 'id']

    def __str__(self):
        return f"{self.product.name} - {self.name}"

    def save(self, *args, **kwargs):
        super().save(*args, **kwargs)
        # Alterar uma variante altera o documento do produto
        Product.objects.filter(pk=self.product_id).update(version=F('version') + 1)
