# Configuração da interface administrativa do Django para os modelos da loja.

from django.contrib import admin

from jewelryoclock.catalog.models import Product, Variant
from jewelryoclock.orders.models import Order, OrderStatusEntry


# ====================================================================
# 1. CATÁLOGO
# ====================================================================

class VariantInline(admin.TabularInline):
    """Permite editar as Variantes diretamente na página do Produto."""
    model = Variant
    extra = 1
    fields = ('code', 'name', 'price', 'stock', 'options', 'position')


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'category', 'price', 'stock', 'version', 'updated_at')
    list_filter = ('category',)
    search_fields = ('id', 'name', 'description')
    readonly_fields = ('version', 'created_at', 'updated_at')
    inlines = [VariantInline]


# ====================================================================
# 2. PEDIDOS
# ====================================================================

class OrderStatusEntryInline(admin.TabularInline):
    # Histórico só cresce: nada de editar ou apagar entradas por aqui
    model = OrderStatusEntry
    extra = 0
    readonly_fields = ('status', 'timestamp')
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('id', 'customer_name', 'email', 'total', 'status', 'created_at')
    list_filter = ('status', 'created_at')
    search_fields = ('id', 'customer_name', 'email', 'user_id', 'payment_id')
    readonly_fields = ('id', 'user_id', 'items', 'total', 'created_at', 'payment_id', 'status')
    inlines = [OrderStatusEntryInline]
