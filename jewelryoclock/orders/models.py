from django.db import models

from jewelryoclock.core.entities import OrderStatus

STATUS_CHOICES = [(s.value, s.value) for s in OrderStatus]


class Order(models.Model):
    """
    Pedido confirmado. Os itens são uma cópia congelada do carrinho (JSON),
    independente de alterações posteriores no catálogo.
    """
    id = models.CharField(max_length=64, primary_key=True)
    # Identificador do provedor de identidade; sem FK para não acoplar ao modelo de usuário
    user_id = models.CharField(max_length=150, db_index=True, verbose_name="Cliente")
    items = models.JSONField(default=list, verbose_name="Itens")
    total = models.PositiveIntegerField(verbose_name="Total")
    created_at = models.DateTimeField(verbose_name="Data do Pedido")
    customer_name = models.CharField(max_length=255, verbose_name="Nome")
    email = models.EmailField(verbose_name="E-mail")
    shipping_address = models.TextField(verbose_name="Endereço de Entrega")
    payment_id = models.CharField(max_length=255, blank=True, null=True, verbose_name="ID Pagamento")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, verbose_name="Status")

    class Meta:
        verbose_name = 'Pedido'
        verbose_name_plural = 'Pedidos'
        db_table = 'orders_order'
        ordering = ['-created_at']

    def __str__(self):
        return f"Pedido {self.id} - {self.customer_name} - {self.status}"


class OrderStatusEntry(models.Model):
    """Registro do histórico de status. Só recebe inserções."""
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='status_history')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES)
    timestamp = models.DateTimeField()

    class Meta:
        verbose_name = 'Histórico de Status'
        verbose_name_plural = 'Históricos de Status'
        db_table = 'orders_status_entry'
        ordering = ['timestamp', 'id']

    def __str__(self):
        return f"{self.order_id}: {self.status} @ {self.timestamp:%Y-%m-%d %H:%M}"
