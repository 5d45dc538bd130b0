from django.db import migrations, models
import django.db.models.deletion

STATUS_CHOICES = [
    ('Pending Payment', 'Pending Payment'),
    ('Paid', 'Paid'),
    ('Processing', 'Processing'),
    ('Shipped', 'Shipped'),
    ('Delivered', 'Delivered'),
    ('Cancelled', 'Cancelled'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.CharField(max_length=64, primary_key=True, serialize=False)),
                ('user_id', models.CharField(db_index=True, max_length=150, verbose_name='Cliente')),
                ('items', models.JSONField(default=list, verbose_name='Itens')),
                ('total', models.PositiveIntegerField(verbose_name='Total')),
                ('created_at', models.DateTimeField(verbose_name='Data do Pedido')),
                ('customer_name', models.CharField(max_length=255, verbose_name='Nome')),
                ('email', models.EmailField(max_length=254, verbose_name='E-mail')),
                ('shipping_address', models.TextField(verbose_name='Endereço de Entrega')),
                ('payment_id', models.CharField(blank=True, max_length=255, null=True, verbose_name='ID Pagamento')),
                ('status', models.CharField(choices=STATUS_CHOICES, max_length=20, verbose_name='Status')),
            ],
            options={
                'verbose_name': 'Pedido',
                'verbose_name_plural': 'Pedidos',
                'db_table': 'orders_order',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='OrderStatusEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=STATUS_CHOICES, max_length=20)),
                ('timestamp', models.DateTimeField()),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='status_history', to='orders.order')),
            ],
            options={
                'verbose_name': 'Histórico de Status',
                'verbose_name_plural': 'Históricos de Status',
                'db_table': 'orders_status_entry',
                'ordering': ['timestamp', 'id'],
            },
        ),
    ]
