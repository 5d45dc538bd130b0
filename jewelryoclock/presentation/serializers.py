import time
import uuid

from rest_framework import serializers

from jewelryoclock.core.constants import DEFAULT_DESCRIPTION_KEYWORDS
from jewelryoclock.core.entities import Category, CheckoutDetails, OrderStatus, Product, Variant
from jewelryoclock.core.use_cases import parse_variant_options

CATEGORY_CHOICES = [c.value for c in Category]
STATUS_CHOICES = [s.value for s in OrderStatus]


# ====================================================================
# SERIALIZERS DO CATÁLOGO (entrada do admin)
# ====================================================================

class VariantSerializer(serializers.Serializer):
    """
    Variante enviada pelo admin. As opções podem vir como objeto ou como
    texto no formato "Size:7, Material:Gold".
    """
    id = serializers.CharField(max_length=64, required=False, allow_blank=True)
    name = serializers.CharField(max_length=255)
    price = serializers.IntegerField(min_value=0)
    stock = serializers.IntegerField(min_value=0)
    options = serializers.DictField(child=serializers.CharField(), required=False)
    options_text = serializers.CharField(required=False, allow_blank=True, write_only=True)

    def validate(self, attrs):
        text = attrs.pop('options_text', '')
        options = attrs.get('options') or parse_variant_options(text)
        if not options:
            raise serializers.ValidationError("A variant needs at least one option (e.g. Size:7).")
        attrs['options'] = options
        return attrs


class ProductSerializer(serializers.Serializer):
    id = serializers.CharField(max_length=64, required=False, allow_blank=True)
    name = serializers.CharField(max_length=255)
    price = serializers.IntegerField(min_value=0)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    category = serializers.ChoiceField(choices=CATEGORY_CHOICES)
    image = serializers.URLField(max_length=500, required=False, allow_blank=True, default='')
    stock = serializers.IntegerField(min_value=0, required=False, default=0)
    variants = VariantSerializer(many=True, required=False)

    def to_entity(self, product_id=None) -> Product:
        data = self.validated_data
        return Product(
            id=product_id or data.get('id') or '',
            name=data['name'],
            price=data['price'],
            description=data.get('description', ''),
            category=Category(data['category']),
            image=data.get('image', ''),
            stock=data.get('stock', 0),
            variants=[
                Variant(
                    id=v.get('id') or f"v-{uuid.uuid4().hex[:8]}",
                    name=v['name'],
                    price=v['price'],
                    stock=v['stock'],
                    options=v['options'],
                )
                for v in data.get('variants') or []
            ],
        )


class DescriptionSuggestionSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, allow_blank=True)
    category = serializers.ChoiceField(choices=CATEGORY_CHOICES)
    keywords = serializers.CharField(required=False, allow_blank=True, default=DEFAULT_DESCRIPTION_KEYWORDS)


# ====================================================================
# SERIALIZERS PARA O CARRINHO
# ====================================================================

class CartAddSerializer(serializers.Serializer):
    product_id = serializers.CharField(max_length=64)
    variant_id = serializers.CharField(max_length=64, required=False, allow_blank=True)


class CartQuantitySerializer(serializers.Serializer):
    quantity = serializers.IntegerField()


# ====================================================================
# SERIALIZERS PARA CHECKOUT E PEDIDOS
# ====================================================================

def mock_payment_id() -> str:
    """Referência de pagamento simulada (não há integração com gateway de cartão)."""
    return f"pi_{uuid.uuid4().hex[:9]}_mock_{int(time.time() * 1000)}"


class CheckoutSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    address = serializers.CharField(max_length=255)
    city = serializers.CharField(max_length=100)
    zip = serializers.CharField(max_length=20)
    payment_id = serializers.CharField(max_length=255, required=False, allow_blank=True)

    def to_details(self, user) -> CheckoutDetails:
        data = self.validated_data
        return CheckoutDetails(
            user_id=user.id,
            name=f"{data['first_name']} {data['last_name']}",
            email=user.email,
            address=f"{data['address']}, {data['city']} {data['zip']}",
            payment_id=data.get('payment_id') or mock_payment_id(),
        )


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=STATUS_CHOICES)


# ====================================================================
# SERIALIZERS DE AUTENTICAÇÃO
# ====================================================================

class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class RegisterSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
