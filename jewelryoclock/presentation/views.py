# jewelryoclock/presentation/views.py
"""
Views da API da loja: catálogo, carrinho, checkout e pedidos do cliente.
As views só traduzem HTTP <-> casos de uso; as regras ficam no Core.
"""
import logging
from typing import Optional

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from jewelryoclock.core.dependency_injection import (
    get_cart_manager,
    get_catalog_store,
    get_identity_gate,
    get_order_engine,
    get_order_history,
    get_status_tracker,
)
from jewelryoclock.core.entities import Category, User
from jewelryoclock.core.exceptions import (
    AccessDeniedError,
    BaseCoreError,
    CommitConflictError,
    ItemNotFoundError,
    PersistenceUnavailableError,
)
from jewelryoclock.core.serializers import cart_item_to_dict, order_to_dict, product_to_dict

from .permissions import IsShopper
from .serializers import CartAddSerializer, CartQuantitySerializer, CheckoutSerializer

logger = logging.getLogger(__name__)


# ====================================================================
# HELPERS
# ====================================================================

_STATUS_BY_ERROR = [
    (AccessDeniedError, status.HTTP_403_FORBIDDEN),
    (ItemNotFoundError, status.HTTP_404_NOT_FOUND),
    (CommitConflictError, status.HTTP_409_CONFLICT),
    (PersistenceUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def error_response(exc: BaseCoreError) -> Response:
    """Converte uma exceção do Core em resposta JSON com a mensagem legível."""
    code = next((c for cls, c in _STATUS_BY_ERROR if isinstance(exc, cls)), status.HTTP_400_BAD_REQUEST)
    return Response({'message': exc.message}, status=code)


def current_user(request) -> Optional[User]:
    return get_identity_gate(request).current_user()


def cart_payload(cart) -> dict:
    summary = cart.summary()
    return {
        'items': [cart_item_to_dict(i) for i in cart.items],
        'count': cart.count(),
        'subtotal': summary.subtotal,
        'tax': summary.tax,
        'total': summary.total,
    }


# ====================================================================
# CATÁLOGO
# ====================================================================

class ProductListAPIView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        store = get_catalog_store()
        products = store.products

        category = request.query_params.get('category')
        if category:
            if category not in {c.value for c in Category}:
                return Response({'message': f'Unknown category "{category}".'}, status=status.HTTP_400_BAD_REQUEST)
            products = [p for p in products if p.category.value == category]

        return Response({
            'offline': store.offline,
            'products': [product_to_dict(p) for p in products],
        })


class ProductDetailAPIView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, product_id):
        product = get_catalog_store().get_product(product_id)
        if product is None:
            return Response({'message': 'Product not found.'}, status=status.HTTP_404_NOT_FOUND)
        return Response(product_to_dict(product))


# ====================================================================
# CARRINHO (sessão; convidados também podem montar o carrinho)
# ====================================================================

class CartAPIView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        return Response(cart_payload(get_cart_manager(request, current_user(request))))

    def post(self, request):
        serializer = CartAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        product = get_catalog_store().get_product(serializer.validated_data['product_id'])
        if product is None:
            return Response({'message': 'Product not found.'}, status=status.HTTP_404_NOT_FOUND)

        variant = None
        variant_id = serializer.validated_data.get('variant_id')
        if variant_id:
            variant = product.find_variant(variant_id)
            if variant is None:
                return Response({'message': 'Variant not found.'}, status=status.HTTP_404_NOT_FOUND)
        elif product.has_variants:
            return Response({'message': 'Please select the product options.'}, status=status.HTTP_400_BAD_REQUEST)

        cart = get_cart_manager(request, current_user(request))
        try:
            cart.add_item(product, variant)
        except BaseCoreError as e:
            return error_response(e)
        return Response(cart_payload(cart), status=status.HTTP_201_CREATED)

    def delete(self, request):
        cart = get_cart_manager(request, current_user(request))
        cart.clear()
        return Response(cart_payload(cart))


class CartItemAPIView(APIView):
    permission_classes = [AllowAny]

    def patch(self, request, line_item_id):
        serializer = CartQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = get_cart_manager(request, current_user(request))
        if cart.get_item(line_item_id) is None:
            return Response({'message': 'Item not found in cart.'}, status=status.HTTP_404_NOT_FOUND)
        try:
            cart.set_quantity(line_item_id, serializer.validated_data['quantity'])
        except BaseCoreError as e:
            return error_response(e)
        return Response(cart_payload(cart))

    def delete(self, request, line_item_id):
        cart = get_cart_manager(request, current_user(request))
        cart.remove_item(line_item_id)
        return Response(cart_payload(cart))


# ====================================================================
# CHECKOUT E PEDIDOS DO CLIENTE
# ====================================================================

class CheckoutAPIView(APIView):
    permission_classes = [IsShopper]

    def post(self, request):
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = current_user(request)
        engine = get_order_engine(request, user)
        try:
            order = engine.place_order(serializer.to_details(user), actor=user)
        except BaseCoreError as e:
            logger.info("Checkout recusado para %s: %s", user.email, e.message)
            return error_response(e)

        return Response(order_to_dict(order), status=status.HTTP_201_CREATED)


class MyOrdersAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = current_user(request)
        orders = get_status_tracker().orders_for(user.id)
        return Response([order_to_dict(o) for o in orders])


class LastOrderAPIView(APIView):
    """Último pedido desta sessão, com o resumo de valores da página de sucesso."""
    permission_classes = [AllowAny]

    def get(self, request):
        # O admin pode ter avançado o status desde a compra
        orders = get_status_tracker().sync_history(get_order_history(request))
        if not orders:
            return Response({'message': 'No recent order.'}, status=status.HTTP_404_NOT_FOUND)

        order = orders[0]

        tax = round(order.total * settings.TAX_RATE, 2)
        payload = order_to_dict(order)
        payload.update({'subtotal': order.total, 'tax': tax, 'grand_total': order.total + tax})
        return Response(payload)
