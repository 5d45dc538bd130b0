# jewelryoclock/presentation/views_admin.py
"""Console administrativo: produtos, pedidos, status e sugestão de descrições."""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from jewelryoclock.core.dependency_injection import (
    get_catalog_store,
    get_description_suggestion_use_case,
    get_status_tracker,
)
from jewelryoclock.core.entities import OrderStatus
from jewelryoclock.core.exceptions import BaseCoreError
from jewelryoclock.core.serializers import order_to_dict, product_to_dict

from .permissions import IsStoreAdmin
from .serializers import (
    STATUS_CHOICES,
    DescriptionSuggestionSerializer,
    ProductSerializer,
    StatusUpdateSerializer,
)
from .views import current_user, error_response

logger = logging.getLogger(__name__)


# ====================================================================
# PRODUTOS
# ====================================================================

class AdminProductListAPIView(APIView):
    permission_classes = [IsStoreAdmin]

    def get(self, request):
        store = get_catalog_store()
        return Response({
            'offline': store.offline,
            'products': [product_to_dict(p) for p in store.products],
        })

    def post(self, request):
        serializer = ProductSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            product = get_catalog_store().add_product(serializer.to_entity(), actor=current_user(request))
        except BaseCoreError as e:
            return error_response(e)
        return Response(product_to_dict(product), status=status.HTTP_201_CREATED)


class AdminProductDetailAPIView(APIView):
    permission_classes = [IsStoreAdmin]

    def put(self, request, product_id):
        serializer = ProductSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            product = get_catalog_store().update_product(
                serializer.to_entity(product_id=product_id), actor=current_user(request)
            )
        except BaseCoreError as e:
            return error_response(e)
        return Response(product_to_dict(product))

    def delete(self, request, product_id):
        try:
            get_catalog_store().delete_product(product_id, actor=current_user(request))
        except BaseCoreError as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)


class DescriptionSuggestionAPIView(APIView):
    permission_classes = [IsStoreAdmin]

    def post(self, request):
        serializer = DescriptionSuggestionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            description = get_description_suggestion_use_case().suggest(
                data['name'], data['category'], data['keywords'], actor=current_user(request)
            )
        except BaseCoreError as e:
            return error_response(e)
        return Response({'description': description})


# ====================================================================
# PEDIDOS
# ====================================================================

class AdminOrderListAPIView(APIView):
    permission_classes = [IsStoreAdmin]

    def get(self, request):
        status_filter = request.query_params.get('status')
        if status_filter and status_filter not in STATUS_CHOICES:
            return Response({'message': f'Unknown status "{status_filter}".'}, status=status.HTTP_400_BAD_REQUEST)

        orders = get_status_tracker().all_orders(
            current_user(request),
            status=OrderStatus(status_filter) if status_filter else None,
        )
        return Response([order_to_dict(o) for o in orders])


class AdminOrderStatusAPIView(APIView):
    permission_classes = [IsStoreAdmin]

    def post(self, request, order_id):
        serializer = StatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            order = get_status_tracker().advance(
                order_id, OrderStatus(serializer.validated_data['status']), actor=current_user(request)
            )
        except BaseCoreError as e:
            return error_response(e)
        return Response(order_to_dict(order))
