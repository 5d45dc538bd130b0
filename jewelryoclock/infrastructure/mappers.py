"""
Mapeadores (Mappers) para converter entre:
1. Modelos do Django ORM
2. Entidades de Domínio (jewelryoclock.core.entities)
"""
from typing import Any, Dict, Optional

from jewelryoclock.core.entities import (
    Category,
    Order as OrderEntity,
    OrderStatus,
    Product as ProductEntity,
    StatusChange,
    Variant as VariantEntity,
)
from jewelryoclock.core.serializers import cart_item_from_dict, cart_item_to_dict


# ====================================================================
# MAPPERS DO CATÁLOGO
# ====================================================================

class VariantMapper:

    @staticmethod
    def to_entity(model: Any) -> VariantEntity:
        return VariantEntity(
            id=model.code,
            name=model.name,
            price=model.price,
            stock=model.stock,
            options=dict(model.options or {}),
        )

    @staticmethod
    def to_fields(entity: VariantEntity, position: int) -> Dict[str, Any]:
        return {
            'code': entity.id,
            'name': entity.name,
            'price': entity.price,
            'stock': entity.stock,
            'options': dict(entity.options),
            'position': position,
        }


class ProductMapper:
    """Mapeador para Produto (com suas variantes, na ordem gravada)."""

    @staticmethod
    def to_entity(model: Any) -> Optional[ProductEntity]:
        if not model:
            return None
        return ProductEntity(
            id=model.id,
            name=model.name,
            price=model.price,
            description=model.description,
            category=Category(model.category),
            image=model.image,
            stock=model.stock,
            variants=[VariantMapper.to_entity(v) for v in model.variants.all()],
        )

    @staticmethod
    def to_fields(entity: ProductEntity) -> Dict[str, Any]:
        """Campos do modelo (sem pk e sem variantes)."""
        return {
            'name': entity.name,
            'price': entity.price,
            'description': entity.description,
            'category': entity.category.value,
            'image': entity.image,
            'stock': entity.stock,
        }


# ====================================================================
# MAPPERS DE PEDIDOS
# ====================================================================

class OrderMapper:

    @staticmethod
    def to_entity(model: Any) -> Optional[OrderEntity]:
        if not model:
            return None
        return OrderEntity(
            id=model.id,
            user_id=model.user_id,
            items=[cart_item_from_dict(i) for i in model.items],
            total=model.total,
            created_at=model.created_at,
            customer_name=model.customer_name,
            email=model.email,
            shipping_address=model.shipping_address,
            status=OrderStatus(model.status),
            status_history=[
                StatusChange(status=OrderStatus(e.status), timestamp=e.timestamp)
                for e in model.status_history.all()
            ],
            payment_id=model.payment_id,
        )

    @staticmethod
    def to_fields(entity: OrderEntity) -> Dict[str, Any]:
        return {
            'id': entity.id,
            'user_id': entity.user_id,
            'items': [cart_item_to_dict(i) for i in entity.items],
            'total': entity.total,
            'created_at': entity.created_at,
            'customer_name': entity.customer_name,
            'email': entity.email,
            'shipping_address': entity.shipping_address,
            'payment_id': entity.payment_id,
            'status': entity.status.value,
        }
