"""
Serialização das entidades para representações simples (dict/JSON).

Tudo o que cruza a fronteira do armazenamento local (ou vira JSON na API) passa
por aqui: estruturas planas, sem ciclos, com datas em ISO-8601.
"""
import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from jewelryoclock.core.entities import (
    CartItem, Category, Order, OrderStatus, Product, StatusChange, Variant
)
from jewelryoclock.core.exceptions import InvalidDataError, StorageCorruptError


def _timestamp_to_str(value: datetime) -> str:
    return value.isoformat()


def _timestamp_from_str(value: str) -> datetime:
    return datetime.fromisoformat(value)


# ====================================================================
# CATÁLOGO
# ====================================================================

def variant_to_dict(variant: Variant) -> Dict[str, Any]:
    return {
        'id': variant.id,
        'name': variant.name,
        'price': variant.price,
        'stock': variant.stock,
        'options': dict(variant.options),
    }


def variant_from_dict(data: Dict[str, Any]) -> Variant:
    return Variant(
        id=str(data['id']),
        name=data['name'],
        price=int(data['price']),
        stock=int(data['stock']),
        options={str(k): str(v) for k, v in (data.get('options') or {}).items()},
    )


def product_to_dict(product: Product) -> Dict[str, Any]:
    return {
        'id': product.id,
        'name': product.name,
        'price': product.price,
        'description': product.description,
        'category': product.category.value,
        'image': product.image,
        'stock': product.stock,
        'variants': [variant_to_dict(v) for v in product.variants],
    }


def product_from_dict(data: Dict[str, Any]) -> Product:
    return Product(
        id=str(data['id']),
        name=data['name'],
        price=int(data['price']),
        description=data.get('description', ''),
        category=Category(data['category']),
        image=data.get('image', ''),
        stock=int(data.get('stock', 0)),
        variants=[variant_from_dict(v) for v in data.get('variants') or []],
    )


# ====================================================================
# CARRINHO E PEDIDOS
# ====================================================================

def cart_item_to_dict(item: CartItem) -> Dict[str, Any]:
    return {
        'cart_item_id': item.line_item_id,
        'product': product_to_dict(item.product),
        'selected_variant': variant_to_dict(item.selected_variant) if item.selected_variant else None,
        'quantity': item.quantity,
        'price': item.price,
    }


def cart_item_from_dict(data: Dict[str, Any]) -> CartItem:
    variant_data = data.get('selected_variant')
    quantity = int(data['quantity'])
    if quantity < 1:
        raise ValueError(f"Invalid quantity {quantity} for cart item.")
    return CartItem(
        product=product_from_dict(data['product']),
        quantity=quantity,
        selected_variant=variant_from_dict(variant_data) if variant_data else None,
    )


def order_to_dict(order: Order) -> Dict[str, Any]:
    return {
        'id': order.id,
        'user_id': order.user_id,
        'items': [cart_item_to_dict(i) for i in order.items],
        'total': order.total,
        'date': _timestamp_to_str(order.created_at),
        'customer_name': order.customer_name,
        'email': order.email,
        'status': order.status.value,
        'shipping_address': order.shipping_address,
        'status_history': [
            {'status': c.status.value, 'timestamp': _timestamp_to_str(c.timestamp)}
            for c in order.status_history
        ],
        'payment_id': order.payment_id,
    }


def order_from_dict(data: Dict[str, Any]) -> Order:
    return Order(
        id=str(data['id']),
        user_id=str(data['user_id']),
        items=[cart_item_from_dict(i) for i in data['items']],
        total=int(data['total']),
        created_at=_timestamp_from_str(data['date']),
        customer_name=data['customer_name'],
        email=data['email'],
        status=OrderStatus(data['status']),
        shipping_address=data['shipping_address'],
        status_history=[
            StatusChange(status=OrderStatus(c['status']), timestamp=_timestamp_from_str(c['timestamp']))
            for c in data.get('status_history') or []
        ],
        payment_id=data.get('payment_id'),
    )


# ====================================================================
# ARMAZENAMENTO LOCAL (JSON)
# ====================================================================

_PARSE_ERRORS = (ValueError, KeyError, TypeError, AttributeError, InvalidDataError)


def dumps_cart(items: List[CartItem]) -> str:
    return json.dumps([cart_item_to_dict(i) for i in items])


def loads_cart(raw: Optional[str]) -> List[CartItem]:
    """Reconstrói o carrinho. Conteúdo inválido vira StorageCorruptError."""
    if not raw:
        return []
    try:
        return [cart_item_from_dict(i) for i in json.loads(raw)]
    except _PARSE_ERRORS as e:
        raise StorageCorruptError(f"Cart data could not be parsed: {e}") from e


def dumps_orders(orders: List[Order]) -> str:
    return json.dumps([order_to_dict(o) for o in orders])


def loads_orders(raw: Optional[str]) -> List[Order]:
    if not raw:
        return []
    try:
        return [order_from_dict(o) for o in json.loads(raw)]
    except _PARSE_ERRORS as e:
        raise StorageCorruptError(f"Order history could not be parsed: {e}") from e
