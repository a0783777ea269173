"""
JSON mappers for API responses.

Money values are emitted as strings with two decimals to keep Decimal precision.
"""
from decimal import Decimal
from datetime import datetime
from typing import Optional, Union


def money(value: Union[Decimal, int, float, None]) -> Optional[str]:
    """Format a money amount as a fixed two-decimal string."""
    if value is None:
        return None
    return str(Decimal(str(value)).quantize(Decimal('0.01')))


def iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


def user_to_dict(user) -> dict:
    return {
        'id': user.id,
        'name': user.name,
        'email': user.email,
        'phone_number': user.phone_number,
        'created_at': iso(user.created_at),
        'updated_at': iso(user.updated_at),
    }


def category_to_dict(category, include_subcategories: bool = False) -> dict:
    data = {
        'id': category.id,
        'name': category.name,
        'description': category.description,
        'image_url': category.image_url,
        'icon_url': category.icon_url,
        'display_order': category.display_order,
        'is_active': category.is_active,
    }
    if include_subcategories:
        data['subcategories'] = [
            subcategory_to_dict(sub) for sub in category.subcategories if sub.is_active
        ]
    return data


def subcategory_to_dict(subcategory) -> dict:
    return {
        'id': subcategory.id,
        'category_id': subcategory.category_id,
        'name': subcategory.name,
        'description': subcategory.description,
        'image_url': subcategory.image_url,
        'display_order': subcategory.display_order,
        'is_active': subcategory.is_active,
    }


def brand_to_dict(brand) -> dict:
    return {
        'id': brand.id,
        'name': brand.name,
        'description': brand.description,
        'logo_url': brand.logo_url,
        'is_active': brand.is_active,
    }


def product_to_dict(product) -> dict:
    return {
        'id': product.id,
        'name': product.name,
        'description': product.description,
        'price': money(product.price),
        'mrp': money(product.mrp),
        'category_id': product.category_id,
        'category_name': product.category.name if product.category else None,
        'subcategory_id': product.subcategory_id,
        'subcategory_name': product.subcategory.name if product.subcategory else None,
        'brand_id': product.brand_id,
        'brand_name': product.brand.name if product.brand else None,
        'stock': product.stock,
        'unit': product.unit,
        'quantity_per_unit': money(product.quantity_per_unit),
        'weight_quantity': product.weight_quantity,
        'discount_percentage': money(product.discount_percentage),
        'rating': money(product.rating),
        'review_count': product.review_count,
        'image_url': product.image_url,
        'is_available': product.is_available,
        'is_featured': product.is_featured,
        'is_trending': product.is_trending,
        'is_new_arrival': product.is_new_arrival,
        'tags': product.tag_list,
        'min_order_quantity': product.min_order_quantity,
        'max_order_quantity': product.max_order_quantity,
        'created_at': iso(product.created_at),
        'updated_at': iso(product.updated_at),
    }


def cart_to_dict(cart) -> dict:
    items = [cart_item_to_dict(item) for item in cart.items]
    total = sum((item.line_total for item in cart.items), Decimal('0.00'))
    return {
        'cart_id': cart.id,
        'user_id': cart.user_id,
        'items': items,
        'total_price': money(total),
        'total_items': len(items),
        'created_at': iso(cart.created_at),
        'updated_at': iso(cart.updated_at),
    }


def cart_item_to_dict(item) -> dict:
    return {
        'cart_item_id': item.id,
        'product_id': item.product_id,
        'product_name': item.product.name if item.product else None,
        'quantity': item.quantity,
        'price_at_add': money(item.price_at_add),
        'total_price': money(item.line_total),
    }


def address_to_dict(address) -> dict:
    return {
        'id': address.id,
        'user_id': address.user_id,
        'full_name': address.full_name,
        'phone_number': address.phone_number,
        'address_line1': address.address_line1,
        'address_line2': address.address_line2,
        'city': address.city,
        'state': address.state,
        'pincode': address.pincode,
        'latitude': address.latitude,
        'longitude': address.longitude,
        'address_type': address.address_type,
        'is_default': address.is_default,
        'created_at': iso(address.created_at),
        'updated_at': iso(address.updated_at),
    }


def order_to_dict(order) -> dict:
    return {
        'id': order.id,
        'user_id': order.user_id,
        'order_number': order.order_number,
        'items': [order_line_to_dict(line) for line in order.lines],
        'total_amount': money(order.total_amount),
        'status': order.status.value,
        'payment_method': order.payment_method,
        'payment_status': order.payment_status.value,
        'delivery_address': {
            'name': order.delivery_name,
            'phone': order.delivery_phone,
            'address': order.delivery_address,
            'city': order.delivery_city,
            'state': order.delivery_state,
            'pincode': order.delivery_pincode,
        },
        'delivered_at': iso(order.delivered_at),
        'created_at': iso(order.created_at),
        'updated_at': iso(order.updated_at),
    }


def order_line_to_dict(line) -> dict:
    return {
        'id': line.id,
        'product_id': line.product_id,
        'product_name': line.product_name,
        'quantity': line.quantity,
        'unit_price': money(line.unit_price),
        'total_price': money(line.line_total),
    }
