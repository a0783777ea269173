"""Catalog blueprint: products, categories and brands (public reads, admin writes)."""
from flask import Blueprint, jsonify, request
from app.database import get_session
from app.decorators.admin_security import admin_required
from app.services import catalog_service
from app.utils.http import get_json_body
from app.utils.serializers import product_to_dict, category_to_dict, brand_to_dict

catalog_bp = Blueprint('catalog', __name__)


@catalog_bp.route('/products', methods=['GET'])
def list_products():
    """
    List products.

    Query params (first match wins): search, subcategory_id, category_id.
    """
    session = get_session()
    search = request.args.get('search')
    subcategory_id = request.args.get('subcategory_id', type=int)
    category_id = request.args.get('category_id', type=int)

    if search is not None and search.strip():
        products = catalog_service.search_products(session, search)
    elif subcategory_id is not None:
        products = catalog_service.list_products_by_subcategory(session, subcategory_id)
    elif category_id is not None:
        products = catalog_service.list_products_by_category(session, category_id)
    else:
        products = catalog_service.list_products(session)

    return jsonify([product_to_dict(p) for p in products])


@catalog_bp.route('/products/featured', methods=['GET'])
def featured_products():
    products = catalog_service.list_featured_products(get_session())
    return jsonify([product_to_dict(p) for p in products])


@catalog_bp.route('/products/<int:product_id>', methods=['GET'])
def get_product(product_id):
    product = catalog_service.get_product(get_session(), product_id)
    return jsonify(product_to_dict(product))


@catalog_bp.route('/products', methods=['POST'])
@admin_required
def create_product():
    product = catalog_service.create_product(get_session(), get_json_body())
    return jsonify(product_to_dict(product)), 201


@catalog_bp.route('/products/<int:product_id>', methods=['PUT'])
@admin_required
def update_product(product_id):
    product = catalog_service.update_product(get_session(), product_id, get_json_body())
    return jsonify(product_to_dict(product))


@catalog_bp.route('/products/<int:product_id>', methods=['DELETE'])
@admin_required
def delete_product(product_id):
    catalog_service.delete_product(get_session(), product_id)
    return '', 204


@catalog_bp.route('/categories', methods=['GET'])
def list_categories():
    """Active categories with their active subcategories."""
    categories = catalog_service.list_active_categories(get_session())
    return jsonify([category_to_dict(c, include_subcategories=True) for c in categories])


@catalog_bp.route('/categories/<string:category_slug>', methods=['GET'])
def products_by_category_name(category_slug):
    """Products of a category addressed by kebab-case name (``/categories/fresh-fruits``)."""
    products = catalog_service.list_products_by_category_name(get_session(), category_slug)
    return jsonify([product_to_dict(p) for p in products])


@catalog_bp.route('/api-categories', methods=['GET'])
def category_names():
    return jsonify(catalog_service.list_category_names(get_session()))


@catalog_bp.route('/brands', methods=['GET'])
def list_brands():
    brands = catalog_service.list_active_brands(get_session())
    return jsonify([brand_to_dict(b) for b in brands])
