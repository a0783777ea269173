"""
Integration tests for admin endpoints, health check and metrics.
"""

from app.blueprints import metrics
from app.models import Product


def test_product_stats(client, admin_headers, apple, product_factory):
    product_factory('Mango', stock=0)

    response = client.get('/admin/product-stats', headers=admin_headers)

    assert response.status_code == 200
    assert response.get_json()['out_of_stock_products'] == 1


def test_list_users_requires_admin(client, admin_headers, auth_headers):
    assert client.get('/admin/users', headers=auth_headers).status_code == 403

    response = client.get('/admin/users', headers=admin_headers)
    assert response.status_code == 200
    assert len(response.get_json()) == 2


def test_restock_makes_product_available(client, session, admin_headers, product_factory):
    product_id = product_factory('Mango', stock=0).id

    response = client.post(f'/admin/products/{product_id}/restock', json={'quantity': 12}, headers=admin_headers)

    assert response.status_code == 200
    assert response.get_json() == {
        'product_id': product_id, 'product_name': 'Mango', 'stock': 12, 'is_available': True
    }
    assert session.get(Product, product_id).stock == 12


def test_consume_beyond_stock_returns_400(client, session, admin_headers, banana):
    product_id = banana.id

    response = client.post(f'/admin/products/{product_id}/consume', json={'quantity': 6}, headers=admin_headers)

    assert response.status_code == 400
    assert session.get(Product, product_id).stock == 5


def test_consuming_last_units_counts_a_stock_out(client, session, admin_headers, banana):
    product_id = banana.id
    before = metrics.registry.get_sample_value('grocery_stock_outs_total') or 0.0

    response = client.post(f'/admin/products/{product_id}/consume', json={'quantity': 5}, headers=admin_headers)

    assert response.status_code == 200
    assert metrics.registry.get_sample_value('grocery_stock_outs_total') == before + 1
    assert session.get(Product, product_id).is_available is False


def test_health(client):
    response = client.get('/health')

    assert response.status_code == 200
    assert response.get_json()['database'] == 'connected'


def test_metrics_endpoint(client):
    client.get('/products')

    response = client.get('/metrics')

    assert response.status_code == 200
    assert b'http_requests_total' in response.data


def test_unknown_route_returns_json_404(client):
    response = client.get('/nowhere')

    assert response.status_code == 404
    assert response.get_json()['status'] == 'error'
