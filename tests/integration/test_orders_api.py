"""
Integration tests for the order endpoints.
"""

import pytest
from datetime import timedelta
from app.models import Order, OrderStatus, Product


@pytest.fixture
def ids(user, address, apple, banana):
    """Primary keys captured before any request is made."""
    return {
        'user': user.id,
        'address': address.id,
        'apple': apple.id,
        'banana': banana.id,
    }


def order_payload(address_id, lines, payment_method='COD'):
    return {
        'items': [{'product_id': product_id, 'quantity': quantity} for product_id, quantity in lines],
        'payment_method': payment_method,
        'delivery_address_id': address_id,
    }


def place(client, headers, ids, *lines, payment_method='COD'):
    return client.post('/orders', json=order_payload(ids['address'], lines, payment_method), headers=headers)


class TestCreateOrder:
    """POST /orders"""

    def test_create_order(self, client, session, auth_headers, ids):
        response = place(client, auth_headers, ids, (ids['apple'], 2), (ids['banana'], 1))

        assert response.status_code == 201
        body = response.get_json()
        assert body['status'] == 'PENDING'
        assert body['payment_status'] == 'PENDING'
        assert body['total_amount'] == '280.50'
        assert [item['product_name'] for item in body['items']] == ['Apple', 'Banana']
        assert body['delivery_address']['address'] == '12 MG Road, Flat 4B'
        assert session.get(Product, ids['apple']).stock == 8

    def test_insufficient_stock_returns_400(self, client, session, auth_headers, ids):
        response = place(client, auth_headers, ids, (ids['apple'], 1), (ids['banana'], 9))

        assert response.status_code == 400
        body = response.get_json()
        assert body['product_name'] == 'Banana'
        assert body['requested'] == 9
        assert body['available'] == 5
        assert session.get(Product, ids['apple']).stock == 10
        assert session.query(Order).count() == 0

    def test_empty_items_returns_400(self, client, session, auth_headers, ids):
        response = place(client, auth_headers, ids)

        assert response.status_code == 400
        assert response.get_json()['message'] == 'Cart items cannot be empty'
        assert session.query(Order).count() == 0

    def test_requires_login(self, client, ids):
        response = place(client, {}, ids, (ids['apple'], 1))

        assert response.status_code == 401

    def test_cannot_ship_to_someone_elses_address(self, client, other_user, address_factory, auth_headers, ids):
        foreign_address = address_factory(other_user.id).id

        response = client.post('/orders', json=order_payload(foreign_address, [(ids['apple'], 1)]),
                               headers=auth_headers)

        assert response.status_code == 403


class TestReadOrders:
    """GET /orders/..."""

    def test_get_order_and_by_number(self, client, auth_headers, ids):
        created = place(client, auth_headers, ids, (ids['apple'], 1)).get_json()

        by_id = client.get(f"/orders/{created['id']}", headers=auth_headers)
        by_number = client.get(f"/orders/order-number/{created['order_number']}", headers=auth_headers)

        assert by_id.status_code == 200
        assert by_number.get_json()['id'] == created['id']

    def test_unknown_order_returns_404(self, client, auth_headers, ids):
        response = client.get('/orders/9999', headers=auth_headers)

        assert response.status_code == 404
        assert response.get_json()['message'] == 'Order not found with ID: 9999'

    def test_list_user_orders(self, client, auth_headers, ids, clock):
        first = place(client, auth_headers, ids, (ids['apple'], 1)).get_json()['id']
        clock.advance(timedelta(minutes=1))
        second = place(client, auth_headers, ids, (ids['banana'], 1)).get_json()['id']

        response = client.get(f"/orders/user/{ids['user']}", headers=auth_headers)

        assert [o['id'] for o in response.get_json()] == [second, first]

    def test_other_user_cannot_read_order(self, client, auth_headers, other_headers, ids):
        order_id = place(client, auth_headers, ids, (ids['apple'], 1)).get_json()['id']

        assert client.get(f'/orders/{order_id}', headers=other_headers).status_code == 403
        assert client.post(f'/orders/{order_id}/cancel', headers=other_headers).status_code == 403


class TestLifecycle:
    """Status updates and cancellation."""

    def test_admin_updates_status(self, client, auth_headers, admin_headers, ids):
        order_id = place(client, auth_headers, ids, (ids['apple'], 1)).get_json()['id']

        response = client.patch(f'/orders/{order_id}/status?status=DELIVERED', headers=admin_headers)

        assert response.status_code == 200
        body = response.get_json()
        assert body['status'] == 'DELIVERED'
        assert body['delivered_at'] is not None

    def test_invalid_status_returns_400(self, client, auth_headers, admin_headers, ids):
        order_id = place(client, auth_headers, ids, (ids['apple'], 1)).get_json()['id']

        response = client.patch(f'/orders/{order_id}/status?status=TELEPORTED', headers=admin_headers)

        assert response.status_code == 400

    def test_shopper_cannot_update_status(self, client, auth_headers, ids):
        order_id = place(client, auth_headers, ids, (ids['apple'], 1)).get_json()['id']

        response = client.patch(f'/orders/{order_id}/status?status=SHIPPED', headers=auth_headers)

        assert response.status_code == 403

    def test_cancel_restores_stock(self, client, session, auth_headers, ids):
        order_id = place(client, auth_headers, ids, (ids['banana'], 5)).get_json()['id']
        assert session.get(Product, ids['banana']).is_available is False

        response = client.post(f'/orders/{order_id}/cancel', headers=auth_headers)

        assert response.status_code == 200
        assert response.get_json()['status'] == 'CANCELLED'
        product = session.get(Product, ids['banana'])
        assert product.stock == 5
        assert product.is_available is True

    def test_cancel_twice_returns_409(self, client, session, auth_headers, ids):
        order_id = place(client, auth_headers, ids, (ids['apple'], 3)).get_json()['id']
        client.post(f'/orders/{order_id}/cancel', headers=auth_headers)

        response = client.post(f'/orders/{order_id}/cancel', headers=auth_headers)

        assert response.status_code == 409
        assert session.get(Product, ids['apple']).stock == 10
        assert session.get(Order, order_id).status == OrderStatus.CANCELLED
