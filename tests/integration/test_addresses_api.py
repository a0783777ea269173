"""
Integration tests for the address book endpoints.
"""

import pytest


ADDRESS = {
    'full_name': 'Asha Rao',
    'phone_number': '9876543210',
    'address_line1': '12 MG Road',
    'city': 'Bengaluru',
    'state': 'Karnataka',
    'pincode': '560001',
    'address_type': 'home',
}


@pytest.fixture
def user_id(user):
    return user.id


def test_create_and_list(client, auth_headers, user_id):
    created = client.post('/addresses', json=dict(ADDRESS, is_default=True), headers=auth_headers)
    client.post('/addresses', json=dict(ADDRESS, city='Mysuru'), headers=auth_headers)

    assert created.status_code == 201
    listed = client.get(f'/addresses/user/{user_id}', headers=auth_headers).get_json()
    assert [a['city'] for a in listed] == ['Bengaluru', 'Mysuru']
    assert listed[0]['is_default'] is True


def test_validation_errors(client, auth_headers, user_id):
    response = client.post('/addresses', json=dict(ADDRESS, pincode='12', phone_number='123'), headers=auth_headers)

    assert response.status_code == 400
    errors = response.get_json()['validation_errors']
    assert set(errors) == {'pincode', 'phone_number'}


def test_set_default(client, auth_headers, user_id):
    first = client.post('/addresses', json=dict(ADDRESS, is_default=True), headers=auth_headers).get_json()['id']
    second = client.post('/addresses', json=dict(ADDRESS, city='Mysuru'), headers=auth_headers).get_json()['id']

    response = client.patch(f'/addresses/{second}/set-default', headers=auth_headers)

    assert response.get_json()['is_default'] is True
    assert client.get(f'/addresses/{first}', headers=auth_headers).get_json()['is_default'] is False


def test_other_user_cannot_touch_address(client, auth_headers, other_headers, user_id):
    address_id = client.post('/addresses', json=ADDRESS, headers=auth_headers).get_json()['id']

    assert client.get(f'/addresses/{address_id}', headers=other_headers).status_code == 403
    assert client.delete(f'/addresses/{address_id}', headers=other_headers).status_code == 403


def test_delete_address(client, auth_headers, user_id):
    address_id = client.post('/addresses', json=ADDRESS, headers=auth_headers).get_json()['id']

    assert client.delete(f'/addresses/{address_id}', headers=auth_headers).status_code == 204
    assert client.get(f'/addresses/{address_id}', headers=auth_headers).status_code == 404
