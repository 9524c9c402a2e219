from tests.utils.fixtures import create_test_user, create_test_restaurant
from tests.utils.request_utils import make_request


def test_create_and_get_restaurant(chalice_client):
    owner_id = create_test_user('restaurant_owner')
    restaurant_id = create_test_restaurant(chalice_client, owner_id)

    response = make_request(chalice_client, endpoint=f'/restaurants/{restaurant_id}')
    assert response.status_code == 200
    restaurant = response.json_body
    assert restaurant['owner_id'] == owner_id
    assert restaurant['name'] == 'Test Pizzeria'
    assert restaurant['is_active'] is True
    assert restaurant['rating'] == 0
    assert restaurant['review_count'] == 0


def test_customer_cannot_create_restaurant(chalice_client):
    customer_id = create_test_user()
    response = make_request(chalice_client, endpoint='/restaurants', method='POST', token=customer_id,
                            json_body={'name': 'Nope', 'address': 'Nowhere'})
    assert response.status_code == 403


def test_create_restaurant_without_name(chalice_client):
    owner_id = create_test_user('restaurant_owner')
    response = make_request(chalice_client, endpoint='/restaurants', method='POST', token=owner_id,
                            json_body={'address': '1 Main Street'})
    assert response.status_code == 400


def test_admin_creates_restaurant_for_owner(chalice_client):
    admin_id = create_test_user('admin')
    owner_id = create_test_user('restaurant_owner')
    restaurant_id = create_test_restaurant(chalice_client, admin_id, owner_id=owner_id)
    restaurant = make_request(chalice_client, endpoint=f'/restaurants/{restaurant_id}').json_body
    assert restaurant['owner_id'] == owner_id


def test_admin_cannot_assign_restaurant_to_customer(chalice_client):
    admin_id = create_test_user('admin')
    customer_id = create_test_user()
    response = make_request(chalice_client, endpoint='/restaurants', method='POST', token=admin_id, json_body={
        'name': 'Nope', 'address': 'Nowhere', 'owner_id': customer_id})
    assert response.status_code == 400


def test_get_restaurants_search_and_paging(chalice_client):
    owner_id = create_test_user('restaurant_owner')
    create_test_restaurant(chalice_client, owner_id, name='Alpha Sushi', description='Fresh fish')
    create_test_restaurant(chalice_client, owner_id, name='Beta Burgers', description='Grilled beef')
    create_test_restaurant(chalice_client, owner_id, name='Gamma Grill', description='Sushi and steaks')

    response = make_request(chalice_client, endpoint='/restaurants')
    assert [restaurant['name'] for restaurant in response.json_body] == ['Alpha Sushi', 'Beta Burgers', 'Gamma Grill']

    response = make_request(chalice_client, endpoint='/restaurants', query='search=sushi')
    assert [restaurant['name'] for restaurant in response.json_body] == ['Alpha Sushi', 'Gamma Grill']

    response = make_request(chalice_client, endpoint='/restaurants', query='limit=1&offset=1')
    assert [restaurant['name'] for restaurant in response.json_body] == ['Beta Burgers']


def test_get_restaurants_invalid_paging(chalice_client):
    response = make_request(chalice_client, endpoint='/restaurants', query='limit=-1')
    assert response.status_code == 400


def test_get_owner_restaurants(chalice_client):
    owner_id = create_test_user('restaurant_owner')
    other_owner_id = create_test_user('restaurant_owner')
    restaurant_id = create_test_restaurant(chalice_client, owner_id)
    create_test_restaurant(chalice_client, other_owner_id)

    response = make_request(chalice_client, endpoint=f'/restaurants/owner/{owner_id}')
    assert response.status_code == 200
    assert [restaurant['id'] for restaurant in response.json_body] == [restaurant_id]


def test_update_restaurant(chalice_client):
    owner_id = create_test_user('restaurant_owner')
    restaurant_id = create_test_restaurant(chalice_client, owner_id)
    response = make_request(chalice_client, endpoint=f'/restaurants/{restaurant_id}', method='PUT', token=owner_id,
                            json_body={'name': 'Renamed', 'rating': 5, 'owner_id': 'someone-else'})
    assert response.status_code == 200

    restaurant = make_request(chalice_client, endpoint=f'/restaurants/{restaurant_id}').json_body
    assert restaurant['name'] == 'Renamed'
    assert restaurant['rating'] == 0
    assert restaurant['owner_id'] == owner_id


def test_other_owner_cannot_update_restaurant(chalice_client):
    owner_id = create_test_user('restaurant_owner')
    other_owner_id = create_test_user('restaurant_owner')
    restaurant_id = create_test_restaurant(chalice_client, owner_id)
    response = make_request(chalice_client, endpoint=f'/restaurants/{restaurant_id}', method='PUT',
                            token=other_owner_id, json_body={'name': 'Stolen'})
    assert response.status_code == 401
    assert response.json_body['exception'] == 'AccessDenied'


def test_deactivated_restaurant_is_hidden_from_list(chalice_client):
    admin_id = create_test_user('admin')
    owner_id = create_test_user('restaurant_owner')
    restaurant_id = create_test_restaurant(chalice_client, owner_id)

    response = make_request(chalice_client, endpoint=f'/admin/restaurants/{restaurant_id}/deactivate', method='PUT',
                            token=admin_id)
    assert response.status_code == 200
    assert make_request(chalice_client, endpoint='/restaurants').json_body == []
    assert make_request(chalice_client, endpoint=f'/restaurants/{restaurant_id}').json_body['is_active'] is False

    response = make_request(chalice_client, endpoint=f'/admin/restaurants/{restaurant_id}/activate', method='PUT',
                            token=admin_id)
    assert response.status_code == 200
    assert [r['id'] for r in make_request(chalice_client, endpoint='/restaurants').json_body] == [restaurant_id]
