from tests.utils.fixtures import (create_test_user, create_test_restaurant, create_test_category, create_test_menu_item,
                                  create_test_option, setup_restaurant_with_menu)
from tests.utils.request_utils import make_request


def test_menu_categories_sorted_and_active_only(chalice_client):
    owner_id = create_test_user('restaurant_owner')
    restaurant_id = create_test_restaurant(chalice_client, owner_id)
    desserts_id = create_test_category(chalice_client, restaurant_id, owner_id, name='Desserts', sort_order=2)
    pizza_id = create_test_category(chalice_client, restaurant_id, owner_id, name='Pizza', sort_order=1)
    hidden_id = create_test_category(chalice_client, restaurant_id, owner_id, name='Hidden', sort_order=0)

    response = make_request(chalice_client, endpoint=f'/menu-categories/{restaurant_id}/{hidden_id}', method='PUT',
                            token=owner_id, json_body={'is_active': False})
    assert response.status_code == 200

    response = make_request(chalice_client, endpoint=f'/menu-categories/{restaurant_id}')
    assert response.status_code == 200
    assert [category['id'] for category in response.json_body] == [pizza_id, desserts_id]


def test_delete_menu_category(chalice_client):
    owner_id = create_test_user('restaurant_owner')
    restaurant_id = create_test_restaurant(chalice_client, owner_id)
    category_id = create_test_category(chalice_client, restaurant_id, owner_id)

    response = make_request(chalice_client, endpoint=f'/menu-categories/{restaurant_id}/{category_id}',
                            method='DELETE', token=owner_id)
    assert response.status_code == 200
    assert make_request(chalice_client, endpoint=f'/menu-categories/{restaurant_id}').json_body == []


def test_other_owner_cannot_add_category(chalice_client):
    owner_id = create_test_user('restaurant_owner')
    other_owner_id = create_test_user('restaurant_owner')
    restaurant_id = create_test_restaurant(chalice_client, owner_id)
    response = make_request(chalice_client, endpoint=f'/menu-categories/{restaurant_id}', method='POST',
                            token=other_owner_id, json_body={'name': 'Pirate menu'})
    assert response.status_code == 401


def test_menu_item_crud(chalice_client):
    owner_id, restaurant_id, menu_item_id = setup_restaurant_with_menu(chalice_client, price=12.5)

    response = make_request(chalice_client, endpoint=f'/menu-items/{restaurant_id}/{menu_item_id}')
    assert response.status_code == 200
    assert response.json_body['price'] == 12.5
    assert response.json_body['is_available'] is True

    response = make_request(chalice_client, endpoint=f'/menu-items/{restaurant_id}/{menu_item_id}', method='PUT',
                            token=owner_id, json_body={'price': 13.75, 'name': 'Margherita XL'})
    assert response.status_code == 200
    menu_item = make_request(chalice_client, endpoint=f'/menu-items/{restaurant_id}/{menu_item_id}').json_body
    assert menu_item['price'] == 13.75
    assert menu_item['name'] == 'Margherita XL'


def test_menu_item_with_unknown_category(chalice_client):
    owner_id = create_test_user('restaurant_owner')
    restaurant_id = create_test_restaurant(chalice_client, owner_id)
    response = make_request(chalice_client, endpoint=f'/menu-items/{restaurant_id}', method='POST', token=owner_id,
                            json_body={'name': 'Ghost', 'price': 1, 'category_id': 'no-such-category'})
    assert response.status_code == 404


def test_menu_item_negative_price(chalice_client):
    owner_id = create_test_user('restaurant_owner')
    restaurant_id = create_test_restaurant(chalice_client, owner_id)
    response = make_request(chalice_client, endpoint=f'/menu-items/{restaurant_id}', method='POST', token=owner_id,
                            json_body={'name': 'Refund me', 'price': -1})
    assert response.status_code == 400


def test_get_menu_filtered_by_category(chalice_client):
    owner_id = create_test_user('restaurant_owner')
    restaurant_id = create_test_restaurant(chalice_client, owner_id)
    pizza_id = create_test_category(chalice_client, restaurant_id, owner_id, name='Pizza')
    drinks_id = create_test_category(chalice_client, restaurant_id, owner_id, name='Drinks')
    pizza_item_id = create_test_menu_item(chalice_client, restaurant_id, owner_id, category_id=pizza_id)
    create_test_menu_item(chalice_client, restaurant_id, owner_id, name='Cola', price=2, category_id=drinks_id)

    response = make_request(chalice_client, endpoint=f'/menu-items/{restaurant_id}')
    assert len(response.json_body) == 2

    response = make_request(chalice_client, endpoint=f'/menu-items/{restaurant_id}', query=f'category_id={pizza_id}')
    assert [item['id'] for item in response.json_body] == [pizza_item_id]


def test_menu_item_availability(chalice_client):
    owner_id, restaurant_id, menu_item_id = setup_restaurant_with_menu(chalice_client)
    endpoint = f'/menu-items/{restaurant_id}/{menu_item_id}/availability'

    response = make_request(chalice_client, endpoint=endpoint, method='PUT', token=owner_id,
                            json_body={'is_available': False})
    assert response.status_code == 200
    assert response.json_body['is_available'] is False

    response = make_request(chalice_client, endpoint=endpoint, method='PUT', token=owner_id,
                            json_body={'is_available': 'no'})
    assert response.status_code == 400


def test_deleted_menu_item_is_archived(chalice_client):
    owner_id, restaurant_id, menu_item_id = setup_restaurant_with_menu(chalice_client)

    response = make_request(chalice_client, endpoint=f'/menu-items/{restaurant_id}/{menu_item_id}', method='DELETE',
                            token=owner_id)
    assert response.status_code == 200

    assert make_request(chalice_client, endpoint=f'/menu-items/{restaurant_id}').json_body == []
    response = make_request(chalice_client, endpoint=f'/menu-items/{restaurant_id}/{menu_item_id}')
    assert response.status_code == 404


def test_menu_of_unknown_restaurant(chalice_client):
    response = make_request(chalice_client, endpoint='/menu-items/4b0e3c1a-1111-4222-8333-444455556666')
    assert response.status_code == 404


def test_menu_item_options(chalice_client):
    owner_id, restaurant_id, menu_item_id = setup_restaurant_with_menu(chalice_client)
    cheese_id = create_test_option(chalice_client, menu_item_id, owner_id, price_modifier=1.5)
    crust_id = create_test_option(chalice_client, menu_item_id, owner_id, price_modifier=2, name='Thick crust')

    response = make_request(chalice_client, endpoint=f'/menu-item-options/{menu_item_id}')
    assert response.status_code == 200
    options = {option['id']: option for option in response.json_body}
    assert options[cheese_id]['price_modifier'] == 1.5
    assert options[cheese_id]['restaurant_id'] == restaurant_id

    response = make_request(chalice_client, endpoint=f'/menu-item-options/{menu_item_id}/{crust_id}', method='PUT',
                            token=owner_id, json_body={'price_modifier': 2.25})
    assert response.status_code == 200

    response = make_request(chalice_client, endpoint=f'/menu-item-options/{menu_item_id}/{cheese_id}',
                            method='DELETE', token=owner_id)
    assert response.status_code == 200

    options = make_request(chalice_client, endpoint=f'/menu-item-options/{menu_item_id}').json_body
    assert [(option['id'], option['price_modifier']) for option in options] == [(crust_id, 2.25)]


def test_other_owner_cannot_add_option(chalice_client):
    _, _, menu_item_id = setup_restaurant_with_menu(chalice_client)
    other_owner_id = create_test_user('restaurant_owner')
    response = make_request(chalice_client, endpoint=f'/menu-item-options/{menu_item_id}', method='POST',
                            token=other_owner_id, json_body={'name': 'Pineapple', 'price_modifier': 1})
    assert response.status_code == 401


def test_options_of_unknown_menu_item(chalice_client):
    response = make_request(chalice_client, endpoint='/menu-item-options/4b0e3c1a-1111-4222-8333-444455556666')
    assert response.status_code == 404
