from uuid import uuid4

from werkzeug.security import generate_password_hash

from chalicelib.constants.constants import ROLE_CUSTOMER
from chalicelib.users import User
from tests.utils.request_utils import make_request

TEST_PASSWORD = 'secret-password'


def create_test_user(role: str = ROLE_CUSTOMER, email: str = None) -> str:
    """Puts a user straight to the db and returns its id, which is also the auth token"""
    user_id = str(uuid4())
    User(
        id_=user_id,
        email=email or f'{role}-{user_id[:8]}@example.com',
        password_hash=generate_password_hash(TEST_PASSWORD),
        first_name=role.capitalize(),
        last_name='Tester',
        phone='+10000000000',
        role=role
    )._create_db_record()
    return user_id


def create_test_restaurant(client, token: str, **kwargs) -> str:
    restaurant_to_create = {
        'name': 'Test Pizzeria',
        'description': 'Wood-fired pizza and pasta',
        'address': '1 Main Street, Springfield',
        'phone': '+10000000001',
        'cuisine_type': 'italian',
        **kwargs
    }
    response = make_request(client, endpoint='/restaurants', method='POST', json_body=restaurant_to_create,
                            token=token)
    assert response.status_code == 200, response.json_body
    return response.json_body['id']


def create_test_category(client, restaurant_id: str, owner_id: str, name: str = 'Pizza', sort_order: int = 0) -> str:
    response = make_request(client, endpoint=f'/menu-categories/{restaurant_id}', method='POST',
                            json_body={'name': name, 'sort_order': sort_order}, token=owner_id)
    assert response.status_code == 200, response.json_body
    return response.json_body['id']


def create_test_menu_item(client, restaurant_id: str, owner_id: str, price: float = 10.0, **kwargs) -> str:
    menu_item_to_create = {
        'name': 'Margherita',
        'description': 'Tomato, mozzarella, basil',
        'price': price,
        **kwargs
    }
    response = make_request(client, endpoint=f'/menu-items/{restaurant_id}', method='POST',
                            json_body=menu_item_to_create, token=owner_id)
    assert response.status_code == 200, response.json_body
    return response.json_body['id']


def create_test_option(client, menu_item_id: str, owner_id: str, price_modifier: float = 1.5,
                       name: str = 'Extra cheese') -> str:
    response = make_request(client, endpoint=f'/menu-item-options/{menu_item_id}', method='POST',
                            json_body={'name': name, 'price_modifier': price_modifier}, token=owner_id)
    assert response.status_code == 200, response.json_body
    return response.json_body['id']


def create_test_address(client, user_id: str, **kwargs) -> str:
    address_to_create = {
        'street_address': '742 Evergreen Terrace',
        'city': 'Springfield',
        'state': 'OR',
        'postal_code': '97403',
        'country': 'US',
        **kwargs
    }
    response = make_request(client, endpoint='/addresses', method='POST', json_body=address_to_create,
                            token=user_id)
    assert response.status_code == 200, response.json_body
    return response.json_body['id']


def add_test_item_to_cart(client, user_id: str, restaurant_id: str, menu_item_id: str, quantity: int = 1,
                          selected_options: list = None) -> dict:
    response = make_request(client, endpoint='/carts', method='POST', token=user_id, json_body={
        'restaurant_id': restaurant_id,
        'menu_item_id': menu_item_id,
        'quantity': quantity,
        'selected_options': selected_options or []
    })
    assert response.status_code == 200, response.json_body
    return response.json_body['cart_item']


def create_test_order(client, user_id: str, restaurant_id: str, address_id: str) -> dict:
    response = make_request(client, endpoint='/orders', method='POST', token=user_id, json_body={
        'restaurant_id': restaurant_id,
        'delivery_address_id': address_id,
        'notes': 'Ring the bell twice'
    })
    assert response.status_code == 200, response.json_body
    return response.json_body


def setup_restaurant_with_menu(client, price: float = 10.0):
    """Owner, restaurant and one menu item, returns their ids"""
    owner_id = create_test_user('restaurant_owner')
    restaurant_id = create_test_restaurant(client, owner_id)
    menu_item_id = create_test_menu_item(client, restaurant_id, owner_id, price=price)
    return owner_id, restaurant_id, menu_item_id


def setup_customer_order(client, price: float = 10.0, quantity: int = 2):
    """Restaurant with a menu and a customer who ordered from it"""
    owner_id, restaurant_id, menu_item_id = setup_restaurant_with_menu(client, price=price)
    customer_id = create_test_user()
    address_id = create_test_address(client, customer_id)
    add_test_item_to_cart(client, customer_id, restaurant_id, menu_item_id, quantity=quantity)
    order = create_test_order(client, customer_id, restaurant_id, address_id)
    return {
        'owner_id': owner_id,
        'restaurant_id': restaurant_id,
        'menu_item_id': menu_item_id,
        'customer_id': customer_id,
        'address_id': address_id,
        'order': order
    }
