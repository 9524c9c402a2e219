from chalicelib.constants import keys_structure
from chalicelib.utils import db
from tests.utils.fixtures import create_test_user, TEST_PASSWORD
from tests.utils.request_utils import make_request

user_to_register = {
    'email': 'Jane.Doe@Example.com',
    'password': 'super-secret',
    'first_name': 'Jane',
    'last_name': 'Doe',
    'phone': '+15550001111'
}


def register(client, **kwargs):
    return make_request(client, endpoint='/users/register', method='POST', json_body={**user_to_register, **kwargs})


def test_register_user(chalice_client):
    response = register(chalice_client)
    assert response.status_code == 200
    user = response.json_body['user']
    assert user['email'] == 'jane.doe@example.com'
    assert user['role'] == 'customer'
    assert 'password_hash' not in user

    record = db.get_db_item(keys_structure.users_pk, keys_structure.users_sk.format(user_id=user['id']))
    assert record['password_hash'] != user_to_register['password']


def test_register_duplicate_email_conflict(chalice_client):
    assert register(chalice_client).status_code == 200
    response = register(chalice_client, email='jane.doe@example.com')
    assert response.status_code == 409
    assert response.json_body['exception'] == 'EmailAlreadyRegistered'


def test_register_short_password(chalice_client):
    response = register(chalice_client, password='123')
    assert response.status_code == 400


def test_register_as_admin_is_rejected(chalice_client):
    response = register(chalice_client, role='admin')
    assert response.status_code == 400


def test_register_restaurant_owner(chalice_client):
    response = register(chalice_client, role='restaurant_owner')
    assert response.status_code == 200
    assert response.json_body['user']['role'] == 'restaurant_owner'


def test_login(chalice_client):
    user_id = register(chalice_client).json_body['user']['id']
    response = make_request(chalice_client, endpoint='/users/login', method='POST',
                            json_body={'email': 'jane.doe@example.com', 'password': 'super-secret'})
    assert response.status_code == 200
    assert response.json_body['token'] == user_id
    assert response.json_body['user']['id'] == user_id


def test_login_wrong_password(chalice_client):
    register(chalice_client)
    response = make_request(chalice_client, endpoint='/users/login', method='POST',
                            json_body={'email': 'jane.doe@example.com', 'password': 'wrong-password'})
    assert response.status_code == 401


def test_login_unknown_email(chalice_client):
    response = make_request(chalice_client, endpoint='/users/login', method='POST',
                            json_body={'email': 'nobody@example.com', 'password': TEST_PASSWORD})
    assert response.status_code == 401


def test_get_profile(chalice_client):
    user_id = create_test_user()
    response = make_request(chalice_client, endpoint='/users', token=user_id)
    assert response.status_code == 200
    assert response.json_body['id'] == user_id
    assert 'password_hash' not in response.json_body


def test_update_profile_ignores_role_and_email(chalice_client):
    user_id = create_test_user()
    response = make_request(chalice_client, endpoint='/users', method='PUT', token=user_id, json_body={
        'first_name': 'Homer',
        'phone': '+15559998888',
        'role': 'admin',
        'email': 'hacker@example.com'
    })
    assert response.status_code == 200

    profile = make_request(chalice_client, endpoint='/users', token=user_id).json_body
    assert profile['first_name'] == 'Homer'
    assert profile['phone'] == '+15559998888'
    assert profile['role'] == 'customer'
    assert profile['email'] != 'hacker@example.com'
