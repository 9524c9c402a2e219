from tests.utils.fixtures import create_test_user, setup_restaurant_with_menu, setup_customer_order
from tests.utils.request_utils import make_request


def create_review(client, user_id, restaurant_id, rating, **kwargs):
    response = make_request(client, endpoint='/reviews', method='POST', token=user_id, json_body={
        'restaurant_id': restaurant_id, 'rating': rating, **kwargs})
    assert response.status_code == 200, response.json_body
    return response.json_body['id']


def moderate(client, admin_id, review_id, is_approved=True):
    return make_request(client, endpoint=f'/reviews/{review_id}/moderate', method='PUT', token=admin_id,
                        json_body={'is_approved': is_approved})


def get_restaurant(client, restaurant_id):
    return make_request(client, endpoint=f'/restaurants/{restaurant_id}').json_body


def test_new_review_waits_for_moderation(chalice_client):
    _, restaurant_id, _ = setup_restaurant_with_menu(chalice_client)
    customer_id = create_test_user()
    admin_id = create_test_user('admin')
    review_id = create_review(chalice_client, customer_id, restaurant_id, 5, comment='Great pizza')

    assert make_request(chalice_client, endpoint=f'/reviews/restaurant/{restaurant_id}').json_body == []

    [own_review] = make_request(chalice_client, endpoint='/reviews', token=customer_id).json_body
    assert own_review['id'] == review_id
    assert own_review['comment'] == 'Great pizza'
    assert own_review['is_approved'] is False

    pending = make_request(chalice_client, endpoint='/admin/reviews/pending', token=admin_id).json_body
    assert [review['id'] for review in pending] == [review_id]


def test_moderation_recalculates_rating(chalice_client):
    _, restaurant_id, _ = setup_restaurant_with_menu(chalice_client)
    admin_id = create_test_user('admin')
    first_id = create_review(chalice_client, create_test_user(), restaurant_id, 5)
    second_id = create_review(chalice_client, create_test_user(), restaurant_id, 4)

    assert moderate(chalice_client, admin_id, first_id).status_code == 200
    assert moderate(chalice_client, admin_id, second_id).status_code == 200
    restaurant = get_restaurant(chalice_client, restaurant_id)
    assert restaurant['rating'] == 4.5
    assert restaurant['review_count'] == 2

    reviews = make_request(chalice_client, endpoint=f'/reviews/restaurant/{restaurant_id}').json_body
    assert {review['id'] for review in reviews} == {first_id, second_id}

    assert moderate(chalice_client, admin_id, first_id, is_approved=False).status_code == 200
    restaurant = get_restaurant(chalice_client, restaurant_id)
    assert restaurant['rating'] == 4
    assert restaurant['review_count'] == 1


def test_delete_approved_review_recalculates_rating(chalice_client):
    _, restaurant_id, _ = setup_restaurant_with_menu(chalice_client)
    admin_id = create_test_user('admin')
    customer_id = create_test_user()
    review_id = create_review(chalice_client, customer_id, restaurant_id, 3)
    moderate(chalice_client, admin_id, review_id)
    assert get_restaurant(chalice_client, restaurant_id)['review_count'] == 1

    response = make_request(chalice_client, endpoint=f'/reviews/{review_id}', method='DELETE', token=customer_id)
    assert response.status_code == 200
    restaurant = get_restaurant(chalice_client, restaurant_id)
    assert restaurant['rating'] == 0
    assert restaurant['review_count'] == 0


def test_stranger_cannot_delete_review(chalice_client):
    _, restaurant_id, _ = setup_restaurant_with_menu(chalice_client)
    review_id = create_review(chalice_client, create_test_user(), restaurant_id, 3)
    response = make_request(chalice_client, endpoint=f'/reviews/{review_id}', method='DELETE',
                            token=create_test_user())
    assert response.status_code == 401


def test_customer_cannot_moderate(chalice_client):
    _, restaurant_id, _ = setup_restaurant_with_menu(chalice_client)
    customer_id = create_test_user()
    review_id = create_review(chalice_client, customer_id, restaurant_id, 5)
    assert moderate(chalice_client, customer_id, review_id).status_code == 403


def test_moderate_requires_boolean(chalice_client):
    _, restaurant_id, _ = setup_restaurant_with_menu(chalice_client)
    review_id = create_review(chalice_client, create_test_user(), restaurant_id, 5)
    response = make_request(chalice_client, endpoint=f'/reviews/{review_id}/moderate', method='PUT',
                            token=create_test_user('admin'), json_body={'is_approved': 'yes'})
    assert response.status_code == 400


def test_review_rating_out_of_range(chalice_client):
    _, restaurant_id, _ = setup_restaurant_with_menu(chalice_client)
    response = make_request(chalice_client, endpoint='/reviews', method='POST', token=create_test_user(),
                            json_body={'restaurant_id': restaurant_id, 'rating': 6})
    assert response.status_code == 400


def test_review_of_unknown_restaurant(chalice_client):
    response = make_request(chalice_client, endpoint='/reviews', method='POST', token=create_test_user(),
                            json_body={'restaurant_id': '4b0e3c1a-1111-4222-8333-444455556666', 'rating': 4})
    assert response.status_code == 404


def test_review_with_order(chalice_client):
    created = setup_customer_order(chalice_client)
    create_review(chalice_client, created['customer_id'], created['restaurant_id'], 5,
                  order_id=created['order']['id'])

    response = make_request(chalice_client, endpoint='/reviews', method='POST', token=create_test_user(), json_body={
        'restaurant_id': created['restaurant_id'], 'rating': 1, 'order_id': created['order']['id']})
    assert response.status_code == 400
