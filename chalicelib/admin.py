import functools
from collections import Counter
from decimal import Decimal

from chalice import Response

from chalicelib import addresses, carts, orders, payments, restaurants, reviews, users
from chalicelib.constants.constants import USER_ROLES, ORDER_STATUSES, ORDER_DELIVERED, CENTS
from chalicelib.constants.status_codes import http200
from chalicelib.utils import auth as utils_auth, app as utils_app, data as utils_data, exceptions
from chalicelib.utils.logger import logger


def admin_only(func):
    """
    Wrapper for admin endpoints, the first argument must be the request
    """

    @functools.wraps(func)
    @utils_auth.authenticate
    def result(request, *args, **kwargs):
        if not utils_auth.is_admin(request.auth_result):
            raise exceptions.AccessDenied(f'Only admins can call {func.__name__}')
        return func(request, *args, **kwargs)

    return result


@utils_app.log_start_finish
@admin_only
def endpoint_get_all_users(request) -> Response:
    return Response(status_code=http200, body=users.users_to_ui(users.get_all_users()))


@utils_app.log_start_finish
@admin_only
def endpoint_update_user_role(request, user_id) -> Response:
    role = utils_data.parse_raw_body(request).get('role')
    user = users.User.init_by_id(user_id)
    user.update_role(role)
    return Response(status_code=http200, body={'message': 'User role was successfully updated',
                                               'id': user.id_, 'role': user.role})


def delete_user(user_id: str) -> dict:
    """
    Deletes a user with the addresses, cart rows and owned restaurants (menus included).
    Orders, payments and reviews stay as history.
    """
    user = users.User.init_by_id(user_id)
    deleted_addresses = addresses.delete_user_addresses(user.id_)
    deleted_cart_items = carts.clear_user_cart(user.id_)
    owned_restaurants = restaurants.get_owner_restaurants(user.id_)
    for restaurant in owned_restaurants:
        restaurant.delete_with_menu()
    user._delete_db_record()
    logger.info(f'delete_user ::: user {user_id} deleted with {deleted_addresses} addresses, '
                f'{deleted_cart_items} cart items and {len(owned_restaurants)} restaurants')
    return {
        'addresses': deleted_addresses,
        'cart_items': deleted_cart_items,
        'restaurants': len(owned_restaurants)
    }


@utils_app.log_start_finish
@admin_only
def endpoint_delete_user(request, user_id) -> Response:
    if user_id == request.auth_result['user_id']:
        raise exceptions.ValidationException('Admins cannot delete themselves')
    deleted = delete_user(user_id)
    return Response(status_code=http200, body={'message': 'User was successfully deleted', 'id': user_id,
                                               'deleted': deleted})


def get_system_stats() -> dict:
    all_users = users.get_all_users()
    all_restaurants = restaurants.get_all_restaurants()
    all_orders = orders.get_orders()
    users_by_role = Counter(user.role for user in all_users)
    orders_by_status = Counter(order.status for order in all_orders)
    revenue = sum((order.total_amount for order in all_orders if order.status == ORDER_DELIVERED), Decimal(0))
    return {
        'total_users': len(all_users),
        'users_by_role': {role: users_by_role.get(role, 0) for role in USER_ROLES},
        'total_restaurants': len(all_restaurants),
        'active_restaurants': len([restaurant for restaurant in all_restaurants if restaurant.is_active]),
        'total_orders': len(all_orders),
        'orders_by_status': {status: orders_by_status.get(status, 0) for status in ORDER_STATUSES},
        'pending_reviews': len(reviews.get_pending_reviews()),
        'total_revenue': revenue.quantize(CENTS)
    }


@utils_app.log_start_finish
@admin_only
def endpoint_get_system_stats(request) -> Response:
    return Response(status_code=http200, body=get_system_stats())


@utils_app.log_start_finish
@admin_only
def endpoint_get_all_orders(request) -> Response:
    qp = request.query_params or {}
    all_orders = orders.get_orders(orders.status_filter(qp.get('status')))
    return Response(status_code=http200, body=orders.orders_to_ui(all_orders))


@utils_app.log_start_finish
@admin_only
def endpoint_get_all_payments(request) -> Response:
    return Response(status_code=http200, body=[payment.to_ui() for payment in payments.get_payments()])


@utils_app.log_start_finish
@admin_only
def endpoint_get_all_restaurants(request) -> Response:
    all_restaurants = restaurants.get_all_restaurants()
    return Response(status_code=http200, body=[restaurant.to_ui() for restaurant in all_restaurants])


@utils_app.log_start_finish
@admin_only
def endpoint_get_pending_reviews(request) -> Response:
    return Response(status_code=http200, body=[review.to_ui() for review in reviews.get_pending_reviews()])
