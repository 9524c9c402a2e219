import os

from chalice import Chalice, Response

from chalicelib import addresses, admin, auth, carts, menu_categories, menu_item_options, menu_items, orders, \
    payments, restaurants, reviews, triggers, users
from chalicelib.utils import app as utils_app
from chalicelib.utils.logger import set_request_id, log_request

app = Chalice(app_name='food-delivery-marketplace')

app.debug = os.environ.get('DEBUG', 'false').lower() == 'true'


def get_gen_table_stream_arn():
    return os.environ.get(
        'ORDERS_TABLE_STREAM_ARN',
        'arn:aws:dynamodb:eu-central-1:000000000000:table/food-delivery/stream/1970-01-01T00:00:00.000'
    )


@app.middleware('http')
def request_middleware(event, get_response):
    set_request_id(app.lambda_context)
    log_request(event)
    return get_response(event)


@app.authorizer()
def role_authorizer(auth_request):
    return auth.role_authorizer(auth_request)


@app.on_dynamodb_record(stream_arn=get_gen_table_stream_arn())
def db_gen_table_stream_trigger(event):
    return triggers.db_gen_table_stream_trigger(event)


@app.route('/health-check', methods=['GET'], cors=True)
def health_check():
    return Response(status_code=200, body={'health': 'check'})


# USERS
@app.route('/users/register', methods=['POST'], cors=True)
@utils_app.request_exception_handler
def register_user():
    return users.User.init_request_register(app.current_request).endpoint_register()


@app.route('/users/login', methods=['POST'], cors=True)
@utils_app.request_exception_handler
def login_user():
    return users.endpoint_login(app.current_request)


@app.route('/users', methods=['GET'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def get_user():
    return users.User.init_request_user(app.current_request).endpoint_get_user()


@app.route('/users', methods=['PUT'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def update_user():
    return users.User.init_request_update(app.current_request).endpoint_update_user()


# ADDRESSES
@app.route('/addresses', methods=['GET'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def get_addresses():
    return addresses.Address.endpoint_get_all(app.current_request)


@app.route('/addresses', methods=['POST'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def create_address():
    return addresses.Address.init_request_create(app.current_request).endpoint_create()


@app.route('/addresses/{address_id}', methods=['PUT'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def update_address(address_id):
    return addresses.Address.init_request_update(app.current_request, address_id).endpoint_update()


@app.route('/addresses/{address_id}', methods=['DELETE'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def delete_address(address_id):
    return addresses.Address.init_request_by_id(app.current_request, address_id).endpoint_delete()


@app.route('/addresses/{address_id}/default', methods=['PUT'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def set_default_address(address_id):
    return addresses.Address.init_request_by_id(app.current_request, address_id).endpoint_set_default()


# RESTAURANTS
@app.route('/restaurants', methods=['GET'], cors=True)
@utils_app.request_exception_handler
def get_restaurants():
    return restaurants.Restaurant.endpoint_get_all(app.current_request)


@app.route('/restaurants/{restaurant_id}', methods=['GET'], cors=True)
@utils_app.request_exception_handler
def get_restaurant_by_id(restaurant_id):
    return restaurants.Restaurant.init_by_id(restaurant_id).endpoint_get_by_id()


@app.route('/restaurants/owner/{owner_id}', methods=['GET'], cors=True)
@utils_app.request_exception_handler
def get_owner_restaurants(owner_id):
    return restaurants.Restaurant.endpoint_get_by_owner(owner_id)


@app.route('/restaurants', methods=['POST'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def create_restaurant():
    """
    restaurant owner or admin operation
    """
    return restaurants.Restaurant.init_request_create(app.current_request).endpoint_create()


@app.route('/restaurants/{restaurant_id}', methods=['PUT'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def update_restaurant(restaurant_id):
    """
    restaurant owner or admin operation
    """
    return restaurants.Restaurant.init_request_update(app.current_request, restaurant_id).endpoint_update()


# MENU CATEGORIES
@app.route('/menu-categories/{restaurant_id}', methods=['GET'], cors=True)
@utils_app.request_exception_handler
def get_menu_categories(restaurant_id):
    return menu_categories.MenuCategory.endpoint_get_all(restaurant_id)


@app.route('/menu-categories/{restaurant_id}', methods=['POST'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def create_menu_category(restaurant_id):
    return menu_categories.MenuCategory.init_request_create(app.current_request, restaurant_id).endpoint_create()


@app.route('/menu-categories/{restaurant_id}/{category_id}', methods=['PUT'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def update_menu_category(restaurant_id, category_id):
    return menu_categories.MenuCategory.init_request_update(
        app.current_request, restaurant_id, category_id).endpoint_update()


@app.route('/menu-categories/{restaurant_id}/{category_id}', methods=['DELETE'], authorizer=role_authorizer,
           cors=True)
@utils_app.request_exception_handler
def delete_menu_category(restaurant_id, category_id):
    return menu_categories.MenuCategory.init_request_delete(
        app.current_request, restaurant_id, category_id).endpoint_delete()


# MENU ITEMS
@app.route('/menu-items/{restaurant_id}', methods=['GET'], cors=True)
@utils_app.request_exception_handler
def get_restaurant_menu(restaurant_id):
    return menu_items.MenuItem.endpoint_get_menu(app.current_request, restaurant_id)


@app.route('/menu-items/{restaurant_id}/{menu_item_id}', methods=['GET'], cors=True)
@utils_app.request_exception_handler
def get_menu_item(restaurant_id, menu_item_id):
    return menu_items.MenuItem.init_by_id(restaurant_id, menu_item_id).endpoint_get_by_id()


@app.route('/menu-items/{restaurant_id}', methods=['POST'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def create_menu_item(restaurant_id):
    """
    restaurant owner operation
    """
    return menu_items.MenuItem.init_request_create(app.current_request, restaurant_id).endpoint_create()


@app.route('/menu-items/{restaurant_id}/{menu_item_id}', methods=['PUT'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def update_menu_item(restaurant_id, menu_item_id):
    """
    restaurant owner operation
    """
    return menu_items.MenuItem.init_request_update(app.current_request, restaurant_id, menu_item_id).\
        endpoint_update()


@app.route('/menu-items/{restaurant_id}/{menu_item_id}/availability', methods=['PUT'], authorizer=role_authorizer,
           cors=True)
@utils_app.request_exception_handler
def set_menu_item_availability(restaurant_id, menu_item_id):
    return menu_items.MenuItem.init_request_manage(app.current_request, restaurant_id, menu_item_id).\
        endpoint_set_availability()


@app.route('/menu-items/{restaurant_id}/{menu_item_id}', methods=['DELETE'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def delete_menu_item(restaurant_id, menu_item_id):
    """
    restaurant owner operation, the item is archived
    """
    return menu_items.MenuItem.init_request_manage(app.current_request, restaurant_id, menu_item_id).\
        endpoint_delete()


# MENU ITEM OPTIONS
@app.route('/menu-item-options/{menu_item_id}', methods=['GET'], cors=True)
@utils_app.request_exception_handler
def get_menu_item_options(menu_item_id):
    return menu_item_options.MenuItemOption.endpoint_get_all(menu_item_id)


@app.route('/menu-item-options/{menu_item_id}', methods=['POST'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def create_menu_item_option(menu_item_id):
    return menu_item_options.MenuItemOption.init_request_create(app.current_request, menu_item_id).\
        endpoint_create()


@app.route('/menu-item-options/{menu_item_id}/{option_id}', methods=['PUT'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def update_menu_item_option(menu_item_id, option_id):
    return menu_item_options.MenuItemOption.init_request_update(app.current_request, menu_item_id, option_id).\
        endpoint_update()


@app.route('/menu-item-options/{menu_item_id}/{option_id}', methods=['DELETE'], authorizer=role_authorizer,
           cors=True)
@utils_app.request_exception_handler
def delete_menu_item_option(menu_item_id, option_id):
    return menu_item_options.MenuItemOption.init_request_delete(app.current_request, menu_item_id, option_id).\
        endpoint_delete()


# CART
@app.route('/carts', methods=['GET'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def get_cart():
    return carts.CartItem.endpoint_get_cart(app.current_request)


@app.route('/carts', methods=['POST'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def add_item_to_cart():
    return carts.CartItem.init_request_add(app.current_request).endpoint_add_item_to_cart()


@app.route('/carts', methods=['DELETE'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def clear_cart():
    return carts.CartItem.endpoint_clear_cart(app.current_request)


@app.route('/carts/{restaurant_id}/{cart_item_id}', methods=['PUT'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def update_cart_item(restaurant_id, cart_item_id):
    return carts.CartItem.init_request_by_id(app.current_request, restaurant_id, cart_item_id).\
        endpoint_update_quantity()


@app.route('/carts/{restaurant_id}/{cart_item_id}', methods=['DELETE'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def remove_item_from_cart(restaurant_id, cart_item_id):
    return carts.CartItem.init_request_by_id(app.current_request, restaurant_id, cart_item_id).\
        endpoint_remove_item_from_cart()


# ORDERS
@app.route('/orders', methods=['POST'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def create_order():
    """
    The order is built from the user's cart rows of one restaurant
    """
    return orders.Order.init_request_create_order(app.current_request).endpoint_create_order()


@app.route('/orders', methods=['GET'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def get_orders():
    """
    user can get his orders
    """
    return orders.endpoint_get_user_orders(app.current_request)


@app.route('/orders/{order_id}', methods=['GET'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def get_order_by_id(order_id):
    """
    user can get details only of his orders
    restaurant owner can get details of the restaurant's orders
    admin can get details of any order
    """
    return orders.Order.init_request_get_order(app.current_request, order_id).endpoint_get_by_id()


@app.route('/orders/restaurant/{restaurant_id}', methods=['GET'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def get_restaurant_orders(restaurant_id):
    return orders.endpoint_get_restaurant_orders(app.current_request, restaurant_id)


@app.route('/orders/{order_id}/status', methods=['PUT'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def update_order_status(order_id):
    """
    restaurant owner or admin operation
    """
    return orders.Order.init_request_update_status(app.current_request, order_id).endpoint_update_status()


@app.route('/orders/{order_id}/cancel', methods=['PUT'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def cancel_order(order_id):
    return orders.Order.init_request_cancel(app.current_request, order_id).endpoint_cancel()


# PAYMENTS
@app.route('/payments', methods=['POST'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def create_payment():
    return payments.Payment.init_request_create(app.current_request).endpoint_create()


@app.route('/payments/order/{order_id}', methods=['GET'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def get_order_payments(order_id):
    return payments.endpoint_get_order_payments(app.current_request, order_id)


@app.route('/payments/{payment_id}/process', methods=['PUT'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def process_payment(payment_id):
    return payments.Payment.init_request_by_id(app.current_request, payment_id).endpoint_process()


@app.route('/payments/{payment_id}/refund', methods=['PUT'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def refund_payment(payment_id):
    return payments.Payment.init_request_by_id(app.current_request, payment_id).endpoint_refund()


# REVIEWS
@app.route('/reviews', methods=['POST'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def create_review():
    return reviews.Review.init_request_create(app.current_request).endpoint_create()


@app.route('/reviews', methods=['GET'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def get_user_reviews():
    return reviews.endpoint_get_user_reviews(app.current_request)


@app.route('/reviews/restaurant/{restaurant_id}', methods=['GET'], cors=True)
@utils_app.request_exception_handler
def get_restaurant_reviews(restaurant_id):
    return reviews.endpoint_get_restaurant_reviews(restaurant_id)


@app.route('/reviews/{review_id}/moderate', methods=['PUT'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def moderate_review(review_id):
    """
    admin operation
    """
    return reviews.Review.init_request_moderate(app.current_request, review_id).endpoint_moderate()


@app.route('/reviews/{review_id}', methods=['DELETE'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def delete_review(review_id):
    return reviews.Review.init_request_delete(app.current_request, review_id).endpoint_delete()


# ADMIN
@app.route('/admin/users', methods=['GET'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def admin_get_users():
    return admin.endpoint_get_all_users(app.current_request)


@app.route('/admin/users/{user_id}/role', methods=['PUT'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def admin_update_user_role(user_id):
    return admin.endpoint_update_user_role(app.current_request, user_id)


@app.route('/admin/users/{user_id}', methods=['DELETE'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def admin_delete_user(user_id):
    return admin.endpoint_delete_user(app.current_request, user_id)


@app.route('/admin/stats', methods=['GET'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def admin_get_stats():
    return admin.endpoint_get_system_stats(app.current_request)


@app.route('/admin/orders', methods=['GET'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def admin_get_orders():
    return admin.endpoint_get_all_orders(app.current_request)


@app.route('/admin/payments', methods=['GET'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def admin_get_payments():
    return admin.endpoint_get_all_payments(app.current_request)


@app.route('/admin/restaurants', methods=['GET'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def admin_get_restaurants():
    return admin.endpoint_get_all_restaurants(app.current_request)


@app.route('/admin/reviews/pending', methods=['GET'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def admin_get_pending_reviews():
    return admin.endpoint_get_pending_reviews(app.current_request)


@app.route('/admin/restaurants/{restaurant_id}/activate', methods=['PUT'], authorizer=role_authorizer, cors=True)
@utils_app.request_exception_handler
def admin_activate_restaurant(restaurant_id):
    return restaurants.Restaurant.init_request_admin(app.current_request, restaurant_id).endpoint_set_active(True)


@app.route('/admin/restaurants/{restaurant_id}/deactivate', methods=['PUT'], authorizer=role_authorizer,
           cors=True)
@utils_app.request_exception_handler
def admin_deactivate_restaurant(restaurant_id):
    return restaurants.Restaurant.init_request_admin(app.current_request, restaurant_id).endpoint_set_active(False)
