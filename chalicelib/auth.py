from chalice import AuthResponse, AuthRoute

from chalicelib.constants.constants import ROLE_CUSTOMER, ROLE_RESTAURANT_OWNER, ROLE_ADMIN
from chalicelib.users import User
from chalicelib.utils.exceptions import RecordNotFound
from chalicelib.utils.logger import logger

UUID_PATTERN = '????????-????-4???-????-????????????'
ORDER_ID_PATTERN = '????????'

PROFILE_ROUTES = [
    AuthRoute(path='/users', methods=['GET', 'PUT']),
    AuthRoute(path='/addresses', methods=['GET', 'POST']),
    AuthRoute(path=f'/addresses/{UUID_PATTERN}', methods=['PUT', 'DELETE']),
    AuthRoute(path=f'/addresses/{UUID_PATTERN}/default', methods=['PUT']),
    AuthRoute(path='/reviews', methods=['GET']),
]

CUSTOMER_ROUTES = [
    AuthRoute(path='/carts', methods=['GET', 'POST', 'DELETE']),
    AuthRoute(path=f'/carts/{UUID_PATTERN}/{UUID_PATTERN}', methods=['PUT', 'DELETE']),
    AuthRoute(path='/orders', methods=['GET', 'POST']),
    AuthRoute(path=f'/orders/{ORDER_ID_PATTERN}', methods=['GET']),
    AuthRoute(path=f'/orders/{ORDER_ID_PATTERN}/cancel', methods=['PUT']),
    AuthRoute(path='/payments', methods=['POST']),
    AuthRoute(path=f'/payments/order/{ORDER_ID_PATTERN}', methods=['GET']),
    AuthRoute(path=f'/payments/{UUID_PATTERN}/process', methods=['PUT']),
    AuthRoute(path=f'/payments/{UUID_PATTERN}/refund', methods=['PUT']),
    AuthRoute(path='/reviews', methods=['POST']),
    AuthRoute(path=f'/reviews/{UUID_PATTERN}', methods=['DELETE']),
]

RESTAURANT_OWNER_ROUTES = [
    AuthRoute(path='/restaurants', methods=['POST']),
    AuthRoute(path=f'/restaurants/{UUID_PATTERN}', methods=['PUT']),
    AuthRoute(path=f'/menu-categories/{UUID_PATTERN}', methods=['POST']),
    AuthRoute(path=f'/menu-categories/{UUID_PATTERN}/{UUID_PATTERN}', methods=['PUT', 'DELETE']),
    AuthRoute(path=f'/menu-items/{UUID_PATTERN}', methods=['POST']),
    AuthRoute(path=f'/menu-items/{UUID_PATTERN}/{UUID_PATTERN}', methods=['PUT', 'DELETE']),
    AuthRoute(path=f'/menu-items/{UUID_PATTERN}/{UUID_PATTERN}/availability', methods=['PUT']),
    AuthRoute(path=f'/menu-item-options/{UUID_PATTERN}', methods=['POST']),
    AuthRoute(path=f'/menu-item-options/{UUID_PATTERN}/{UUID_PATTERN}', methods=['PUT', 'DELETE']),
    AuthRoute(path=f'/orders/restaurant/{UUID_PATTERN}', methods=['GET']),
    AuthRoute(path=f'/orders/{ORDER_ID_PATTERN}', methods=['GET']),
    AuthRoute(path=f'/orders/{ORDER_ID_PATTERN}/status', methods=['PUT']),
    AuthRoute(path=f'/orders/{ORDER_ID_PATTERN}/cancel', methods=['PUT']),
    AuthRoute(path=f'/payments/order/{ORDER_ID_PATTERN}', methods=['GET']),
]

ADMIN_ROUTES = [
    AuthRoute(path=f'/reviews/{UUID_PATTERN}/moderate', methods=['PUT']),
    AuthRoute(path='/admin/*', methods=['GET', 'PUT', 'DELETE']),
]

ROUTES_BY_ROLE = {
    ROLE_CUSTOMER: PROFILE_ROUTES + CUSTOMER_ROUTES,
    ROLE_RESTAURANT_OWNER: PROFILE_ROUTES + RESTAURANT_OWNER_ROUTES,
    ROLE_ADMIN: PROFILE_ROUTES + CUSTOMER_ROUTES + RESTAURANT_OWNER_ROUTES + ADMIN_ROUTES,
}


def role_authorizer(auth_request):
    """
    The token is the user id returned by login. Unknown users and roles get no routes.
    """
    user_id = auth_request.token
    try:
        user: User = User.init_by_id(user_id)
    except RecordNotFound:
        logger.warning(f'role_authorizer ::: unknown user {user_id}')
        return AuthResponse(routes=[], principal_id='')
    routes = ROUTES_BY_ROLE.get(user.role, [])
    logger.info(f'role_authorizer ::: user {user_id} role={user.role} granted {len(routes)} routes')
    return AuthResponse(routes=routes, principal_id=user.role if routes else '')
