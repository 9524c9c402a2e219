import functools

from chalice.app import Request

from chalicelib.constants import keys_structure
from chalicelib.constants.constants import ROLE_ADMIN
from chalicelib.utils import exceptions as utils_exceptions, db as utils_db
from chalicelib.utils.logger import logger


def get_user_role(user_id) -> str:
    try:
        user_item = utils_db.get_db_item(
            partkey=keys_structure.users_pk,
            sortkey=keys_structure.users_sk.format(user_id=user_id)
        )
    except utils_exceptions.RecordNotFound:
        raise utils_exceptions.NotAuthorizedException(f'Unknown user {user_id}')
    return user_item.get('role')


def get_auth_result(request: Request) -> dict:
    """
    The client sends its user id in the Authorization header (no session, no token signature)
    """
    user_id = request.headers.get('authorization')
    if not user_id:
        raise utils_exceptions.NotAuthorizedException('Error occurred in authorization process')
    return {'user_id': user_id, 'role': get_user_role(user_id)}


def authenticate(func):
    """
    Wrapper for functions which require user's authentication
    """

    @functools.wraps(func)
    def result_auth(*args, **kwargs):
        request = args[0]
        auth_result = get_auth_result(request)
        setattr(request, 'auth_result', auth_result)
        result = func(*args, **kwargs)
        logger.info(f'authenticate ::: SUCCESS, func.__name__ {func.__name__}')
        return result

    return result_auth


def authenticate_class(func):
    """
    Wrapper for class methods which require user's authentication
    """

    @functools.wraps(func)
    def result_auth(*args, **kwargs):
        request = args[1]
        auth_result = get_auth_result(request)
        setattr(request, 'auth_result', auth_result)
        logger.info(f'authenticate_class ::: SUCCESS, user_id={auth_result["user_id"]}, role={auth_result["role"]}')
        return func(*args, **kwargs)

    return result_auth


def is_admin(auth_result: dict) -> bool:
    return auth_result.get('role') == ROLE_ADMIN


def check_owner_or_admin(auth_result: dict, owner_id: str, msg: str = 'Access Denied error'):
    if not is_admin(auth_result) and auth_result.get('user_id') != owner_id:
        raise utils_exceptions.AccessDenied(msg)
