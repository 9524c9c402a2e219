from typing import Tuple, List, Dict
from uuid import uuid4

from boto3.dynamodb.conditions import Key, Attr
from chalice import Response
from werkzeug.security import generate_password_hash, check_password_hash

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import USER_ROLES, SELF_REGISTRATION_ROLES, ROLE_CUSTOMER, MIN_PASSWORD_LENGTH
from chalicelib.constants.status_codes import http200
from chalicelib.utils import auth as utils_auth, app as utils_app, data as utils_data, db as utils_db, exceptions
from chalicelib.utils.logger import logger

PROFILE_FIELDS = ('first_name', 'last_name', 'phone')


class User(EntityBase):
    pk = keys_structure.users_pk
    sk = keys_structure.users_sk

    not_found_message = 'User not found'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'email': lambda x: isinstance(x, str) and '@' in x,
        'password_hash': lambda x: isinstance(x, str),
        'date_created': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'role': lambda x: x in USER_ROLES,
        'first_name': lambda x: isinstance(x, str) and len(x) > 0,
        'date_updated': lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'last_name': lambda x: isinstance(x, str),
        'phone': lambda x: isinstance(x, str)
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_, **kwargs)

        self.email: str = kwargs.get('email')
        self.password_hash: str = kwargs.get('password_hash')
        self.first_name: str = kwargs.get('first_name')
        self.last_name: str = kwargs.get('last_name')
        self.phone: str = kwargs.get('phone')
        self.role: str = kwargs.get('role') or ROLE_CUSTOMER
        self.record_type = 'user'

    @classmethod
    def init_by_id(cls, id_):
        logger.info("init_by_id ::: started")
        c = cls(id_)
        c._fill_from_db()
        return c

    @classmethod
    def init_request_register(cls, request):
        logger.info("init_request_register ::: started")
        request_body = utils_data.parse_raw_body(request)
        email, password = request_body.get('email'), request_body.get('password')
        if not isinstance(email, str) or not isinstance(password, str):
            raise exceptions.MandatoryFieldsAreNotFilled('email and password must be provided')
        if len(password) < MIN_PASSWORD_LENGTH:
            raise exceptions.ValidationException(f'Password must be at least {MIN_PASSWORD_LENGTH} characters long')
        role = request_body.get('role', ROLE_CUSTOMER)
        if role not in SELF_REGISTRATION_ROLES:
            raise exceptions.ValidationException(f'Role {role} could not be chosen at registration')
        return cls(
            id_=str(uuid4()),
            email=email.strip().lower(),
            password_hash=generate_password_hash(password),
            first_name=request_body.get('first_name'),
            last_name=request_body.get('last_name'),
            phone=request_body.get('phone'),
            role=role
        )

    @classmethod
    @utils_auth.authenticate_class
    def init_request_user(cls, request):
        logger.info("init_request_user ::: started")
        return cls.init_by_id(request.auth_result['user_id'])

    @classmethod
    @utils_auth.authenticate_class
    def init_request_update(cls, request):
        logger.info("init_request_update ::: started")
        c = cls.init_by_id(request.auth_result['user_id'])
        request_body = utils_data.parse_raw_body(request)
        c._apply_update_body({key: value for key, value in request_body.items() if key in PROFILE_FIELDS})
        return c

    @utils_app.log_start_finish
    def endpoint_register(self) -> Response:
        if get_user_record_by_email(self.email) is not None:
            raise exceptions.EmailAlreadyRegistered(f'User with email {self.email} already exists')
        self._create_db_record()
        return Response(status_code=http200, body={'message': 'User was successfully registered',
                                                   'user': self._to_ui()})

    @utils_app.log_start_finish
    def endpoint_get_user(self) -> Response:
        return Response(status_code=http200, body=self._to_ui())

    @utils_app.log_start_finish
    def endpoint_update_user(self) -> Response:
        self._update_db_record()
        return Response(status_code=http200, body={'message': 'User was successfully updated', 'id': self.id_})

    def update_role(self, role: str):
        if role not in USER_ROLES:
            raise exceptions.ValidationException(f'Unknown role {role}')
        self.role = role
        self._update_db_record()
        logger.info(f'update_role ::: user {self.id_} role changed to {role}')

    def check_password(self, password: str) -> bool:
        return bool(self.password_hash) and check_password_hash(self.password_hash, password)

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk, self.sk.format(user_id=self.id_)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'email': self.email,
            'password_hash': self.password_hash,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'phone': self.phone,
            'role': self.role,
            'date_created': self.date_created,
            'date_updated': self.date_updated
        }


def get_user_record_by_email(email: str):
    records = utils_db.query_items_paged(
        Key('partkey').eq(keys_structure.users_pk),
        filter_expression=Attr('email').eq(email.strip().lower())
    )
    return records[0] if records else None


def get_all_users() -> List[User]:
    return [User.init_by_db_record(record) for record in utils_db.query_items_paged(Key('partkey').eq(User.pk))]


@utils_app.log_start_finish
def endpoint_login(request) -> Response:
    request_body = utils_data.parse_raw_body(request)
    email, password = request_body.get('email'), request_body.get('password')
    if not email or not password:
        raise exceptions.MandatoryFieldsAreNotFilled('email and password must be provided')
    record = get_user_record_by_email(email)
    user = User.init_by_db_record(record) if record else None
    if user is None or not user.check_password(password):
        raise exceptions.AuthorizationException('Invalid email or password')
    logger.info(f'endpoint_login ::: user {user.id_} logged in')
    # The user id is the token: the client stores it and sends it back in the Authorization header
    return Response(status_code=http200, body={'user': user.to_ui(), 'token': user.id_})


def users_to_ui(users: List[User]) -> List[Dict]:
    return [user.to_ui() for user in users]
