from typing import Tuple, List, Dict
from uuid import uuid4

from boto3.dynamodb.conditions import Key
from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200
from chalicelib.utils import auth as utils_auth, app as utils_app, data as utils_data, db as utils_db, exceptions
from chalicelib.utils.logger import logger


class Address(EntityBase):
    pk = keys_structure.addresses_pk
    sk = keys_structure.addresses_sk

    not_found_message = 'Address not found'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'user_id': lambda x: isinstance(x, str),
        'date_created': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'street_address': lambda x: isinstance(x, str) and len(x) > 0,
        'city': lambda x: isinstance(x, str) and len(x) > 0,
        'postal_code': lambda x: isinstance(x, str) and len(x) > 0,
        'country': lambda x: isinstance(x, str) and len(x) > 0,
        'is_default': lambda x: isinstance(x, bool),
        'date_updated': lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'state': lambda x: isinstance(x, str)
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_, **kwargs)

        self.user_id: str = kwargs.get('user_id')
        self.street_address: str = kwargs.get('street_address')
        self.city: str = kwargs.get('city')
        self.state: str = kwargs.get('state')
        self.postal_code: str = kwargs.get('postal_code')
        self.country: str = kwargs.get('country')
        self.is_default: bool = kwargs.get('is_default', False)
        self.record_type = 'address'

    @classmethod
    def init_by_id(cls, user_id, address_id):
        logger.info("init_by_id ::: started")
        c = cls(address_id, user_id=user_id)
        c._fill_from_db()
        return c

    @classmethod
    @utils_auth.authenticate_class
    def init_request_create(cls, request):
        logger.info("init_request_create ::: started")
        request_body = utils_data.parse_raw_body(request)
        request_body.pop('id', None)
        request_body.pop('id_', None)
        request_body['user_id'] = request.auth_result['user_id']
        return cls(id_=str(uuid4()), **request_body)

    @classmethod
    @utils_auth.authenticate_class
    def init_request_by_id(cls, request, address_id):
        logger.info("init_request_by_id ::: started")
        return cls.init_by_id(request.auth_result['user_id'], address_id)

    @classmethod
    @utils_auth.authenticate_class
    def init_request_update(cls, request, address_id):
        logger.info("init_request_update ::: started")
        c = cls.init_by_id(request.auth_result['user_id'], address_id)
        c._apply_update_body(utils_data.parse_raw_body(request))
        return c

    @staticmethod
    @utils_auth.authenticate
    @utils_app.log_start_finish
    def endpoint_get_all(request) -> Response:
        addresses = get_user_addresses(request.auth_result['user_id'])
        return Response(status_code=http200, body=[address._to_ui() for address in addresses])

    @utils_app.log_start_finish
    def endpoint_create(self) -> Response:
        if not get_user_addresses(self.user_id):
            logger.info(f'endpoint_create ::: first address of user {self.user_id}, making it default')
            self.is_default = True
        if self.is_default:
            self._unset_other_defaults()
        self._create_db_record()
        return Response(status_code=http200, body={'message': 'Address was successfully created', 'id': self.id_})

    @utils_app.log_start_finish
    def endpoint_update(self) -> Response:
        if self.is_default:
            self._unset_other_defaults()
        self._update_db_record()
        return Response(status_code=http200, body={'message': 'Address was successfully updated', 'id': self.id_})

    @utils_app.log_start_finish
    def endpoint_set_default(self) -> Response:
        self._unset_other_defaults()
        self.is_default = True
        self._update_db_record()
        return Response(status_code=http200, body={'message': 'Default address was successfully set', 'id': self.id_})

    @utils_app.log_start_finish
    def endpoint_delete(self) -> Response:
        self._delete_db_record()
        return Response(status_code=http200, body={'message': 'Address was successfully deleted', 'id': self.id_})

    def _unset_other_defaults(self):
        for address in get_user_addresses(self.user_id):
            if address.id_ != self.id_ and address.is_default:
                address.is_default = False
                address._update_db_record()
                logger.info(f'_unset_other_defaults ::: address {address.id_} is not default anymore')

    def to_text(self) -> str:
        parts = [self.street_address, self.city, self.state, self.postal_code, self.country]
        return ', '.join(part for part in parts if part)

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk.format(user_id=self.user_id), self.sk.format(address_id=self.id_)

    def _to_dict(self) -> Dict:
        return {
            'id_': self.id_,
            'user_id': self.user_id,
            'street_address': self.street_address,
            'city': self.city,
            'state': self.state,
            'postal_code': self.postal_code,
            'country': self.country,
            'is_default': self.is_default,
            'date_created': self.date_created,
            'date_updated': self.date_updated
        }


def get_user_addresses(user_id) -> List[Address]:
    records = utils_db.query_items_paged(Key('partkey').eq(keys_structure.addresses_pk.format(user_id=user_id)))
    return [Address.init_by_db_record(record) for record in records]


def delete_user_addresses(user_id) -> int:
    addresses = get_user_addresses(user_id)
    for address in addresses:
        address._delete_db_record()
    return len(addresses)


def get_address_or_raise(user_id, address_id) -> Address:
    if not address_id:
        raise exceptions.MandatoryFieldsAreNotFilled('delivery_address_id must be provided')
    return Address.init_by_id(user_id, address_id)
