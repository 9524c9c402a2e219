from decimal import Decimal
from typing import Tuple, List, Dict
from uuid import uuid4

from boto3.dynamodb.conditions import Key
from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200
from chalicelib.menu_items import find_menu_item
from chalicelib.restaurants import get_restaurant_for_manager
from chalicelib.utils import auth as utils_auth, data as utils_data, db as utils_db, app as utils_app
from chalicelib.utils.logger import logger

EDITABLE_FIELDS = ('name', 'price_modifier', 'is_required', 'sort_order')


class MenuItemOption(EntityBase):
    pk = keys_structure.menu_item_options_pk
    sk = keys_structure.menu_item_options_sk

    not_found_message = 'Menu item option not found'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'menu_item_id': lambda x: isinstance(x, str),
        'restaurant_id': lambda x: isinstance(x, str),
        'date_created': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'name': lambda x: isinstance(x, str) and len(x) > 0,
        'price_modifier': lambda x: isinstance(x, Decimal),
        'is_required': lambda x: isinstance(x, bool),
        'sort_order': utils_data.is_int,
        'date_updated': lambda x: isinstance(x, str)
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_, **kwargs)

        self.menu_item_id: str = kwargs.get('menu_item_id')
        self.restaurant_id: str = kwargs.get('restaurant_id')
        self.name: str = kwargs.get('name')
        self.price_modifier: Decimal = utils_data.to_money(kwargs.get('price_modifier', 0))
        self.is_required: bool = kwargs.get('is_required', False)
        self.sort_order: int = utils_data.to_int(kwargs.get('sort_order', 0), kwargs.get('sort_order'))
        self.record_type = 'menu_item_option'

    @classmethod
    def init_by_id(cls, menu_item_id, option_id):
        c = cls(option_id, menu_item_id=menu_item_id)
        c._fill_from_db()
        return c

    @classmethod
    @utils_auth.authenticate_class
    def init_request_create(cls, request, menu_item_id):
        logger.info("init_request_create ::: started")
        menu_item = find_menu_item(menu_item_id)
        get_restaurant_for_manager(menu_item.restaurant_id, request.auth_result)
        request_body = utils_data.parse_raw_body(request)
        return cls(
            id_=str(uuid4()),
            menu_item_id=menu_item.id_,
            restaurant_id=menu_item.restaurant_id,
            **{key: value for key, value in request_body.items() if key in EDITABLE_FIELDS}
        )

    @classmethod
    @utils_auth.authenticate_class
    def init_request_update(cls, request, menu_item_id, option_id):
        logger.info("init_request_update ::: started")
        c = cls.init_by_id(menu_item_id, option_id)
        get_restaurant_for_manager(c.restaurant_id, request.auth_result)
        request_body = utils_data.parse_raw_body(request)
        c._apply_update_body({key: value for key, value in request_body.items() if key in EDITABLE_FIELDS})
        c.price_modifier = utils_data.to_money(c.price_modifier)
        c.sort_order = utils_data.to_int(c.sort_order, c.sort_order)
        return c

    @classmethod
    @utils_auth.authenticate_class
    def init_request_delete(cls, request, menu_item_id, option_id):
        logger.info("init_request_delete ::: started")
        c = cls.init_by_id(menu_item_id, option_id)
        get_restaurant_for_manager(c.restaurant_id, request.auth_result)
        return c

    @staticmethod
    @utils_app.log_start_finish
    def endpoint_get_all(menu_item_id) -> Response:
        find_menu_item(menu_item_id)
        options = get_menu_item_options(menu_item_id)
        return Response(status_code=http200, body=[option._to_ui() for option in options])

    @utils_app.log_start_finish
    def endpoint_create(self) -> Response:
        self._create_db_record()
        return Response(status_code=http200, body={'message': 'Menu item option successfully created',
                                                   'id': self.id_})

    @utils_app.log_start_finish
    def endpoint_update(self) -> Response:
        self._update_db_record()
        return Response(status_code=http200, body={'message': 'Menu item option was successfully updated',
                                                   'id': self.id_})

    @utils_app.log_start_finish
    def endpoint_delete(self) -> Response:
        self._delete_db_record()
        return Response(status_code=http200, body={'message': 'Menu item option was successfully deleted',
                                                   'id': self.id_})

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk.format(menu_item_id=self.menu_item_id), self.sk.format(option_id=self.id_)

    def _to_dict(self) -> Dict:
        return {
            'id_': self.id_,
            'menu_item_id': self.menu_item_id,
            'restaurant_id': self.restaurant_id,
            'name': self.name,
            'price_modifier': self.price_modifier,
            'is_required': self.is_required,
            'sort_order': self.sort_order,
            'date_created': self.date_created,
            'date_updated': self.date_updated
        }


def get_menu_item_options(menu_item_id) -> List[MenuItemOption]:
    records = utils_db.query_items_paged(
        Key('partkey').eq(keys_structure.menu_item_options_pk.format(menu_item_id=menu_item_id)))
    options = [MenuItemOption.init_by_db_record(record) for record in records]
    return sorted(options, key=lambda option: (option.sort_order, option.name or ''))


def get_selected_options(menu_item_id, selected_option_ids: List) -> List[MenuItemOption]:
    """
    Resolves option ids against the options of a menu item, unknown ids raise RecordNotFound
    """
    return [MenuItemOption.init_by_id(menu_item_id, option_id) for option_id in selected_option_ids]
