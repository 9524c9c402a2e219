from decimal import Decimal
from typing import Tuple, List, Dict
from uuid import uuid4

from boto3.dynamodb.conditions import Attr, Key
from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200
from chalicelib.menu_categories import MenuCategory
from chalicelib.restaurants import Restaurant, get_restaurant_for_manager
from chalicelib.utils import auth as utils_auth, data as utils_data, exceptions, db as utils_db, app as utils_app
from chalicelib.utils.logger import logger

EDITABLE_FIELDS = ('category_id', 'name', 'description', 'price', 'image_url', 'is_available', 'sort_order')


class MenuItem(EntityBase):
    pk = keys_structure.menu_items_pk
    sk = keys_structure.menu_items_sk

    not_found_message = 'Menu item not found'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'restaurant_id': lambda x: isinstance(x, str),
        "date_created": lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'name': lambda x: isinstance(x, str) and len(x) > 0,
        'price': lambda x: isinstance(x, Decimal) and x >= 0,
        'is_available': lambda x: isinstance(x, bool),
        'sort_order': utils_data.is_int,
        'archived': lambda x: isinstance(x, bool),
        "date_updated": lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'category_id': lambda x: isinstance(x, str),
        'description': lambda x: isinstance(x, str),
        'image_url': lambda x: isinstance(x, str)
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_, **kwargs)

        self.restaurant_id: str = kwargs.get('restaurant_id')
        self.category_id: str = kwargs.get('category_id')
        self.name: str = kwargs.get('name')
        self.description: str = kwargs.get('description')
        self.price: Decimal = utils_data.to_money(kwargs.get('price'))
        self.image_url: str = kwargs.get('image_url')
        self.is_available: bool = kwargs.get('is_available', True)
        self.sort_order: int = utils_data.to_int(kwargs.get('sort_order', 0), kwargs.get('sort_order'))
        self.archived: bool = kwargs.get('archived', False)
        self.record_type = 'menu_item'

    @classmethod
    def init_by_id(cls, restaurant_id, menu_item_id, include_archived=False):
        logger.info("init_by_id ::: started")
        c = cls(menu_item_id, restaurant_id=restaurant_id)
        c._fill_from_db()
        if c.archived and not include_archived:
            raise exceptions.RecordNotFound(cls.not_found_message)
        return c

    @classmethod
    @utils_auth.authenticate_class
    def init_request_create(cls, request, restaurant_id):
        logger.info("init_request_create ::: started")
        get_restaurant_for_manager(restaurant_id, request.auth_result)
        request_body = utils_data.parse_raw_body(request)
        c = cls(
            id_=str(uuid4()),
            restaurant_id=restaurant_id,
            **{key: value for key, value in request_body.items() if key in EDITABLE_FIELDS}
        )
        c._check_category()
        return c

    @classmethod
    @utils_auth.authenticate_class
    def init_request_update(cls, request, restaurant_id, menu_item_id):
        logger.info("init_request_update ::: started")
        get_restaurant_for_manager(restaurant_id, request.auth_result)
        c = cls.init_by_id(restaurant_id, menu_item_id)
        request_body = utils_data.parse_raw_body(request)
        c._apply_update_body({key: value for key, value in request_body.items() if key in EDITABLE_FIELDS})
        c.price = utils_data.to_money(c.price)
        c.sort_order = utils_data.to_int(c.sort_order, c.sort_order)
        if 'category_id' in request_body:
            c._check_category()
        return c

    @classmethod
    @utils_auth.authenticate_class
    def init_request_manage(cls, request, restaurant_id, menu_item_id):
        logger.info("init_request_manage ::: started")
        get_restaurant_for_manager(restaurant_id, request.auth_result)
        c = cls.init_by_id(restaurant_id, menu_item_id)
        c.request_data = utils_data.parse_raw_body(request)
        return c

    @staticmethod
    @utils_app.log_start_finish
    def endpoint_get_menu(request, restaurant_id) -> Response:
        Restaurant.init_by_id(restaurant_id)
        params = request.query_params or {}
        menu_items = get_restaurant_menu_items(restaurant_id, category_id=params.get('category_id'))
        logger.info(f"endpoint_get_menu ::: returning menu_items={[item.id_ for item in menu_items]}")
        return Response(status_code=http200, body=[item._to_ui() for item in menu_items])

    @utils_app.log_start_finish
    def endpoint_get_by_id(self) -> Response:
        return Response(status_code=http200, body=self._to_ui())

    @utils_app.log_start_finish
    def endpoint_create(self) -> Response:
        self._create_db_record()
        return Response(status_code=http200, body={'message': 'Menu item successfully created', 'id': self.id_})

    @utils_app.log_start_finish
    def endpoint_update(self) -> Response:
        self._update_db_record()
        return Response(status_code=http200, body={'message': 'Menu item was successfully updated', 'id': self.id_})

    @utils_app.log_start_finish
    def endpoint_set_availability(self) -> Response:
        is_available = self.request_data.get('is_available')
        if not isinstance(is_available, bool):
            raise exceptions.ValidationException('is_available must be a boolean')
        self.is_available = is_available
        self._update_db_record()
        return Response(status_code=http200, body={'message': 'Menu item availability was successfully updated',
                                                   'id': self.id_, 'is_available': self.is_available})

    @utils_app.log_start_finish
    def endpoint_delete(self) -> Response:
        # Archived items stay readable for the order history
        self.archived = True
        self._update_db_record()
        return Response(status_code=http200, body={'message': 'Menu item was successfully deleted', 'id': self.id_})

    def _check_category(self):
        if self.category_id:
            MenuCategory.init_by_id(self.restaurant_id, self.category_id)

    def check_can_be_ordered(self):
        if self.archived or not self.is_available:
            raise exceptions.SomeItemsAreNotAvailable(f'Menu item {self.name} is not available')

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk.format(restaurant_id=self.restaurant_id), self.sk.format(menu_item_id=self.id_)

    def _to_dict(self) -> Dict:
        return {
            'id_': self.id_,
            'restaurant_id': self.restaurant_id,
            'category_id': self.category_id,
            'name': self.name,
            'description': self.description,
            'price': self.price,
            'image_url': self.image_url,
            'is_available': self.is_available,
            'sort_order': self.sort_order,
            'archived': self.archived,
            "date_created": self.date_created,
            "date_updated": self.date_updated
        }


def get_restaurant_menu_items(restaurant_id, category_id=None) -> List[MenuItem]:
    filter_expression = Attr('archived').eq(False)
    if category_id:
        filter_expression = filter_expression & Attr('category_id').eq(category_id)
    records = utils_db.query_items_paged(
        Key('partkey').eq(keys_structure.menu_items_pk.format(restaurant_id=restaurant_id)),
        filter_expression=filter_expression
    )
    menu_items = [MenuItem.init_by_db_record(record) for record in records]
    return sorted(menu_items, key=lambda item: (item.sort_order, item.name or ''))


def find_menu_item(menu_item_id) -> MenuItem:
    """
    Looks a menu item up by its id alone, for callers which only know the item (options)
    """
    records = utils_db.query_items_paged(
        Key('partkey').eq(keys_structure.restaurants_pk),
        projection_expression='id_'
    )
    for record in records:
        try:
            return MenuItem.init_by_id(record['id_'], menu_item_id, include_archived=True)
        except exceptions.RecordNotFound:
            continue
    raise exceptions.RecordNotFound(MenuItem.not_found_message)
