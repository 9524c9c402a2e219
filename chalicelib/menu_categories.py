from typing import Tuple, List
from uuid import uuid4

from boto3.dynamodb.conditions import Key, Attr
from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200
from chalicelib.restaurants import Restaurant, get_restaurant_for_manager
from chalicelib.utils import auth as utils_auth, app as utils_app, data as utils_data, db as utils_db
from chalicelib.utils.logger import logger


class MenuCategory(EntityBase):
    pk = keys_structure.menu_categories_pk
    sk = keys_structure.menu_categories_sk

    not_found_message = 'Menu category not found'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'restaurant_id': lambda x: isinstance(x, str),
        'date_created': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'name': lambda x: isinstance(x, str) and len(x) > 0,
        'sort_order': utils_data.is_int,
        'is_active': lambda x: isinstance(x, bool),
        'date_updated': lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'description': lambda x: isinstance(x, str)
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_, **kwargs)

        self.restaurant_id: str = kwargs.get('restaurant_id')
        self.name: str = kwargs.get('name')
        self.description: str = kwargs.get('description')
        self.sort_order: int = utils_data.to_int(kwargs.get('sort_order', 0), kwargs.get('sort_order'))
        self.is_active: bool = kwargs.get('is_active', True)
        self.record_type = 'menu_category'

    @classmethod
    def init_by_id(cls, restaurant_id, category_id):
        c = cls(category_id, restaurant_id=restaurant_id)
        c._fill_from_db()
        return c

    @classmethod
    @utils_auth.authenticate_class
    def init_request_create(cls, request, restaurant_id):
        logger.info("init_request_create ::: started")
        get_restaurant_for_manager(restaurant_id, request.auth_result)
        request_body = utils_data.parse_raw_body(request)
        return cls(
            id_=str(uuid4()),
            restaurant_id=restaurant_id,
            name=request_body.get('name'),
            description=request_body.get('description'),
            sort_order=request_body.get('sort_order', 0),
            is_active=request_body.get('is_active', True)
        )

    @classmethod
    @utils_auth.authenticate_class
    def init_request_update(cls, request, restaurant_id, category_id):
        logger.info("init_request_update ::: started")
        get_restaurant_for_manager(restaurant_id, request.auth_result)
        c = cls.init_by_id(restaurant_id, category_id)
        c._apply_update_body(utils_data.parse_raw_body(request))
        c.sort_order = utils_data.to_int(c.sort_order, c.sort_order)
        return c

    @classmethod
    @utils_auth.authenticate_class
    def init_request_delete(cls, request, restaurant_id, category_id):
        logger.info("init_request_delete ::: started")
        get_restaurant_for_manager(restaurant_id, request.auth_result)
        return cls.init_by_id(restaurant_id, category_id)

    @staticmethod
    @utils_app.log_start_finish
    def endpoint_get_all(restaurant_id) -> Response:
        Restaurant.init_by_id(restaurant_id)
        categories = get_restaurant_categories(restaurant_id, only_active=True)
        return Response(status_code=http200, body=[category._to_ui() for category in categories])

    @utils_app.log_start_finish
    def endpoint_create(self) -> Response:
        self._create_db_record()
        return Response(status_code=http200, body={'message': 'Menu category successfully created', 'id': self.id_})

    @utils_app.log_start_finish
    def endpoint_update(self) -> Response:
        self._update_db_record()
        return Response(status_code=http200, body={'message': 'Menu category was successfully updated',
                                                   'id': self.id_})

    @utils_app.log_start_finish
    def endpoint_delete(self) -> Response:
        self._delete_db_record()
        return Response(status_code=http200, body={'message': 'Menu category was successfully deleted',
                                                   'id': self.id_})

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk.format(restaurant_id=self.restaurant_id), self.sk.format(category_id=self.id_)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'restaurant_id': self.restaurant_id,
            'name': self.name,
            'description': self.description,
            'sort_order': self.sort_order,
            'is_active': self.is_active,
            'date_created': self.date_created,
            'date_updated': self.date_updated
        }


def get_restaurant_categories(restaurant_id, only_active=False) -> List[MenuCategory]:
    records = utils_db.query_items_paged(
        Key('partkey').eq(keys_structure.menu_categories_pk.format(restaurant_id=restaurant_id)),
        filter_expression=Attr('is_active').eq(True) if only_active else None
    )
    categories = [MenuCategory.init_by_db_record(record) for record in records]
    return sorted(categories, key=lambda category: (category.sort_order, category.name or ''))
