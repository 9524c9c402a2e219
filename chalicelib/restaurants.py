from decimal import Decimal
from typing import Tuple, List, Dict
from uuid import uuid4

from boto3.dynamodb.conditions import Attr, Key
from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import ROLE_ADMIN, ROLE_RESTAURANT_OWNER, CENTS
from chalicelib.constants.status_codes import http200
from chalicelib.users import User
from chalicelib.utils import auth as utils_auth, data as utils_data, exceptions, db as utils_db, app as utils_app
from chalicelib.utils.logger import logger

EDITABLE_FIELDS = ('name', 'description', 'address', 'phone', 'email', 'image_url', 'cuisine_type')


class Restaurant(EntityBase):
    pk = keys_structure.restaurants_pk
    sk = keys_structure.restaurants_sk

    not_found_message = 'Restaurant not found'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'owner_id': lambda x: isinstance(x, str),
        "date_created": lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'name': lambda x: isinstance(x, str) and len(x) > 0,
        'address': lambda x: isinstance(x, str) and len(x) > 0,
        'is_active': lambda x: isinstance(x, bool),
        'rating': lambda x: isinstance(x, Decimal),
        'review_count': utils_data.is_int,
        "date_updated": lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'description': lambda x: isinstance(x, str),
        'phone': lambda x: isinstance(x, str),
        'email': lambda x: isinstance(x, str),
        'image_url': lambda x: isinstance(x, str),
        'cuisine_type': lambda x: isinstance(x, str)
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_, **kwargs)

        self.owner_id: str = kwargs.get('owner_id')
        self.name: str = kwargs.get('name')
        self.description: str = kwargs.get('description')
        self.address: str = kwargs.get('address')
        self.phone: str = kwargs.get('phone')
        self.email: str = kwargs.get('email')
        self.image_url: str = kwargs.get('image_url')
        self.cuisine_type: str = kwargs.get('cuisine_type')
        self.is_active: bool = kwargs.get('is_active', True)
        self.rating: Decimal = utils_data.to_money(kwargs.get('rating', 0))
        self.review_count: int = utils_data.to_int(kwargs.get('review_count'), 0)
        self.record_type = 'restaurant'

    @classmethod
    def init_by_id(cls, restaurant_id):
        logger.info("init_by_id ::: started")
        c = cls(restaurant_id)
        c._fill_from_db()
        return c

    @classmethod
    @utils_auth.authenticate_class
    def init_request_create(cls, request):
        logger.info("init_request_create ::: started")
        auth_result = request.auth_result
        request_body = utils_data.parse_raw_body(request)
        owner_id = auth_result['user_id']
        if utils_auth.is_admin(auth_result) and request_body.get('owner_id'):
            owner = User.init_by_id(request_body['owner_id'])
            if owner.role not in (ROLE_RESTAURANT_OWNER, ROLE_ADMIN):
                raise exceptions.ValidationException(f'User {owner.id_} is not a restaurant owner')
            owner_id = owner.id_
        return cls(
            id_=str(uuid4()),
            owner_id=owner_id,
            **{key: value for key, value in request_body.items() if key in EDITABLE_FIELDS}
        )

    @classmethod
    @utils_auth.authenticate_class
    def init_request_update(cls, request, restaurant_id):
        logger.info("init_request_update ::: started")
        c = cls.init_by_id(restaurant_id)
        utils_auth.check_owner_or_admin(request.auth_result, c.owner_id, 'Only the owner can update the restaurant')
        request_body = utils_data.parse_raw_body(request)
        c._apply_update_body({key: value for key, value in request_body.items() if key in EDITABLE_FIELDS})
        return c

    @classmethod
    @utils_auth.authenticate_class
    def init_request_admin(cls, request, restaurant_id):
        logger.info("init_request_admin ::: started")
        if not utils_auth.is_admin(request.auth_result):
            raise exceptions.AccessDenied('Only admins can manage restaurant activity')
        return cls.init_by_id(restaurant_id)

    @staticmethod
    @utils_app.log_start_finish
    def endpoint_get_all(request) -> Response:
        params = request.query_params or {}
        restaurants = get_active_restaurants(search=params.get('search'))
        offset = utils_data.to_int(params.get('offset'), 0)
        limit = utils_data.to_int(params.get('limit'))
        if offset < 0 or (limit is not None and limit < 0):
            raise exceptions.ValidationException('limit and offset must be positive integers')
        restaurants = restaurants[offset:offset + limit] if limit is not None else restaurants[offset:]
        logger.info(f"endpoint_get_all ::: returning restaurants={[rest.id_ for rest in restaurants]}")
        return Response(status_code=http200, body=[restaurant._to_ui() for restaurant in restaurants])

    @staticmethod
    @utils_app.log_start_finish
    def endpoint_get_by_owner(owner_id) -> Response:
        restaurants = get_owner_restaurants(owner_id)
        return Response(status_code=http200, body=[restaurant._to_ui() for restaurant in restaurants])

    @utils_app.log_start_finish
    def endpoint_get_by_id(self) -> Response:
        restaurant = self._to_ui()
        logger.info(f"endpoint_get_by_id ::: returning restaurant={restaurant['id']}")
        return Response(status_code=http200, body=restaurant)

    @utils_app.log_start_finish
    def endpoint_create(self) -> Response:
        self._create_db_record()
        return Response(status_code=http200, body={'message': 'Restaurant successfully created', 'id': self.id_})

    @utils_app.log_start_finish
    def endpoint_update(self) -> Response:
        self._update_db_record()
        return Response(status_code=http200, body={'message': 'Restaurant was successfully updated', 'id': self.id_})

    @utils_app.log_start_finish
    def endpoint_set_active(self, is_active: bool) -> Response:
        self.is_active = is_active
        self._update_db_record()
        state = 'activated' if is_active else 'deactivated'
        return Response(status_code=http200, body={'message': f'Restaurant was successfully {state}', 'id': self.id_})

    def update_rating(self, ratings: List):
        self.review_count = len(ratings)
        self.rating = utils_data.to_money(Decimal(sum(ratings)) / len(ratings)) if ratings else Decimal(0).quantize(CENTS)
        self._update_db_record()
        logger.info(f'update_rating ::: restaurant {self.id_} rating={self.rating} review_count={self.review_count}')

    def check_manager(self, auth_result: Dict):
        utils_auth.check_owner_or_admin(auth_result, self.owner_id, 'Only the restaurant owner can manage it')

    def delete_with_menu(self):
        """
        Deletes the restaurant record with its menu categories, menu items and their options
        """
        items = utils_db.query_items_paged(
            Key('partkey').eq(keys_structure.menu_items_pk.format(restaurant_id=self.id_)))
        for item in items:
            options = utils_db.query_items_paged(
                Key('partkey').eq(keys_structure.menu_item_options_pk.format(menu_item_id=item['id_'])))
            for option in options:
                utils_db.delete_db_record({'partkey': option['partkey'], 'sortkey': option['sortkey']})
            utils_db.delete_db_record({'partkey': item['partkey'], 'sortkey': item['sortkey']})
        categories = utils_db.query_items_paged(
            Key('partkey').eq(keys_structure.menu_categories_pk.format(restaurant_id=self.id_)))
        for category in categories:
            utils_db.delete_db_record({'partkey': category['partkey'], 'sortkey': category['sortkey']})
        self._delete_db_record()
        logger.info(f'delete_with_menu ::: restaurant {self.id_} deleted with {len(items)} menu items '
                    f'and {len(categories)} categories')

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk, self.sk.format(restaurant_id=self.id_)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'owner_id': self.owner_id,
            'name': self.name,
            'description': self.description,
            'address': self.address,
            'phone': self.phone,
            'email': self.email,
            'image_url': self.image_url,
            'cuisine_type': self.cuisine_type,
            'is_active': self.is_active,
            'rating': self.rating,
            'review_count': self.review_count,
            "date_created": self.date_created,
            "date_updated": self.date_updated
        }


def get_all_restaurants(filter_expression=None) -> List[Restaurant]:
    records = utils_db.query_items_paged(Key('partkey').eq(Restaurant.pk), filter_expression=filter_expression)
    return [Restaurant.init_by_db_record(record) for record in records]


def get_active_restaurants(search: str = None) -> List[Restaurant]:
    restaurants = get_all_restaurants(filter_expression=Attr('is_active').eq(True))
    if search:
        search = search.lower()
        restaurants = [
            restaurant for restaurant in restaurants
            if search in (restaurant.name or '').lower() or search in (restaurant.description or '').lower()
        ]
    return sorted(restaurants, key=lambda restaurant: restaurant.name or '')


def get_owner_restaurants(owner_id: str) -> List[Restaurant]:
    return get_all_restaurants(filter_expression=Attr('owner_id').eq(owner_id))


def get_restaurant_for_manager(restaurant_id: str, auth_result: Dict) -> Restaurant:
    restaurant = Restaurant.init_by_id(restaurant_id)
    restaurant.check_manager(auth_result)
    return restaurant
