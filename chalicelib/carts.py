from decimal import Decimal
from typing import Tuple, List, Dict
from uuid import uuid4

from boto3.dynamodb.conditions import Key
from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import CENTS, MAX_CART_QUANTITY
from chalicelib.constants.status_codes import http200
from chalicelib.menu_item_options import get_selected_options
from chalicelib.menu_items import MenuItem
from chalicelib.utils import auth as utils_auth, db as utils_db, app as utils_app, data as utils_data, exceptions
from chalicelib.utils.logger import logger


def positive_int(value) -> bool:
    return utils_data.is_int(value) and 0 < value <= MAX_CART_QUANTITY


class CartItem(EntityBase):
    pk = keys_structure.cart_items_pk
    sk = keys_structure.cart_items_sk

    not_found_message = 'Cart item not found'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'user_id': lambda x: isinstance(x, str),
        'restaurant_id': lambda x: isinstance(x, str),
        'menu_item_id': lambda x: isinstance(x, str),
        'selected_options': lambda x: isinstance(x, list),
        'date_created': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'quantity': positive_int,
        'unit_price': lambda x: isinstance(x, Decimal),
        'total_price': lambda x: isinstance(x, Decimal),
        'date_updated': lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'special_instructions': lambda x: isinstance(x, str)
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_, **kwargs)

        self.user_id: str = kwargs.get('user_id')
        self.restaurant_id: str = kwargs.get('restaurant_id')
        self.menu_item_id: str = kwargs.get('menu_item_id')
        self.quantity: int = utils_data.to_int(kwargs.get('quantity', 1), kwargs.get('quantity'))
        self.selected_options: List[str] = kwargs.get('selected_options') or []
        self.unit_price: Decimal = utils_data.to_money(kwargs.get('unit_price'))
        self.total_price: Decimal = utils_data.to_money(kwargs.get('total_price'))
        self.special_instructions: str = kwargs.get('special_instructions')
        self.record_type = 'cart_item'

    @classmethod
    def init_by_id(cls, user_id, restaurant_id, cart_item_id):
        c = cls(cart_item_id, user_id=user_id, restaurant_id=restaurant_id)
        c._fill_from_db()
        return c

    @classmethod
    @utils_auth.authenticate_class
    def init_request_add(cls, request):
        logger.info("init_request_add ::: started")
        request_body = utils_data.parse_raw_body(request)
        restaurant_id, menu_item_id = request_body.get('restaurant_id'), request_body.get('menu_item_id')
        if not restaurant_id or not menu_item_id:
            raise exceptions.MandatoryFieldsAreNotFilled('restaurant_id and menu_item_id must be provided')
        selected_options = request_body.get('selected_options', [])
        if not isinstance(selected_options, list) or not all(isinstance(i, str) for i in selected_options):
            raise exceptions.ValidationException('selected_options must be a list of option ids')
        return cls(
            id_=str(uuid4()),
            user_id=request.auth_result['user_id'],
            restaurant_id=restaurant_id,
            menu_item_id=menu_item_id,
            quantity=request_body.get('quantity', 1),
            selected_options=sorted(set(selected_options)),
            special_instructions=request_body.get('special_instructions')
        )

    @classmethod
    @utils_auth.authenticate_class
    def init_request_by_id(cls, request, restaurant_id, cart_item_id):
        logger.info("init_request_by_id ::: started")
        c = cls.init_by_id(request.auth_result['user_id'], restaurant_id, cart_item_id)
        c.request_data = utils_data.parse_raw_body(request)
        return c

    @staticmethod
    @utils_auth.authenticate
    @utils_app.log_start_finish
    def endpoint_get_cart(request) -> Response:
        restaurant_id = (request.query_params or {}).get('restaurant_id')
        cart_items = get_user_cart_items(request.auth_result['user_id'], restaurant_id=restaurant_id)
        return Response(status_code=http200, body=cart_to_ui(cart_items))

    @staticmethod
    @utils_auth.authenticate
    @utils_app.log_start_finish
    def endpoint_clear_cart(request) -> Response:
        restaurant_id = (request.query_params or {}).get('restaurant_id')
        deleted = clear_user_cart(request.auth_result['user_id'], restaurant_id=restaurant_id)
        return Response(status_code=http200, body={'message': 'Cart was successfully cleared', 'deleted': deleted})

    @utils_app.log_start_finish
    def endpoint_add_item_to_cart(self) -> Response:
        if not positive_int(self.quantity):
            raise exceptions.ValidationException(f'quantity must be an integer between 1 and {MAX_CART_QUANTITY}')
        menu_item = MenuItem.init_by_id(self.restaurant_id, self.menu_item_id)
        menu_item.check_can_be_ordered()
        self.unit_price = calculate_unit_price(menu_item, self.selected_options)

        same_item = next((item for item in get_user_cart_items(self.user_id, self.restaurant_id)
                          if item.menu_item_id == self.menu_item_id
                          and sorted(item.selected_options) == self.selected_options), None)
        if same_item is not None:
            logger.info(f'endpoint_add_item_to_cart ::: merging with cart item {same_item.id_}')
            same_item.unit_price = self.unit_price
            if self.special_instructions:
                same_item.special_instructions = self.special_instructions
            same_item.set_quantity(same_item.quantity + self.quantity)
            same_item._update_db_record()
            return Response(status_code=http200, body={'message': 'Cart item quantity was updated',
                                                       'cart_item': same_item._to_ui()})

        self.set_quantity(self.quantity)
        self._create_db_record()
        return Response(status_code=http200, body={'message': 'Item was added to the cart',
                                                   'cart_item': self._to_ui()})

    @utils_app.log_start_finish
    def endpoint_update_quantity(self) -> Response:
        quantity = self.request_data.get('quantity')
        if not positive_int(quantity):
            raise exceptions.ValidationException(f'quantity must be an integer between 1 and {MAX_CART_QUANTITY}')
        self.set_quantity(int(quantity))
        self._update_db_record()
        return Response(status_code=http200, body={'message': 'Cart item was successfully updated',
                                                   'cart_item': self._to_ui()})

    @utils_app.log_start_finish
    def endpoint_remove_item_from_cart(self) -> Response:
        self._delete_db_record()
        return Response(status_code=http200, body={'message': 'Item was removed from the cart', 'id': self.id_})

    def set_quantity(self, quantity: int):
        self.quantity = quantity
        self.total_price = (self.unit_price * quantity).quantize(CENTS)

    def _get_pk_sk(self) -> Tuple[str, str]:
        return (self.pk.format(user_id=self.user_id),
                self.sk.format(restaurant_id=self.restaurant_id, cart_item_id=self.id_))

    def _to_dict(self) -> Dict:
        return {
            'id_': self.id_,
            'user_id': self.user_id,
            'restaurant_id': self.restaurant_id,
            'menu_item_id': self.menu_item_id,
            'quantity': self.quantity,
            'selected_options': self.selected_options,
            'unit_price': self.unit_price,
            'total_price': self.total_price,
            'special_instructions': self.special_instructions,
            'date_created': self.date_created,
            'date_updated': self.date_updated
        }


def calculate_unit_price(menu_item: MenuItem, selected_option_ids: List) -> Decimal:
    options = get_selected_options(menu_item.id_, selected_option_ids)
    return (menu_item.price + sum((option.price_modifier for option in options), Decimal(0))).quantize(CENTS)


def get_user_cart_items(user_id, restaurant_id=None) -> List[CartItem]:
    key_condition = Key('partkey').eq(keys_structure.cart_items_pk.format(user_id=user_id))
    if restaurant_id:
        key_condition = key_condition & Key('sortkey').begins_with(f'{restaurant_id}_')
    records = utils_db.query_items_paged(key_condition)
    return [CartItem.init_by_db_record(record) for record in records]


def clear_user_cart(user_id, restaurant_id=None) -> int:
    cart_items = get_user_cart_items(user_id, restaurant_id=restaurant_id)
    for cart_item in cart_items:
        cart_item._delete_db_record()
    logger.info(f'clear_user_cart ::: {len(cart_items)} cart items of user {user_id} deleted')
    return len(cart_items)


def cart_to_ui(cart_items: List[CartItem]) -> Dict:
    return {
        'items': [cart_item._to_ui() for cart_item in cart_items],
        'total': sum((cart_item.total_price for cart_item in cart_items), Decimal(0)).quantize(CENTS)
    }
