from decimal import Decimal
from typing import Tuple, List, Dict
from uuid import uuid4

from boto3.dynamodb.conditions import Key, Attr
from chalice import Response

from chalicelib.addresses import get_address_or_raise
from chalicelib.base_class_entity import EntityBase
from chalicelib.carts import CartItem, get_user_cart_items
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import ORDER_CREATED, ORDER_STATUSES, ORDER_CANCELABLE_STATUSES, \
    ORDER_CANCELED, ORDER_OUT_FOR_DELIVERY, PAYMENT_PENDING, PAYMENT_STATUSES, CENTS, tax_rate, delivery_fee, \
    order_email_from
from chalicelib.constants.status_codes import http200
from chalicelib.menu_item_options import get_selected_options
from chalicelib.menu_items import MenuItem
from chalicelib.restaurants import Restaurant
from chalicelib.users import User
from chalicelib.utils import auth as utils_auth, \
    data as utils_data, \
    db as utils_db, \
    app as utils_app, \
    notifications as utils_notifications, \
    exceptions, \
    email_templates
from chalicelib.utils.exceptions import OrderNotFound
from chalicelib.utils.logger import logger


class OrderItem(EntityBase):
    """
    Snapshot of a cart row at checkout time, never updated afterwards
    """
    pk = keys_structure.order_items_pk
    sk = keys_structure.order_items_sk

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'order_id': lambda x: isinstance(x, str),
        'menu_item_id': lambda x: isinstance(x, str),
        'name': lambda x: isinstance(x, str),
        'quantity': lambda x: utils_data.is_int(x) and x > 0,
        'unit_price': lambda x: isinstance(x, Decimal),
        'total_price': lambda x: isinstance(x, Decimal),
        'selected_options': lambda x: isinstance(x, list),
        'date_created': lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'special_instructions': lambda x: isinstance(x, str)
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_, **kwargs)

        self.order_id: str = kwargs.get('order_id')
        self.menu_item_id: str = kwargs.get('menu_item_id')
        self.name: str = kwargs.get('name')
        self.quantity: int = utils_data.to_int(kwargs.get('quantity'), kwargs.get('quantity'))
        self.unit_price: Decimal = utils_data.to_money(kwargs.get('unit_price'))
        self.total_price: Decimal = utils_data.to_money(kwargs.get('total_price'))
        self.selected_options: List[Dict] = kwargs.get('selected_options') or []
        self.special_instructions: str = kwargs.get('special_instructions')
        self.record_type = 'order_item'

    @classmethod
    def init_by_cart_item(cls, order_id: str, cart_item: CartItem, menu_item: MenuItem, options: List):
        unit_price = (menu_item.price + sum((option.price_modifier for option in options), Decimal(0))).quantize(
            CENTS)
        return cls(
            id_=str(uuid4()),
            order_id=order_id,
            menu_item_id=menu_item.id_,
            name=menu_item.name,
            quantity=cart_item.quantity,
            unit_price=unit_price,
            total_price=(unit_price * cart_item.quantity).quantize(CENTS),
            selected_options=[
                {'id': option.id_, 'name': option.name, 'price_modifier': option.price_modifier}
                for option in options
            ],
            special_instructions=cart_item.special_instructions
        )

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk.format(order_id=self.order_id), self.sk.format(order_item_id=self.id_)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'order_id': self.order_id,
            'menu_item_id': self.menu_item_id,
            'name': self.name,
            'quantity': self.quantity,
            'unit_price': self.unit_price,
            'total_price': self.total_price,
            'selected_options': self.selected_options,
            'special_instructions': self.special_instructions,
            'date_created': self.date_created
        }


class Order(EntityBase):
    pk = keys_structure.orders_pk
    sk = keys_structure.orders_sk

    not_found_message = 'Requested order not found'
    create_only_new = True

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'user_id': lambda x: isinstance(x, str),
        'restaurant_id': lambda x: isinstance(x, str),
        'delivery_address_id': lambda x: isinstance(x, str),
        'delivery_address': lambda x: isinstance(x, str),
        'subtotal': lambda x: isinstance(x, Decimal),
        'tax_amount': lambda x: isinstance(x, Decimal),
        'delivery_fee': lambda x: isinstance(x, Decimal),
        'total_amount': lambda x: isinstance(x, Decimal),
        'date_created': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'status': lambda x: x in ORDER_STATUSES,
        'payment_status': lambda x: x in PAYMENT_STATUSES,
        'history': lambda x: isinstance(x, list),
        "date_updated": lambda x: isinstance(x, str),
        "updated_by": lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'notes': lambda x: isinstance(x, str),
        'estimated_delivery_time': lambda x: isinstance(x, str)
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_, **kwargs)

        self.order_items: List[OrderItem] = []

        self.user_id: str = kwargs.get('user_id')
        self.restaurant_id: str = kwargs.get('restaurant_id')
        self.delivery_address_id: str = kwargs.get('delivery_address_id')
        self.delivery_address: str = kwargs.get('delivery_address')
        self.status: str = kwargs.get('status') or ORDER_CREATED
        self.payment_status: str = kwargs.get('payment_status') or PAYMENT_PENDING
        self.subtotal: Decimal = utils_data.to_money(kwargs.get('subtotal'))
        self.tax_amount: Decimal = utils_data.to_money(kwargs.get('tax_amount'))
        self.delivery_fee: Decimal = utils_data.to_money(kwargs.get('delivery_fee'))
        self.total_amount: Decimal = utils_data.to_money(kwargs.get('total_amount'))
        self.notes: str = kwargs.get('notes')
        self.estimated_delivery_time: str = kwargs.get('estimated_delivery_time')
        self.history: List[Dict] = kwargs.get('history') or []
        self.updated_by: str = kwargs.get('updated_by') or self.user_id
        self.record_type = 'order'

    @classmethod
    def init_by_id(cls, order_id):
        c = cls(order_id)
        c._fill_from_db()
        return c

    @classmethod
    @utils_auth.authenticate_class
    def init_request_create_order(cls, request):
        logger.info("init_request_create_order ::: started")
        request_body = utils_data.parse_raw_body(request)
        if not request_body.get('restaurant_id') or not request_body.get('delivery_address_id'):
            raise exceptions.MandatoryFieldsAreNotFilled('restaurant_id and delivery_address_id must be provided')
        return cls(
            id_=str(uuid4()).split('-')[0],
            user_id=request.auth_result['user_id'],
            restaurant_id=request_body['restaurant_id'],
            delivery_address_id=request_body['delivery_address_id'],
            notes=request_body.get('notes')
        )

    @classmethod
    @utils_auth.authenticate_class
    def init_request_get_order(cls, request, order_id):
        logger.info("init_request_get_order ::: started")
        c = cls.init_by_id(order_id)
        if not c.is_visible_to(request.auth_result):
            raise OrderNotFound(cls.not_found_message)
        return c

    @classmethod
    @utils_auth.authenticate_class
    def init_request_update_status(cls, request, order_id):
        logger.info("init_request_update_status ::: started")
        c = cls.init_by_id(order_id)
        if not utils_auth.is_admin(request.auth_result):
            Restaurant.init_by_id(c.restaurant_id).check_manager(request.auth_result)
        c.request_data = utils_data.parse_raw_body(request)
        c.updated_by = request.auth_result['user_id']
        return c

    @classmethod
    @utils_auth.authenticate_class
    def init_request_cancel(cls, request, order_id):
        logger.info("init_request_cancel ::: started")
        c = cls.init_by_id(order_id)
        if not c.is_visible_to(request.auth_result):
            raise exceptions.AccessDenied('Only the customer, the restaurant owner or an admin can cancel the order')
        c.updated_by = request.auth_result['user_id']
        return c

    @utils_app.log_start_finish
    def endpoint_create_order(self) -> Response:
        User.init_by_id(self.user_id)
        Restaurant.init_by_id(self.restaurant_id)
        self.delivery_address = get_address_or_raise(self.user_id, self.delivery_address_id).to_text()

        cart_items = get_user_cart_items(self.user_id, restaurant_id=self.restaurant_id)
        if not cart_items:
            raise exceptions.CartIsEmpty('No cart items found for this restaurant')

        self.order_items = []
        for cart_item in cart_items:
            menu_item = MenuItem.init_by_id(self.restaurant_id, cart_item.menu_item_id, include_archived=True)
            menu_item.check_can_be_ordered()
            options = get_selected_options(menu_item.id_, cart_item.selected_options)
            self.order_items.append(OrderItem.init_by_cart_item(self.id_, cart_item, menu_item, options))

        self._calculate_amounts()
        self.status, self.payment_status = ORDER_CREATED, PAYMENT_PENDING
        self._add_history_entry(self.user_id)
        self._create_db_record()
        for order_item in self.order_items:
            order_item._create_db_record()
        for cart_item in cart_items:
            cart_item._delete_db_record()
        logger.info(f"endpoint_create_order ::: order {self.id_} created from {len(cart_items)} cart items, "
                    f"total_amount={self.total_amount}")
        return Response(status_code=http200, body=self._to_ui())

    @utils_app.log_start_finish
    def endpoint_get_by_id(self) -> Response:
        self.fill_order_items()
        return Response(status_code=http200, body=self._to_ui())

    @utils_app.log_start_finish
    def endpoint_update_status(self) -> Response:
        status = self.request_data.get('status')
        if status not in ORDER_STATUSES:
            raise exceptions.InvalidOrderStatus(f'Invalid order status {status}')
        self.status = status
        if status == ORDER_OUT_FOR_DELIVERY and self.request_data.get('estimated_delivery_time'):
            self.estimated_delivery_time = self.request_data['estimated_delivery_time']
        self._add_history_entry(self.updated_by)
        self._update_db_record()
        return Response(status_code=http200, body={'message': 'Order status was successfully updated',
                                                   'id': self.id_, 'status': self.status})

    @utils_app.log_start_finish
    def endpoint_cancel(self) -> Response:
        if self.status not in ORDER_CANCELABLE_STATUSES:
            raise exceptions.OrderCannotBeCanceled(f'Order in status {self.status} cannot be canceled')
        self.status = ORDER_CANCELED
        self._add_history_entry(self.updated_by)
        self._update_db_record()
        return Response(status_code=http200, body={'message': 'Order was successfully canceled',
                                                   'id': self.id_, 'status': self.status})

    def set_payment_status(self, payment_status: str):
        self.payment_status = payment_status
        self._update_db_record()
        logger.info(f'set_payment_status ::: order {self.id_} payment_status={payment_status}')

    def is_visible_to(self, auth_result: Dict) -> bool:
        if utils_auth.is_admin(auth_result) or auth_result.get('user_id') == self.user_id:
            return True
        return Restaurant.init_by_id(self.restaurant_id).owner_id == auth_result.get('user_id')

    def fill_order_items(self):
        records = utils_db.query_items_paged(
            Key('partkey').eq(keys_structure.order_items_pk.format(order_id=self.id_)))
        self.order_items = [OrderItem.init_by_db_record(record) for record in records]

    def _calculate_amounts(self):
        self.subtotal = sum((item.total_price for item in self.order_items), Decimal(0)).quantize(CENTS)
        self.tax_amount = utils_data.to_money(self.subtotal * tax_rate())
        self.delivery_fee = delivery_fee()
        self.total_amount = (self.subtotal + self.tax_amount + self.delivery_fee).quantize(CENTS)

    def _add_history_entry(self, updated_by: str):
        self.history.append({'status': self.status, 'date': utils_data.now_iso(), 'updated_by': updated_by})

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk, self.sk.format(order_id=self.id_)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'user_id': self.user_id,
            'restaurant_id': self.restaurant_id,
            'delivery_address_id': self.delivery_address_id,
            'delivery_address': self.delivery_address,
            'status': self.status,
            'payment_status': self.payment_status,
            'subtotal': self.subtotal,
            'tax_amount': self.tax_amount,
            'delivery_fee': self.delivery_fee,
            'total_amount': self.total_amount,
            'notes': self.notes,
            'estimated_delivery_time': self.estimated_delivery_time,
            'history': self.history,
            'date_created': self.date_created,
            'date_updated': self.date_updated,
            'updated_by': self.updated_by
        }

    def _to_ui(self):
        item = super()._to_ui()
        item['items'] = [order_item.to_ui() for order_item in self.order_items]
        return item


def get_orders(filter_expression=None) -> List[Order]:
    records = utils_db.query_items_paged(Key('partkey').eq(Order.pk), filter_expression=filter_expression)
    orders = [Order.init_by_db_record(record) for record in records]
    return sorted(orders, key=lambda order: order.date_created, reverse=True)


def status_filter(status, filter_expression=None):
    if not status:
        return filter_expression
    if status not in ORDER_STATUSES:
        raise exceptions.InvalidOrderStatus(f'Invalid order status {status}')
    return Attr('status').eq(status) if filter_expression is None else filter_expression & Attr('status').eq(status)


def orders_to_ui(orders: List[Order]) -> List[Dict]:
    return [order.to_ui() for order in orders]


@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_get_user_orders(request) -> Response:
    qp = request.query_params or {}
    orders = get_orders(status_filter(qp.get('status'), Attr('user_id').eq(request.auth_result['user_id'])))
    return Response(status_code=http200, body=orders_to_ui(orders))


@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_get_restaurant_orders(request, restaurant_id) -> Response:
    if not utils_auth.is_admin(request.auth_result):
        Restaurant.init_by_id(restaurant_id).check_manager(request.auth_result)
    qp = request.query_params or {}
    orders = get_orders(status_filter(qp.get('status'), Attr('restaurant_id').eq(restaurant_id)))
    logger.info(f'endpoint_get_restaurant_orders ::: returning orders={[order.id_ for order in orders]}')
    return Response(status_code=http200, body=orders_to_ui(orders))


def get_customer_email(user_id) -> str:
    try:
        return User.init_by_id(user_id).email
    except exceptions.RecordNotFound:
        logger.warning(f'get_customer_email ::: user {user_id} not found, nobody to notify')
        return ''


@utils_app.log_start_finish
def db_trigger_order_record(record_old: dict, record_new: dict, event_id: str, event_name: str):
    logger.info(f'db_trigger_order_record ::: order_id={record_new.get("id_")}, {event_id=}, {event_name=}')
    if event_name.lower() == 'insert':
        subject = f'Your order {record_new.get("id_")} has been placed'
        email_body = email_templates.get_new_order_notification_message(record_new)
    elif event_name.lower() == 'modify' and record_old.get('status') != record_new.get('status'):
        subject = f'Your order {record_new.get("id_")} is now {record_new.get("status")}'
        email_body = email_templates.get_order_status_changed_message(record_new, record_old.get('status'))
    else:
        logger.debug(f'db_trigger_order_record ::: nothing to notify about for {event_name=}')
        return None
    return utils_notifications.send_email_ses(
        [get_customer_email(record_new.get('user_id'))], order_email_from(), subject, email_body)
