from decimal import Decimal
from typing import Tuple, List, Dict
from uuid import uuid4

from boto3.dynamodb.conditions import Key, Attr
from chalice import Response

from chalicelib import payment_gateway
from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import PAYMENT_PENDING, PAYMENT_COMPLETED, PAYMENT_FAILED, PAYMENT_REFUNDED, \
    PAYMENT_STATUSES
from chalicelib.constants.status_codes import http200
from chalicelib.orders import Order
from chalicelib.utils import auth as utils_auth, app as utils_app, data as utils_data, db as utils_db, exceptions
from chalicelib.utils.logger import logger


class Payment(EntityBase):
    pk = keys_structure.payments_pk
    sk = keys_structure.payments_sk

    not_found_message = 'Payment not found'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'order_id': lambda x: isinstance(x, str),
        'user_id': lambda x: isinstance(x, str),
        'amount': lambda x: isinstance(x, Decimal) and x >= 0,
        'payment_method': lambda x: isinstance(x, str) and len(x) > 0,
        'date_created': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'status': lambda x: x in PAYMENT_STATUSES,
        'date_updated': lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'transaction_id': lambda x: isinstance(x, str),
        'refund_transaction_id': lambda x: isinstance(x, str),
        'failure_reason': lambda x: isinstance(x, str)
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_, **kwargs)

        self.order: Order = kwargs.get('order')
        self.order_id: str = kwargs.get('order_id')
        self.user_id: str = kwargs.get('user_id')
        self.amount: Decimal = utils_data.to_money(kwargs.get('amount'))
        self.payment_method: str = kwargs.get('payment_method')
        self.status: str = kwargs.get('status') or PAYMENT_PENDING
        self.transaction_id: str = kwargs.get('transaction_id')
        self.refund_transaction_id: str = kwargs.get('refund_transaction_id')
        self.failure_reason: str = kwargs.get('failure_reason')
        self.record_type = 'payment'

    @classmethod
    def init_by_id(cls, payment_id):
        c = cls(payment_id)
        c._fill_from_db()
        return c

    @classmethod
    @utils_auth.authenticate_class
    def init_request_create(cls, request):
        logger.info("init_request_create ::: started")
        request_body = utils_data.parse_raw_body(request)
        if not request_body.get('order_id') or not request_body.get('payment_method'):
            raise exceptions.MandatoryFieldsAreNotFilled('order_id and payment_method must be provided')
        order = Order.init_by_id(request_body['order_id'])
        if order.user_id != request.auth_result['user_id']:
            raise exceptions.OrderNotFound(Order.not_found_message)
        return cls(
            id_=str(uuid4()),
            order=order,
            order_id=order.id_,
            user_id=order.user_id,
            amount=order.total_amount,
            payment_method=request_body['payment_method']
        )

    @classmethod
    @utils_auth.authenticate_class
    def init_request_by_id(cls, request, payment_id):
        logger.info("init_request_by_id ::: started")
        c = cls.init_by_id(payment_id)
        if not utils_auth.is_admin(request.auth_result) and c.user_id != request.auth_result['user_id']:
            raise exceptions.RecordNotFound(cls.not_found_message)
        c.order = Order.init_by_id(c.order_id)
        return c

    @utils_app.log_start_finish
    def endpoint_create(self) -> Response:
        self._create_db_record()
        return Response(status_code=http200, body=self._to_ui())

    @utils_app.log_start_finish
    def endpoint_process(self) -> Response:
        if self.status != PAYMENT_PENDING:
            raise exceptions.WrongPaymentStatus(f'Payment {self.id_} is not in pending status')
        result = payment_gateway.gateway.process_payment(self.payment_method, self.amount)
        if result['success']:
            self.status = PAYMENT_COMPLETED
            self.transaction_id = result['transaction_id']
        else:
            self.status = PAYMENT_FAILED
            self.failure_reason = result['error']
        self._update_db_record()
        self.order.set_payment_status(self.status)
        if self.status == PAYMENT_FAILED:
            raise exceptions.PaymentDeclined(f'Payment {self.id_} failed: {self.failure_reason}')
        return Response(status_code=http200, body=self._to_ui())

    @utils_app.log_start_finish
    def endpoint_refund(self) -> Response:
        if self.status != PAYMENT_COMPLETED:
            raise exceptions.WrongPaymentStatus(f'Cannot refund payment with status {self.status}')
        result = payment_gateway.gateway.process_refund(self.transaction_id, self.amount)
        if not result['success']:
            raise exceptions.PaymentDeclined(f'Refund of payment {self.id_} failed: {result["error"]}')
        self.status = PAYMENT_REFUNDED
        self.refund_transaction_id = result['transaction_id']
        self._update_db_record()
        self.order.set_payment_status(self.status)
        return Response(status_code=http200, body=self._to_ui())

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk, self.sk.format(payment_id=self.id_)

    def _to_dict(self) -> Dict:
        return {
            'id_': self.id_,
            'order_id': self.order_id,
            'user_id': self.user_id,
            'amount': self.amount,
            'payment_method': self.payment_method,
            'status': self.status,
            'transaction_id': self.transaction_id,
            'refund_transaction_id': self.refund_transaction_id,
            'failure_reason': self.failure_reason,
            'date_created': self.date_created,
            'date_updated': self.date_updated
        }


def get_payments(filter_expression=None) -> List[Payment]:
    records = utils_db.query_items_paged(Key('partkey').eq(Payment.pk), filter_expression=filter_expression)
    payments = [Payment.init_by_db_record(record) for record in records]
    return sorted(payments, key=lambda payment: payment.date_created, reverse=True)


@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_get_order_payments(request, order_id) -> Response:
    order = Order.init_by_id(order_id)
    if not order.is_visible_to(request.auth_result):
        raise exceptions.OrderNotFound(Order.not_found_message)
    payments = get_payments(Attr('order_id').eq(order_id))
    return Response(status_code=http200, body=[payment.to_ui() for payment in payments])
