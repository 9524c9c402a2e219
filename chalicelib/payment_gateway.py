import os
import random
import time
from decimal import Decimal
from typing import Dict
from uuid import uuid4

from chalicelib.constants.constants import DEFAULT_PAYMENT_GATEWAY_DELAY, DEFAULT_PAYMENT_FAILURE_RATE, \
    DEFAULT_REFUND_FAILURE_RATE
from chalicelib.utils.logger import logger

DECLINE_REASONS = (
    'Card declined by issuer',
    'Insufficient funds',
    'Payment method expired',
)


class MockPaymentGateway:
    """
    In-process stand-in for a payment processor.
    Every call waits PAYMENT_GATEWAY_DELAY seconds and fails with the configured probability,
    no external call is made and nothing is reconciled.
    """

    @staticmethod
    def _delay() -> float:
        return float(os.environ.get('PAYMENT_GATEWAY_DELAY', DEFAULT_PAYMENT_GATEWAY_DELAY))

    @staticmethod
    def _failure_rate() -> float:
        return float(os.environ.get('PAYMENT_FAILURE_RATE', DEFAULT_PAYMENT_FAILURE_RATE))

    @staticmethod
    def _refund_failure_rate() -> float:
        return float(os.environ.get('REFUND_FAILURE_RATE', DEFAULT_REFUND_FAILURE_RATE))

    @staticmethod
    def _transaction_id(prefix: str) -> str:
        return f'{prefix}-{int(time.time() * 1000)}-{uuid4().hex[:8]}'

    def _simulate(self, failure_rate: float) -> bool:
        delay = self._delay()
        if delay > 0:
            time.sleep(delay)
        return random.random() >= failure_rate

    def process_payment(self, payment_method: str, amount: Decimal) -> Dict:
        logger.info(f'process_payment ::: {payment_method=} {amount=}')
        if self._simulate(self._failure_rate()):
            result = {'success': True, 'transaction_id': self._transaction_id('mock-txn')}
        else:
            result = {'success': False, 'error': random.choice(DECLINE_REASONS)}
        logger.info(f'process_payment ::: {result=}')
        return result

    def process_refund(self, transaction_id: str, amount: Decimal) -> Dict:
        logger.info(f'process_refund ::: {transaction_id=} {amount=}')
        if self._simulate(self._refund_failure_rate()):
            result = {'success': True, 'transaction_id': self._transaction_id('mock-refund')}
        else:
            result = {'success': False, 'error': 'Refund was rejected by the payment processor'}
        logger.info(f'process_refund ::: {result=}')
        return result


gateway = MockPaymentGateway()
