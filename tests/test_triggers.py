from decimal import Decimal

import boto3
import pytest
from boto3.dynamodb.types import TypeSerializer
from chalice.app import DynamoDBEvent

from chalicelib import triggers
from tests.utils.fixtures import create_test_user

ORDER_EMAIL_FROM = 'orders@food-delivery.test'
serializer = TypeSerializer()


@pytest.fixture
def ses_client(gen_table, monkeypatch):
    monkeypatch.setenv('ORDER_EMAIL_FROM', ORDER_EMAIL_FROM)
    client = boto3.client('ses', region_name='eu-central-1')
    client.verify_email_identity(EmailAddress=ORDER_EMAIL_FROM)
    return client


def sent_emails(ses_client) -> int:
    return int(ses_client.get_send_quota()['SentLast24Hours'])


def order_image(user_id, status='created', **kwargs):
    return {
        'partkey': 'orders',
        'sortkey': 'abcd1234',
        'record_type': 'order',
        'id_': 'abcd1234',
        'user_id': user_id,
        'restaurant_id': 'restaurant-1',
        'status': status,
        'subtotal': Decimal('20.00'),
        'tax_amount': Decimal('1.60'),
        'delivery_fee': Decimal('3.99'),
        'total_amount': Decimal('25.59'),
        'delivery_address': '742 Evergreen Terrace, Springfield',
        **kwargs
    }


def ddb_record(event_name, new_image=None, old_image=None, event_id='1'):
    dynamodb = {
        'ApproximateCreationDateTime': 1700000000,
        'Keys': {'partkey': {'S': 'orders'}, 'sortkey': {'S': 'abcd1234'}},
        'SequenceNumber': event_id,
        'SizeBytes': 100,
        'StreamViewType': 'NEW_AND_OLD_IMAGES'
    }
    if new_image is not None:
        dynamodb['NewImage'] = {key: serializer.serialize(value) for key, value in new_image.items()}
    if old_image is not None:
        dynamodb['OldImage'] = {key: serializer.serialize(value) for key, value in old_image.items()}
    return {
        'eventID': event_id,
        'eventName': event_name,
        'eventSource': 'aws:dynamodb',
        'awsRegion': 'eu-central-1',
        'eventSourceARN': 'arn:aws:dynamodb:eu-central-1:000000000000:table/food-delivery-test/stream/1',
        'dynamodb': dynamodb
    }


def ddb_event(*records):
    return DynamoDBEvent({'Records': list(records)}, None)


def test_new_order_sends_email(ses_client):
    user_id = create_test_user()
    processed = triggers.db_gen_table_stream_trigger(ddb_event(ddb_record('INSERT', order_image(user_id))))
    assert processed == 1
    assert sent_emails(ses_client) == 1


def test_status_change_sends_email(ses_client):
    user_id = create_test_user()
    event = ddb_event(ddb_record('MODIFY', order_image(user_id, 'confirmed'), order_image(user_id, 'created')))
    assert triggers.db_gen_table_stream_trigger(event) == 1
    assert sent_emails(ses_client) == 1


def test_modify_without_status_change_is_silent(ses_client):
    user_id = create_test_user()
    event = ddb_event(ddb_record('MODIFY', order_image(user_id, payment_status='completed'),
                                 order_image(user_id, payment_status='pending')))
    triggers.db_gen_table_stream_trigger(event)
    assert sent_emails(ses_client) == 0


def test_other_record_types_are_ignored(ses_client):
    event = ddb_event(ddb_record('INSERT', {'partkey': 'restaurants', 'sortkey': 'r1', 'record_type': 'restaurant'}),
                      ddb_record('REMOVE', old_image={'partkey': 'p', 'sortkey': 's', 'record_type': 'cart_item'}))
    assert triggers.db_gen_table_stream_trigger(event) == 0
    assert sent_emails(ses_client) == 0


def test_unknown_customer_is_not_notified(ses_client):
    processed = triggers.db_gen_table_stream_trigger(ddb_event(ddb_record('INSERT', order_image('missing-user'))))
    assert processed == 1
    assert sent_emails(ses_client) == 0


def test_failed_record_does_not_stop_batch(ses_client, monkeypatch):
    user_id = create_test_user()
    handled = []

    def flaky_handler(record_old, record_new, event_id, event_name):
        if event_id == '1':
            raise RuntimeError('boom')
        handled.append(event_id)

    monkeypatch.setitem(triggers.gen_table_trigger_func_dict, 'order', flaky_handler)
    event = ddb_event(ddb_record('INSERT', order_image(user_id), event_id='1'),
                      ddb_record('INSERT', order_image(user_id), event_id='2'))
    assert triggers.db_gen_table_stream_trigger(event) == 1
    assert handled == ['2']
