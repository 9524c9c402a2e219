import os

# Fake credentials before boto3 is imported anywhere, moto intercepts every call
os.environ['AWS_ACCESS_KEY_ID'] = 'testing'
os.environ['AWS_SECRET_ACCESS_KEY'] = 'testing'
os.environ['AWS_SECURITY_TOKEN'] = 'testing'
os.environ['AWS_SESSION_TOKEN'] = 'testing'
os.environ['AWS_DEFAULT_REGION'] = 'eu-central-1'
os.environ['AWS_REGION'] = 'eu-central-1'
os.environ.setdefault('GEN_TABLE_NAME', 'food-delivery-test')
os.environ.pop('ENDPOINT_URL', None)

import boto3
import pytest
from chalice.test import Client
from moto import mock_aws

PROJECT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def create_gen_table():
    boto3.resource('dynamodb', region_name='eu-central-1').create_table(
        TableName=os.environ['GEN_TABLE_NAME'],
        KeySchema=[
            {'AttributeName': 'partkey', 'KeyType': 'HASH'},
            {'AttributeName': 'sortkey', 'KeyType': 'RANGE'}
        ],
        AttributeDefinitions=[
            {'AttributeName': 'partkey', 'AttributeType': 'S'},
            {'AttributeName': 'sortkey', 'AttributeType': 'S'}
        ],
        BillingMode='PAY_PER_REQUEST'
    )


@pytest.fixture
def aws():
    with mock_aws():
        yield


@pytest.fixture
def gen_table(aws):
    create_gen_table()
    yield os.environ['GEN_TABLE_NAME']


@pytest.fixture
def chalice_client(aws):
    from app import app

    with Client(app, stage_name='test', project_dir=PROJECT_DIR) as client:
        create_gen_table()
        yield client
