import functools
import os
import time
from random import uniform

import boto3 as boto3
from botocore.exceptions import ClientError

from chalicelib.utils import exceptions
from chalicelib.utils.boto_clients import aws_config_ddb
from chalicelib.utils.logger import logger, log_exception

# For safe db operations
RETRY_EXCEPTIONS = ('ProvisionedThroughputExceededException', 'ThrottlingException')
need_return_capacity = ('put_item', 'get_item', 'update_item', 'delete_item')
MAX_RETRIES = 15


def exp_db_backoff(func):
    """
        should be used for any atomic
        get/put item in the code
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger.debug(f'{func.__name__}:: args={args}, kwargs={kwargs}')
        if func.__name__ not in need_return_capacity:
            raise RuntimeError("This decorator only for DynamoDB methods")
        kwargs.update({'ReturnConsumedCapacity': 'TOTAL'})
        timeout_seed = uniform(0.1, 0.99)

        for retries in range(MAX_RETRIES):
            try:
                result = func(*args, **kwargs)
                logger.info(f'{func.__name__}:: SUCCESS')
                return result
            except ClientError as e:
                if e.response.get('Error', {}).get('Code') not in RETRY_EXCEPTIONS:
                    log_exception(e, msg=f'Got exception while trying to {func.__name__}: ')
                    raise
                logger.warning(f'{func.__name__}:: throttled, retry number {retries + 1}')
                time.sleep(timeout_seed * 2 ** min(retries, 5) / 10)

        raise exceptions.NumberOfRetriesExceeded(
            f"MaxNumber={MAX_RETRIES} of DB retries has exceeded"
        )

    return wrapper


def get_table(table_name: str):
    if os.environ.get('ENDPOINT_URL'):
        table = boto3.resource('dynamodb', endpoint_url=os.environ.get('ENDPOINT_URL')).Table(table_name)
    else:
        table = boto3.resource('dynamodb', config=aws_config_ddb).Table(table_name)

    table.put_item = exp_db_backoff(table.put_item)
    table.get_item = exp_db_backoff(table.get_item)
    table.update_item = exp_db_backoff(table.update_item)
    table.delete_item = exp_db_backoff(table.delete_item)

    return table


def get_gen_table():
    return get_table(os.environ.get('GEN_TABLE_NAME'))


def put_db_record(item: dict, only_new: bool = False, table=get_gen_table):
    put_item_dict = {'Item': item}
    if only_new:
        put_item_dict['ConditionExpression'] = 'attribute_not_exists(sortkey)'
    try:
        table().put_item(**put_item_dict)
    except ClientError as e:
        if e.response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException':
            raise exceptions.RecordAlreadyExists(
                f"Record partkey={item.get('partkey')} sortkey={item.get('sortkey')} already exists")
        raise



def delete_db_record(key: dict, table=get_gen_table):
    table().delete_item(Key=key)
    logger.info(f"delete_db_record ::: record partkey={key.get('partkey')} sortkey={key.get('sortkey')} deleted")


def update_db_record(key: dict, update_body: dict, allowed_attrs_to_update: list,
                     allowed_attrs_to_delete: list, table=get_gen_table):
    set_expr, set_names, expr_attr_values, remove_expr, remove_names = generate_update_expression(
        update_body=update_body,
        allowed_attrs_to_update=allowed_attrs_to_update,
        allowed_attrs_to_delete=allowed_attrs_to_delete
    )
    update_item_dict = {"Key": key, "ReturnValues": "UPDATED_NEW"}

    set_response = None
    if set_expr:
        set_item_dict = {
            **update_item_dict,
            "UpdateExpression": set_expr,
            "ExpressionAttributeNames": set_names,
            "ExpressionAttributeValues": expr_attr_values
        }
        set_response = table().update_item(**set_item_dict)

    remove_response = None
    if remove_expr:
        remove_item_dict = {
            **update_item_dict,
            "UpdateExpression": remove_expr,
            "ExpressionAttributeNames": remove_names
        }
        remove_response = table().update_item(**remove_item_dict)

    return set_response, remove_response


def generate_update_expression(update_body: dict, allowed_attrs_to_update: list, allowed_attrs_to_delete: list):
    """
    Generate expressions to update and delete attributes.
    if a key of update_body is empty - the attribute is deleted, else - attribute is updated.
    Attribute names always go through placeholders, reserved words (status, name, role) are allowed.
    """
    set_names, expr_attr_values, remove_names = {}, {}, {}
    for field in allowed_attrs_to_update:
        field_value = update_body.get(field, None)
        if field_value is None:
            continue
        # if field is in update_body but is equal to empty string, list etc. - delete field
        if field_value in ['', [], {}] and field in allowed_attrs_to_delete:
            remove_names[f'#{field}'] = field
        else:
            # if field is in update_body and has a real value - update field
            set_names[f'#{field}'] = field
            expr_attr_values[f':{field}'] = field_value

    set_expr = 'SET ' + ', '.join(f'{name}=:{field}' for name, field in set_names.items()) if set_names else None
    remove_expr = 'REMOVE ' + ', '.join(remove_names.keys()) if remove_names else None
    return set_expr, set_names, expr_attr_values, remove_expr, remove_names


def get_db_item(partkey, sortkey, table=get_gen_table):
    result = table().get_item(
        Key={
            'partkey': partkey,
            'sortkey': sortkey
        }
    )

    if 'Item' in result:
        return result['Item']
    else:
        logger.error(f"get_db_item ::: record partkey={partkey} sortkey={sortkey} not found")
        raise exceptions.RecordNotFound(f'record partkey={partkey} sortkey={sortkey} not found')


def query_items_paginated(
        key_condition_expression,
        filter_expression=None,
        projection_expression=None,
        table=get_gen_table,
        index_name=None,
        expr_attr_names=None,
        limit=None,
        start_key=None
):
    kwargs = {'KeyConditionExpression': key_condition_expression}
    if filter_expression:
        kwargs.update({'FilterExpression': filter_expression})

    if projection_expression:
        kwargs.update({'ProjectionExpression': projection_expression})

    if expr_attr_names:
        kwargs.update({'ExpressionAttributeNames': expr_attr_names})

    if limit:
        kwargs.update({'Limit': int(limit)})

    if index_name:
        kwargs.update({'IndexName': index_name})

    if start_key:
        kwargs.update({'ExclusiveStartKey': start_key})

    resp = table().query(**kwargs)
    return resp['Items'], resp.get('LastEvaluatedKey')


def query_items_paged(key_condition_expression, filter_expression=None, projection_expression=None,
                      table=get_gen_table, index_name=None, expr_attr_names=None):
    """ This method shall be used whenever you think the query will
        return more than 1mb of data at once"""
    all_items = []
    items, last_evaluated_key = query_items_paginated(
        key_condition_expression,
        filter_expression=filter_expression,
        projection_expression=projection_expression,
        table=table,
        index_name=index_name,
        expr_attr_names=expr_attr_names
    )
    all_items.extend(items)

    while last_evaluated_key is not None:
        items, last_evaluated_key = query_items_paginated(
            key_condition_expression,
            filter_expression=filter_expression,
            projection_expression=projection_expression,
            table=table,
            index_name=index_name,
            expr_attr_names=expr_attr_names,
            start_key=last_evaluated_key
        )
        all_items.extend(items)

    return all_items
