import json
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from chalicelib.constants.constants import CENTS
from chalicelib.utils.exceptions import ValidationException


def replace_dict_key(item, orig_key, new_key):
    if orig_key in item:
        if new_key not in item:
            item[new_key] = item[orig_key]
        del item[orig_key]


def substitute_keys(dict_to_process: dict, base_keys: dict, opt_dict=None):
    if opt_dict is None:
        opt_dict = {}
    all_keys = {**base_keys, **opt_dict}
    for key, val in all_keys.items():
        if val:
            replace_dict_key(dict_to_process, key, val)
        elif key in dict_to_process.keys():
            dict_to_process.pop(key, None)


def parse_raw_body(chalice_request):
    request_raw_body = chalice_request.raw_body
    if request_raw_body:
        try:
            return fix_values_from_ui(item=json.loads(request_raw_body))
        except ValueError as error:
            raise ValidationException(f'Request body is not a valid JSON: {error}')
    else:
        return {}


def fix_values_from_ui(item):
    """
    Remove keys with empty or None values and transform float to Decimal
    """
    if not isinstance(item, dict):
        raise ValidationException('Request body must be a JSON object')
    if item.get('_values_from_ui_strategy') == 'delete_empty':
        list_to_cleanup = ['', None]
    else:
        list_to_cleanup = [None]
    item = cleanup_dict(item, list_to_cleanup)
    item.pop('_values_from_ui_strategy', None)
    result = json.dumps(item)
    return json.loads(result, parse_float=Decimal)


def cleanup_dict(item: dict, list_of_values: list):
    """ Remove None fields in dict with. Supports one nesting.  """

    def sub_clean(sub_item):
        return {
            key: value
            for key, value in sub_item.items()
            if value not in list_of_values
        }

    clean = {}
    for k, v in item.items():
        if isinstance(v, dict):
            nested = sub_clean(v)
            if len(nested.keys()) > 0:
                clean[k] = nested
        elif v not in list_of_values:
            clean[k] = v
    return clean


def to_money(value: Any) -> Any:
    """
    Converts int/float/str/Decimal to Decimal quantized to cents, None for anything else
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float, str, Decimal)):
        try:
            return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)
        except ArithmeticError:
            return None
    return None


def to_int(value: Any, default: Any = None) -> Any:
    if isinstance(value, bool):
        return default
    if isinstance(value, Decimal) and value == value.to_integral_value():
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip('-').isdigit():
        return int(value)
    return default


def is_int(value: Any) -> bool:
    return not isinstance(value, bool) and isinstance(value, (int, Decimal)) and value == int(value)


def now_iso() -> str:
    return datetime.now().isoformat(timespec='seconds')
