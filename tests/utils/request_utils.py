import json
from typing import Optional

from chalice.test import Client


def make_request(client: Client, endpoint: str = '/', method: str = 'GET',
                 query: Optional[str] = None, json_body=None, token=None):
    """Request to the local gateway, the token goes to the Authorization header"""
    headers = {'Content-Type': 'application/json', 'Host': 'test-domain.com'}
    if token:
        headers['Authorization'] = token
    return client.http.request(
        method=method,
        path=f"{endpoint}?{query}" if query else f"{endpoint}",
        headers=headers,
        body=json.dumps(json_body) if json_body is not None else b''
    )
