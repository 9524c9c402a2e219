# Keys renamed on the way to the db. An empty value means "drop the key".
to_db = {
    'id': 'id_',
    'comment': 'comment_'
}

from_db = {
    'id_': 'id',
    'comment_': 'comment',
    'partkey': None,
    'sortkey': None,
    'password_hash': None
}
