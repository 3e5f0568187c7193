"""Unbounded reads over a Protean DAO query.

A bare ``query.all()`` stops at the aggregate's default limit of 100, so list
and dashboard reads page through the query until a short page comes back.
"""

PAGE_SIZE = 100


def fetch_all(query, order_by="-created_at", page_size=PAGE_SIZE):
    """Return every record matched by ``query``, ordered by ``order_by``."""
    if order_by:
        query = query.order_by(order_by)

    records = []
    offset = 0
    while True:
        page = query.offset(offset).limit(page_size).all().items
        records.extend(page)
        if len(page) < page_size:
            return records
        offset += page_size
