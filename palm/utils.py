import math
from datetime import datetime, timezone

from flask import request

from palm.schemas.query import PageQuery


def utcnow():
    """Current time as a naive UTC datetime, the form every timestamp is stored in"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value):
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_datetime_arg(name):
    """Read an ISO-8601 query parameter, returning None when absent or malformed"""
    raw = request.args.get(name)
    if not raw:
        return None
    try:
        return to_naive_utc(datetime.fromisoformat(raw.replace('Z', '+00:00')))
    except ValueError:
        return None


def isoformat(value):
    return value.isoformat() if value else None


def load_json(schema):
    """Validate the request body against a pydantic model"""
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    return schema.model_validate(payload)


def page_args():
    """Validated page/limit query params; out-of-range values raise a 400"""
    args = PageQuery.model_validate(request.args.to_dict())
    return args.page, args.clamped_limit()


def paginate(query):
    """Apply page/limit query params and build the response meta block"""
    page, limit = page_args()
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    meta = {
        'page': page,
        'limit': limit,
        'total': total,
        'total_pages': math.ceil(total / limit),
    }
    return items, meta


def date_range_filter(query, column):
    start = parse_datetime_arg('start_date')
    end = parse_datetime_arg('end_date')
    if start:
        query = query.filter(column >= start)
    if end:
        query = query.filter(column <= end)
    return query
