"""HTTP caching helpers for static USDA data."""

from datetime import datetime, timedelta, timezone
from email.utils import format_datetime, parsedate_to_datetime

from fastapi import Request, Response

from grubprint_api.db.stores.base import RecordStore

CACHE_CONTROL = "public, max-age=86400"


def _published_at(store: RecordStore) -> datetime | None:
    published = store.published_at
    if published is None:
        return None
    # Mongo hands back naive UTC datetimes
    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)
    return published.astimezone(timezone.utc)


def set_cache_headers(response: Response, store: RecordStore) -> None:
    """Mark a response cacheable; data only changes on publish."""
    response.headers["Cache-Control"] = CACHE_CONTROL
    published = _published_at(store)
    if published is not None:
        response.headers["Last-Modified"] = format_datetime(published, usegmt=True)


def is_not_modified(request: Request, store: RecordStore) -> bool:
    """Whether If-Modified-Since shows the client copy is still current."""
    since = request.headers.get("If-Modified-Since")
    published = _published_at(store)
    if not since or published is None:
        return False
    try:
        client_time = parsedate_to_datetime(since)
    except (TypeError, ValueError):
        return False
    if client_time.tzinfo is None:
        return False
    # HTTP dates have one-second resolution
    return published < client_time + timedelta(seconds=1)


def not_modified_response(store: RecordStore) -> Response:
    response = Response(status_code=304)
    set_cache_headers(response, store)
    return response
