from flask import request, abort
from dateutil.parser import parse, ParserError

from app.utils.clock import normalize_ts


def enforce_optimistic_lock(entity):
    """
    Enforces optimistic locking using the If-Unmodified-Since header.
    Raises 409 Conflict if the entity has been modified since.
    """
    client_ts = request.headers.get("If-Unmodified-Since")
    if not client_ts:
        return  # No optimistic lock requested

    try:
        client_ts = normalize_ts(parse(client_ts))
    except (ParserError, ValueError, OverflowError):
        abort(400, description="Invalid If-Unmodified-Since header")

    if entity.updated_at is None:
        return

    server_ts = normalize_ts(entity.updated_at)

    # HTTP dates carry whole seconds only
    if server_ts.replace(microsecond=0) > client_ts:
        abort(
            409,
            description="Conflict detected. Resource has been modified."
        )
