from flask import request, abort
from datetime import timezone
from dateutil.parser import parse


def normalize_ts(ts):
    """
    Ensure datetime is timezone-aware.
    Defaults to UTC if naive.
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def enforce_optimistic_lock(block):
    """
    Enforces optimistic locking on a content block using the
    If-Unmodified-Since header. Aborts with 409 if the block changed since.

    HTTP dates carry whole seconds only, so the stored timestamp is
    compared at second precision.
    """
    client_ts = request.headers.get("If-Unmodified-Since")
    if not client_ts:
        return  # No optimistic lock requested

    try:
        client_ts = normalize_ts(parse(client_ts))
    except (ValueError, OverflowError):
        abort(400, description="Invalid If-Unmodified-Since header")

    server_ts = normalize_ts(block.updated_at).replace(microsecond=0)

    if server_ts > client_ts:
        abort(
            409,
            description=f"Conflict detected. Block '{block.slug}' has been modified."
        )
