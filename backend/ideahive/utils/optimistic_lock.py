from flask import request
from datetime import timezone
from dateutil.parser import parse, ParserError

from ideahive.errors import BadRequestError, ConflictError


def normalize_ts(ts):
    """
    Ensure datetime is timezone-aware.
    Defaults to UTC if naive.
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def expected_version_from_request():
    """
    Read the page version the client edited against from If-Match.
    Accepts 3, "3" and W/"3". Returns None when no precondition was sent.
    """
    raw = request.headers.get("If-Match")
    if not raw or raw.strip() == "*":
        return None

    value = raw.strip()
    if value.startswith("W/"):
        value = value[2:]
    value = value.strip('"')

    try:
        version = int(value)
    except ValueError:
        raise BadRequestError("Invalid If-Match header")

    if version < 0:
        raise BadRequestError("Invalid If-Match header")
    return version


def unmodified_since_from_request():
    raw = request.headers.get("If-Unmodified-Since")
    if not raw:
        return None

    try:
        return normalize_ts(parse(raw))
    except (ParserError, ValueError, OverflowError):
        raise BadRequestError("Invalid If-Unmodified-Since header")


def enforce_preconditions(*, current_version, last_edited_at, expected_version=None, unmodified_since=None):
    """
    Raises ConflictError when the page moved on since the client last saw it.
    """
    if expected_version is not None and expected_version != current_version:
        raise ConflictError(
            f"Page is at version {current_version}, not {expected_version}"
        )

    if unmodified_since is not None and last_edited_at is not None:
        # HTTP dates carry whole seconds only
        server_ts = normalize_ts(last_edited_at).replace(microsecond=0)
        if server_ts > unmodified_since:
            raise ConflictError("Conflict detected. Page content has been modified.")
