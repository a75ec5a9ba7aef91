"""
Opaque cursors for message history paging.

A cursor names the oldest message a client has loaded: its
(created_at, id) position encoded as urlsafe base64. Clients pass it
back unchanged to fetch the next older page.
"""
import base64
import binascii
from datetime import datetime
from typing import Tuple

from app.core.exceptions import ValidationFailed
from app.utils.datetime_utils import parse_iso_utc, to_iso_utc

_SEPARATOR = "|"


def encode_cursor(created_at: datetime, message_id: str) -> str:
    """
    Encode a (created_at, id) position.

    Example:
        >>> encode_cursor(datetime(2026, 5, 1, tzinfo=timezone.utc), "m1")
        'MjAyNi0wNS0wMVQwMDowMDowMFp8bTE='
    """
    raw = f"{to_iso_utc(created_at)}{_SEPARATOR}{message_id}"
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii")


def decode_cursor(cursor: str) -> Tuple[datetime, str]:
    """
    Decode a cursor produced by encode_cursor.

    Raises:
        ValidationFailed: If the cursor is malformed
    """
    try:
        raw = base64.urlsafe_b64decode(cursor.encode("ascii")).decode("utf-8")
        timestamp, message_id = raw.split(_SEPARATOR, 1)
        created_at = parse_iso_utc(timestamp)
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise ValidationFailed("Invalid pagination cursor", reason="invalid_cursor") from e

    if not message_id:
        raise ValidationFailed("Invalid pagination cursor", reason="invalid_cursor")

    return created_at, message_id
