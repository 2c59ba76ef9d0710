"""
opencafe.services.common

Small helpers shared by the collection services.
"""

from __future__ import annotations

import secrets
from collections.abc import Awaitable, Callable
from typing import Any

from opencafe.errors import InvalidArgument

MISSING_FIELDS = "One or more of the request fields is not specified!"

# Public ids are positive signed 31-bit ints.
PUBLIC_ID_BOUND = 2**31 - 1


def require_fields(*values: Any) -> None:
    for value in values:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise InvalidArgument(MISSING_FIELDS)


def random_public_id() -> int:
    return secrets.randbelow(PUBLIC_ID_BOUND - 1) + 1


async def unused_public_id(
    lookup: Callable[[int], Awaitable[Any]],
    *,
    generate: Callable[[], int] = random_public_id,
) -> int:
    candidate = generate()
    while await lookup(candidate) is not None:
        candidate = generate()
    return candidate


def parse_int(raw: str, *, what: str) -> int:
    try:
        return int(str(raw).strip())
    except ValueError:
        raise InvalidArgument(f"The provided {what} ({raw}) is not a valid integer!") from None
