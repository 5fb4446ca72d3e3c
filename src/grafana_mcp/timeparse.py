"""Time expressions used by metric range queries."""

import re
import time
from datetime import datetime
from typing import Optional

from .errors import TimeFormatError

_RELATIVE = re.compile(r"^(\d+)([smhd])$")
_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


def resolve_time(expr: str, now: Optional[float] = None) -> int:
    """Resolve a time expression to epoch seconds.

    Accepts "now", a relative offset before now such as "30m" or "2d",
    or an ISO 8601 timestamp. Timestamps without an offset are read in
    local time.

    Raises:
        TimeFormatError: expr matches none of the above
    """
    current = int(now if now is not None else time.time())

    if expr == "now":
        return current

    match = _RELATIVE.match(expr)
    if match:
        value, unit = match.groups()
        return current - int(value) * _UNIT_SECONDS[unit]

    iso = expr[:-1] + "+00:00" if expr.endswith(("Z", "z")) else expr
    try:
        return int(datetime.fromisoformat(iso).timestamp())
    except (TypeError, ValueError):
        raise TimeFormatError(f"Invalid time expression: '{expr}'") from None
