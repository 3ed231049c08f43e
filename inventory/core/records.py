"""Helpers shared by the domain record schemas."""

import logging
import math
from typing import Any, Optional

logger = logging.getLogger(__name__)


def coerce_number(value: Any) -> Optional[float]:
    """
    Lenient numeric coercion for record fields read from the store.

    Missing or unparsable values become None instead of failing validation,
    so one malformed row cannot break a whole listing or report.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            logger.debug(f"Non-numeric value {value!r} treated as missing")
            return None
        return number if math.isfinite(number) else None
    logger.debug(f"Unsupported numeric value {value!r} treated as missing")
    return None
