from __future__ import annotations

import math
from decimal import Decimal
import os as _os
from typing import Optional

from .types import BasicBool, BasicNumber, BasicText, BasicValue

DEBUG_PY_TRACE_ENV = "YARXBI_DEBUG_PY_TRACE"


def debug_py_trace_enabled() -> bool:
    """Whether failed runs should also dump the Python traceback."""
    return _os.environ.get(DEBUG_PY_TRACE_ENV, "").lower() in {"1", "true", "yes", "on"}


def parse_number(text: str) -> Optional[float]:
    """Strict decimal parse used for text->number coercion.

    Python's float() tolerates surrounding whitespace, digit separators and
    non-ASCII digits; BASIC text accepts none of them.
    """
    if not text or not text.isascii() or text != text.strip() or "_" in text:
        return None

    try:
        return float(text)
    except ValueError:
        return None


def format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"

    if math.isinf(value):
        return "inf" if value > 0 else "-inf"

    # Shortest round-trip digits, always written out in plain decimal.
    text = format(Decimal(repr(value)), "f")
    if text.endswith(".0"):
        text = text[:-2]
    return text


def stringify(value: BasicValue) -> str:
    match value:
        case BasicText(value=text):
            return text
        case BasicNumber(value=number):
            return format_number(number)
        case BasicBool(value=flag):
            return "true" if flag else "false"

    raise TypeError(f"Not a BASIC value: {value!r}")
