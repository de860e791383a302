"""Physical length parsing and mm to pixel conversion."""
from __future__ import annotations

import math
from typing import Optional

from .errors import InvalidUnitError, MalformedNumberError

MM_PER_INCH = 25.4
PX_PER_INCH = 96

_UNIT_FACTORS = {
    "mm": 1.0,
    "in": MM_PER_INCH,
}


def parse_length(value: Optional[str]) -> float:
    """Return the length in millimeters for a string such as ``"10mm"`` or ``"1.5in"``."""
    if value is None:
        raise InvalidUnitError("missing length (expected a value ending in mm or in)")
    for suffix, factor in _UNIT_FACTORS.items():
        if value.endswith(suffix):
            number = value[: -len(suffix)]
            try:
                parsed = float(number)
            except ValueError as exc:
                raise MalformedNumberError(f"malformed number in length {value!r}") from exc
            if "_" in number or not math.isfinite(parsed):
                raise MalformedNumberError(f"malformed number in length {value!r}")
            return parsed * factor
    raise InvalidUnitError(f"unsupported unit in length {value!r} (expected mm or in)")


def mm_to_px(value: float) -> float:
    return value / MM_PER_INCH * PX_PER_INCH
