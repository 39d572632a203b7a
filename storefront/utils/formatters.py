from __future__ import annotations

import math
from decimal import Decimal
from typing import Any


def is_number(v: Any) -> bool:
    return isinstance(v, (int, float, Decimal)) and not isinstance(v, bool)


def format_price(v: Any) -> str:
    if not is_number(v) or math.isnan(float(v)):
        return "$0.00"
    v = float(v)
    sign = "-" if v < 0 else ""
    return f"{sign}${abs(v):,.2f}"
